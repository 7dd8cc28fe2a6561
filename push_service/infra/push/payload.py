"""Map a :class:`Message` to the JSON request body."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from push_service.infra.push.constants import (
    PARAM_COLLAPSE_KEY,
    PARAM_CONTENT_AVAILABLE,
    PARAM_DATA,
    PARAM_DELAY_WHILE_IDLE,
    PARAM_DRY_RUN,
    PARAM_NOTIFICATION,
    PARAM_PRIORITY,
    PARAM_REGISTRATION_IDS,
    PARAM_RESTRICTED_PACKAGE_NAME,
    PARAM_TIME_TO_LIVE,
    PARAM_TO,
)
from push_service.infra.push.exceptions import PushUsageError
from push_service.infra.push.schemas import Message, Notification


def _notification_body(notification: Notification) -> dict[str, Any]:
    body = notification.model_dump(exclude_none=True)
    # The service expects the badge as a string
    if "badge" in body:
        body["badge"] = str(body["badge"])
    return body


def build_request_body(
    message: Message,
    *,
    to: str | None = None,
    registration_ids: Sequence[str] | None = None,
) -> dict[str, Any]:
    """Build the request body for a single target or a list of recipients.

    Exactly one of ``to`` or ``registration_ids`` must be given. Unset
    options are omitted, as is an empty data map.

    Raises:
        PushUsageError: If neither or both targets are given.
    """
    if (to is None) == (registration_ids is None):
        msg = "Exactly one of 'to' or 'registration_ids' must be provided"
        raise PushUsageError(msg)

    body: dict[str, Any] = {}
    if to is not None:
        body[PARAM_TO] = to
    else:
        body[PARAM_REGISTRATION_IDS] = list(registration_ids or ())

    options = {
        PARAM_COLLAPSE_KEY: message.collapse_key,
        PARAM_DELAY_WHILE_IDLE: message.delay_while_idle,
        PARAM_DRY_RUN: message.dry_run,
        PARAM_RESTRICTED_PACKAGE_NAME: message.restricted_package_name,
        PARAM_TIME_TO_LIVE: message.time_to_live,
        PARAM_PRIORITY: message.priority.value if message.priority else None,
        PARAM_CONTENT_AVAILABLE: message.content_available,
    }
    body.update({key: value for key, value in options.items() if value is not None})

    if message.data:
        body[PARAM_DATA] = dict(message.data)
    if message.notification is not None:
        body[PARAM_NOTIFICATION] = _notification_body(message.notification)

    return body
