"""Response parsing for the legacy HTTP send endpoint.

Turns raw response bodies into typed outcomes. Every structural surprise is
reported as :class:`PushParseError`; deciding whether that is worth another
attempt is left to the caller.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Sequence
from typing import Any

from push_service.infra.push.constants import (
    JSON_CANONICAL_IDS,
    JSON_ERROR,
    JSON_FAILED_REGISTRATION_IDS,
    JSON_FAILURE,
    JSON_MESSAGE_ID,
    JSON_MULTICAST_ID,
    JSON_REGISTRATION_ID,
    JSON_RESULTS,
    JSON_SUCCESS,
    NO_RESULT_ERROR,
    TOPIC_PREFIX,
)
from push_service.infra.push.exceptions import PushParseError
from push_service.infra.push.results import (
    Failure,
    GroupOutcome,
    MulticastResponse,
    Outcome,
    SingleOutcome,
    Success,
)

logger = logging.getLogger(__name__)


class AmbiguousResponseError(PushParseError):
    """A single-target response carried zero or several results."""

    def __init__(self, count: int, body: str | None = None) -> None:
        super().__init__(f"found {count} results, expected one", body)
        self.count = count


def parse_json(body: str) -> dict[str, Any]:
    """Decode a response body that must be a JSON object."""
    try:
        data = json.loads(body)
    except (TypeError, ValueError) as e:
        raise PushParseError(f"invalid JSON: {e}", body) from e
    if not isinstance(data, dict):
        raise PushParseError(f"expected a JSON object, got {type(data).__name__}", body)
    return data


def _get_number(data: dict[str, Any], key: str, body: str) -> int:
    value = data.get(key)
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise PushParseError(f"missing or non-numeric field {key!r}", body)
    # json accepts NaN and Infinity
    if isinstance(value, float) and not math.isfinite(value):
        raise PushParseError(f"non-finite value in field {key!r}", body)
    return int(value)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _parse_result_entry(entry: Any, body: str) -> Outcome:
    if not isinstance(entry, dict):
        raise PushParseError("result entry is not a JSON object", body)

    message_id = entry.get(JSON_MESSAGE_ID)
    if message_id is not None:
        return Success(
            message_id=str(message_id),
            canonical_id=_optional_str(entry.get(JSON_REGISTRATION_ID)),
        )

    error = entry.get(JSON_ERROR)
    if error is not None:
        return Failure(error_code=str(error))

    return Failure(error_code=NO_RESULT_ERROR)


def _is_empty_entry(entry: Any) -> bool:
    return (
        isinstance(entry, dict)
        and entry.get(JSON_MESSAGE_ID) is None
        and entry.get(JSON_ERROR) is None
    )


def _parse_results_array(data: dict[str, Any], body: str) -> list[Any]:
    results = data.get(JSON_RESULTS)
    if not isinstance(results, list):
        raise PushParseError(f"field {JSON_RESULTS!r} is not an array", body)
    return results


def parse_single_response(body: str, to: str) -> SingleOutcome:
    """Parse the response to a request addressed with ``to``.

    The shape depends on the target: a device token gets a one-element
    ``results`` array, a topic gets a top-level ``message_id`` or ``error``,
    and a device group gets aggregate ``success``/``failure`` counts.

    Raises:
        AmbiguousResponseError: If ``results`` does not hold exactly one entry.
        PushParseError: If the body is malformed or has no recognized shape.
    """
    data = parse_json(body)

    if JSON_RESULTS in data:
        results = _parse_results_array(data, body)
        if len(results) != 1:
            logger.warning(
                f"Found {len(results)} results, expected one",
                extra={"to": to, "result_count": len(results)},
            )
            raise AmbiguousResponseError(len(results), body)
        if _is_empty_entry(results[0]):
            raise PushParseError(
                f"result has neither {JSON_MESSAGE_ID!r} nor {JSON_ERROR!r}", body
            )
        return _parse_result_entry(results[0], body)

    if to.startswith(TOPIC_PREFIX):
        if data.get(JSON_MESSAGE_ID) is not None:
            return Success(message_id=str(data[JSON_MESSAGE_ID]))
        if data.get(JSON_ERROR) is not None:
            return Failure(error_code=str(data[JSON_ERROR]))
        logger.warning(
            f"Expected {JSON_MESSAGE_ID} or {JSON_ERROR} in topic response",
            extra={"to": to},
        )
        raise PushParseError(f"expected {JSON_MESSAGE_ID!r} or {JSON_ERROR!r}", body)

    if JSON_SUCCESS in data and JSON_FAILURE in data:
        failed_ids = data.get(JSON_FAILED_REGISTRATION_IDS)
        if failed_ids is not None and not isinstance(failed_ids, list):
            raise PushParseError(
                f"field {JSON_FAILED_REGISTRATION_IDS!r} is not an array", body
            )
        return GroupOutcome(
            success=_get_number(data, JSON_SUCCESS, body),
            failure=_get_number(data, JSON_FAILURE, body),
            failed_registration_ids=(
                tuple(str(item) for item in failed_ids) if failed_ids is not None else None
            ),
        )

    logger.warning("Unrecognized response", extra={"to": to})
    raise PushParseError("unrecognized response", body)


def parse_multicast_response(body: str, recipients: Sequence[str]) -> MulticastResponse:
    """Parse the response to a request addressed with ``registration_ids``.

    ``recipients`` is the exact list that was submitted; the ``results`` array
    must have the same length so outcomes can be aligned by position.

    Raises:
        PushParseError: If the body is malformed, a count is missing or not a
            number, or the result count differs from the recipient count.
    """
    data = parse_json(body)

    success = _get_number(data, JSON_SUCCESS, body)
    failure = _get_number(data, JSON_FAILURE, body)
    canonical_ids = _get_number(data, JSON_CANONICAL_IDS, body)
    multicast_id = _get_number(data, JSON_MULTICAST_ID, body)

    results = _parse_results_array(data, body)
    if len(results) != len(recipients):
        raise PushParseError(
            f"got {len(results)} results for {len(recipients)} recipients", body
        )

    return MulticastResponse(
        multicast_id=multicast_id,
        success=success,
        failure=failure,
        canonical_ids=canonical_ids,
        outcomes=tuple(_parse_result_entry(entry, body) for entry in results),
    )


__all__ = [
    "AmbiguousResponseError",
    "parse_json",
    "parse_multicast_response",
    "parse_single_response",
]
