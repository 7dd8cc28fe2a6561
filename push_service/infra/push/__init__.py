"""Push notification delivery over the legacy HTTP send endpoint.

Sends one message to a device token, topic or device group, or to a list of
device tokens with per-recipient retry of transient failures.

Usage:
    from push_service.infra.push import Message, Success, get_push_client

    async with get_push_client() as client:
        result = await client.send_multicast(Message(data={"k": "v"}), tokens)
        print(result.success_count, result.failed_recipients())
"""

from push_service.infra.push.client import PushClient, get_push_client
from push_service.infra.push.constants import (
    RETRYABLE_ERRORS,
    SEND_ENDPOINT,
    TOPIC_PREFIX,
    PushErrorCode,
)
from push_service.infra.push.dispatcher import SingleRecipientDispatcher
from push_service.infra.push.exceptions import (
    PushError,
    PushParseError,
    PushProtocolError,
    PushRetryExhaustedError,
    PushTransportError,
    PushUsageError,
)
from push_service.infra.push.ledger import ResultLedger, select_retry_set
from push_service.infra.push.multicast import MulticastOrchestrator
from push_service.infra.push.results import (
    AggregateResult,
    AttemptRecord,
    Failure,
    Fatal,
    GroupOutcome,
    Indeterminate,
    MulticastResponse,
    Ok,
    Outcome,
    Retryable,
    Success,
)
from push_service.infra.push.schemas import Message, MessagePriority, Notification
from push_service.infra.push.transport import PushTransport

__all__ = [
    "RETRYABLE_ERRORS",
    "SEND_ENDPOINT",
    "TOPIC_PREFIX",
    "AggregateResult",
    "AttemptRecord",
    "Failure",
    "Fatal",
    "GroupOutcome",
    "Indeterminate",
    "Message",
    "MessagePriority",
    "MulticastOrchestrator",
    "MulticastResponse",
    "Notification",
    "Ok",
    "Outcome",
    "PushClient",
    "PushError",
    "PushErrorCode",
    "PushParseError",
    "PushProtocolError",
    "PushRetryExhaustedError",
    "PushTransport",
    "PushTransportError",
    "PushUsageError",
    "Retryable",
    "ResultLedger",
    "SingleRecipientDispatcher",
    "Success",
    "get_push_client",
    "select_retry_set",
]
