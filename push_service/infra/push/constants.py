"""Wire-level constants for the legacy HTTP send endpoint."""

from __future__ import annotations

from enum import StrEnum

SEND_ENDPOINT = "https://gcm-http.googleapis.com/gcm/send"
TOPIC_PREFIX = "/topics/"

# Request fields
PARAM_TO = "to"
PARAM_REGISTRATION_IDS = "registration_ids"
PARAM_COLLAPSE_KEY = "collapse_key"
PARAM_DELAY_WHILE_IDLE = "delay_while_idle"
PARAM_DRY_RUN = "dry_run"
PARAM_RESTRICTED_PACKAGE_NAME = "restricted_package_name"
PARAM_TIME_TO_LIVE = "time_to_live"
PARAM_PRIORITY = "priority"
PARAM_CONTENT_AVAILABLE = "content_available"
PARAM_DATA = "data"
PARAM_NOTIFICATION = "notification"

# Response fields
JSON_SUCCESS = "success"
JSON_FAILURE = "failure"
JSON_CANONICAL_IDS = "canonical_ids"
JSON_MULTICAST_ID = "multicast_id"
JSON_RESULTS = "results"
JSON_ERROR = "error"
JSON_MESSAGE_ID = "message_id"
JSON_REGISTRATION_ID = "registration_id"
JSON_FAILED_REGISTRATION_IDS = "failed_registration_ids"


class PushErrorCode(StrEnum):
    """Error tokens reported by the service, per recipient or per topic."""

    QUOTA_EXCEEDED = "QuotaExceeded"
    DEVICE_QUOTA_EXCEEDED = "DeviceQuotaExceeded"
    MISSING_REGISTRATION = "MissingRegistration"
    INVALID_REGISTRATION = "InvalidRegistration"
    MISMATCH_SENDER_ID = "MismatchSenderId"
    NOT_REGISTERED = "NotRegistered"
    MESSAGE_TOO_BIG = "MessageTooBig"
    MISSING_COLLAPSE_KEY = "MissingCollapseKey"
    UNAVAILABLE = "Unavailable"
    INTERNAL_SERVER_ERROR = "InternalServerError"
    INVALID_TTL = "InvalidTtl"


# Recorded for a result entry carrying neither message_id nor error
NO_RESULT_ERROR = "NoResult"

# Per-recipient errors worth another attempt
RETRYABLE_ERRORS: frozenset[str] = frozenset(
    {PushErrorCode.UNAVAILABLE, PushErrorCode.INTERNAL_SERVER_ERROR}
)

# Non-200 statuses treated as "no result this attempt" instead of a hard failure
RETRYABLE_HTTP_STATUSES: frozenset[int] = frozenset({500, 502, 503, 504})
