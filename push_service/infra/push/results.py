"""Typed outcomes for push delivery.

Per-recipient outcomes are small frozen dataclasses forming a tagged union:

    match outcome:
        case Success(message_id=mid, canonical_id=None): ...
        case Success(canonical_id=new_token): ...  # replace the stored token
        case Failure(error_code="NotRegistered"): ...  # drop the token
        case Indeterminate(): ...

A single request attempt yields one of :class:`Ok`, :class:`Retryable` or
:class:`Fatal`, so retry loops branch on intent instead of on ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


# =============================================================================
# Per-recipient outcomes
# =============================================================================


@dataclass(frozen=True)
class Success:
    """The service accepted the message for this recipient.

    Attributes:
        message_id: Service-assigned message id.
        canonical_id: Replacement identifier the caller should store for this
            recipient from now on, if the service reported one.
    """

    message_id: str
    canonical_id: str | None = None

    @property
    def has_canonical_id(self) -> bool:
        return self.canonical_id is not None


@dataclass(frozen=True)
class Failure:
    """The service rejected the message for this recipient."""

    error_code: str


@dataclass(frozen=True)
class Indeterminate:
    """No information was obtained for this recipient."""


Outcome = Success | Failure | Indeterminate


@dataclass(frozen=True)
class GroupOutcome:
    """Aggregate counts returned for a device-group send.

    The service does not say which members failed beyond the optional
    ``failed_registration_ids`` list, which is kept for diagnostics only.
    """

    success: int
    failure: int
    failed_registration_ids: tuple[str, ...] | None = None


SingleOutcome = Success | Failure | GroupOutcome


# =============================================================================
# Tagged attempt results
# =============================================================================


@dataclass(frozen=True)
class Ok(Generic[T]):
    """The attempt produced a usable value."""

    value: T


@dataclass(frozen=True)
class Retryable:
    """The attempt produced nothing usable, but another attempt may.

    Attributes:
        reason: Short machine-friendly label (transport, protocol, parse).
        error: The underlying exception, for logging and exhaustion errors.
    """

    reason: str
    error: Exception | None = None


@dataclass(frozen=True)
class Fatal:
    """The attempt failed in a way retrying cannot fix."""

    error: Exception


AttemptResult = Ok[T] | Retryable | Fatal


# =============================================================================
# Multicast records
# =============================================================================


@dataclass(frozen=True)
class MulticastResponse:
    """One parsed multi-recipient response.

    ``outcomes`` is positionally aligned with the recipients submitted in the
    request that produced it.
    """

    multicast_id: int
    success: int
    failure: int
    canonical_ids: int
    outcomes: tuple[Outcome, ...]

    @property
    def total(self) -> int:
        return self.success + self.failure


@dataclass(frozen=True)
class AttemptRecord:
    """What a single multicast attempt sent and learned."""

    attempt_number: int
    recipients: tuple[str, ...]
    multicast_id: int | None = None
    outcomes: tuple[Outcome, ...] = ()
    error: str | None = None

    @classmethod
    def failed(
        cls,
        attempt_number: int,
        recipients: tuple[str, ...],
        error: str | None = None,
    ) -> AttemptRecord:
        """Mark an attempt that produced no parseable response."""
        return cls(attempt_number=attempt_number, recipients=recipients, error=error)

    @property
    def succeeded(self) -> bool:
        return self.multicast_id is not None


@dataclass(frozen=True)
class AggregateResult:
    """Merged result of every attempt of one multicast send.

    Attributes:
        total: Number of input recipients.
        success_count: Recipients whose final outcome is :class:`Success`.
        failure_count: Every other recipient.
        canonical_id_count: Successes carrying a canonical id.
        primary_multicast_id: Multicast id of the first parsed response.
        retry_multicast_ids: Multicast ids of later parsed responses, in order.
        recipients: The input recipients, in input order.
        ordered_outcomes: Final outcome per recipient, in input order.
        attempts: Chronological attempt records (diagnostics).
    """

    total: int
    success_count: int
    failure_count: int
    canonical_id_count: int
    primary_multicast_id: int
    retry_multicast_ids: tuple[int, ...]
    recipients: tuple[str, ...]
    ordered_outcomes: tuple[Outcome, ...]
    attempts: tuple[AttemptRecord, ...] = field(default=(), compare=False)

    def results_by_recipient(self) -> dict[str, Outcome]:
        """Map each recipient to its final outcome."""
        return dict(zip(self.recipients, self.ordered_outcomes, strict=True))

    def canonical_ids(self) -> dict[str, str]:
        """Recipients whose identifier must be replaced, mapped to the new one."""
        return {
            recipient: outcome.canonical_id
            for recipient, outcome in zip(self.recipients, self.ordered_outcomes, strict=True)
            if isinstance(outcome, Success) and outcome.canonical_id is not None
        }

    def failed_recipients(self) -> list[str]:
        """Recipients that did not end in :class:`Success`, in input order."""
        return [
            recipient
            for recipient, outcome in zip(self.recipients, self.ordered_outcomes, strict=True)
            if not isinstance(outcome, Success)
        ]


__all__ = [
    "AggregateResult",
    "AttemptRecord",
    "AttemptResult",
    "Fatal",
    "Failure",
    "GroupOutcome",
    "Indeterminate",
    "MulticastResponse",
    "Ok",
    "Outcome",
    "Retryable",
    "SingleOutcome",
    "Success",
]
