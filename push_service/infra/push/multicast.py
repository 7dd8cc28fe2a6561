"""Multicast send with per-recipient partial-failure retry.

One logical send may take several round trips. After each parsed response the
ledger is updated by position, and only recipients whose latest outcome is
retryable (``Unavailable`` or ``InternalServerError``) are sent again.
A failed round trip, whatever its HTTP status, only costs an attempt. The
final :class:`AggregateResult` is ordered like the input, whatever order the
recipients were resolved in.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

from push_service.infra.push.constants import RETRYABLE_ERRORS
from push_service.infra.push.dispatcher import SleepFunc
from push_service.infra.push.exceptions import (
    PushParseError,
    PushProtocolError,
    PushRetryExhaustedError,
    PushTransportError,
    PushUsageError,
)
from push_service.infra.push.ledger import ResultLedger, select_retry_set
from push_service.infra.push.metrics import (
    track_outcomes,
    track_retry,
    track_retry_exhausted,
)
from push_service.infra.push.parser import parse_multicast_response
from push_service.infra.push.payload import build_request_body
from push_service.infra.push.results import (
    AggregateResult,
    AttemptRecord,
    AttemptResult,
    MulticastResponse,
    Ok,
    Retryable,
    Success,
)
from push_service.infra.push.schemas import Message
from push_service.infra.push.transport import PushTransport
from push_service.utils.retry import BackoffScheduler, RetryStatistics

logger = logging.getLogger(__name__)

OPERATION = "multicast"


def _require_recipients(recipients: Sequence[str] | None) -> list[str]:
    if not recipients:
        msg = "Recipient list cannot be empty"
        raise PushUsageError(msg)
    return list(recipients)


def build_aggregate(
    recipients: Sequence[str],
    ledger: ResultLedger,
    multicast_ids: Sequence[int],
    attempts: Sequence[AttemptRecord] = (),
) -> AggregateResult:
    """Merge the ledger into a result ordered like ``recipients``.

    ``multicast_ids`` must hold at least one id; the first becomes the primary.
    """
    outcomes = ledger.outcomes_for(recipients)
    successes = [outcome for outcome in outcomes if isinstance(outcome, Success)]
    return AggregateResult(
        total=len(recipients),
        success_count=len(successes),
        failure_count=len(outcomes) - len(successes),
        canonical_id_count=sum(1 for outcome in successes if outcome.canonical_id is not None),
        primary_multicast_id=multicast_ids[0],
        retry_multicast_ids=tuple(multicast_ids[1:]),
        recipients=tuple(recipients),
        ordered_outcomes=outcomes,
        attempts=tuple(attempts),
    )


class MulticastOrchestrator:
    """Sends one message to many recipients and reconciles partial failures."""

    def __init__(
        self,
        transport: PushTransport,
        scheduler: BackoffScheduler | None = None,
        sleep: SleepFunc = asyncio.sleep,
        retryable_errors: frozenset[str] = RETRYABLE_ERRORS,
    ) -> None:
        self.transport = transport
        self.scheduler = scheduler or BackoffScheduler()
        self.sleep = sleep
        self.retryable_errors = retryable_errors

    async def send_no_retry(
        self,
        message: Message,
        recipients: Sequence[str],
    ) -> AttemptResult[MulticastResponse]:
        """Perform exactly one multicast attempt.

        Any failed round trip, including a non-200 status, is ``Retryable``;
        only a parsed response is ``Ok``.

        Raises:
            PushUsageError: If ``recipients`` is empty.
        """
        recipients = _require_recipients(recipients)
        payload = build_request_body(message, registration_ids=recipients)
        try:
            body = await self.transport.post(payload, operation=OPERATION)
            return Ok(parse_multicast_response(body, recipients))
        except PushTransportError as e:
            return Retryable(reason="transport", error=e)
        except PushProtocolError as e:
            return Retryable(reason="protocol", error=e)
        except PushParseError as e:
            return Retryable(reason="parse", error=e)

    async def send(
        self,
        message: Message,
        recipients: Sequence[str],
        retries: int,
    ) -> AggregateResult:
        """Send to every recipient, retrying the retryable ones.

        Raises:
            PushUsageError: If ``recipients`` is empty or ``retries`` is negative.
            PushRetryExhaustedError: If no attempt produced a parsed response.
        """
        recipients = _require_recipients(recipients)
        if retries < 0:
            msg = "retries must be >= 0"
            raise PushUsageError(msg)

        max_attempts = retries + 1
        statistics = RetryStatistics(start_time=time.monotonic())
        ledger = ResultLedger(recipients)
        unresolved = list(recipients)
        multicast_ids: list[int] = []
        attempts: list[AttemptRecord] = []
        ceiling = self.scheduler.initial_ceiling
        last_error: Exception | None = None

        for attempt in range(1, max_attempts + 1):
            statistics.attempts = attempt
            sent = tuple(unresolved)
            result = await self.send_no_retry(message, sent)

            if isinstance(result, Ok):
                response = result.value
                multicast_ids.append(response.multicast_id)
                ledger.record(sent, response.outcomes)
                attempts.append(
                    AttemptRecord(
                        attempt_number=attempt,
                        recipients=sent,
                        multicast_id=response.multicast_id,
                        outcomes=response.outcomes,
                    )
                )
                unresolved = select_retry_set(sent, ledger, self.retryable_errors)
                logger.debug(
                    f"multicast_id on attempt #{attempt}: {response.multicast_id}",
                    extra={
                        "attempt": attempt,
                        "multicast_id": response.multicast_id,
                        "sent": len(sent),
                        "unresolved": len(unresolved),
                    },
                )
                if not unresolved:
                    break
                reason = "partial"
            else:
                attempts.append(AttemptRecord.failed(attempt, sent, str(result.error)))
                last_error = result.error
                reason = result.reason

            if attempt < max_attempts:
                delay, ceiling = self.scheduler.next(ceiling)
                statistics.record_retry(delay, reason)
                track_retry(OPERATION, delay)
                logger.warning(
                    f"Retrying {len(unresolved)} recipients after {delay:.2f}s "
                    f"(attempt {attempt}/{max_attempts})",
                    extra={
                        "attempt": attempt,
                        "max_attempts": max_attempts,
                        "delay": delay,
                        "reason": reason,
                        "unresolved": len(unresolved),
                    },
                )
                await self.sleep(delay)

        statistics.end_time = time.monotonic()

        if not multicast_ids:
            track_retry_exhausted(OPERATION)
            logger.error(
                "All multicast attempts failed without a response",
                extra={
                    "attempts": statistics.attempts,
                    "recipients": len(recipients),
                    "total_delay": statistics.total_delay,
                    "duration": statistics.duration,
                },
            )
            raise PushRetryExhaustedError(
                attempts=statistics.attempts,
                last_exception=last_error,
                statistics=statistics,
                operation="post multicast request",
            )

        aggregate = build_aggregate(recipients, ledger, multicast_ids, attempts)
        track_outcomes(aggregate.ordered_outcomes)
        logger.info(
            "Multicast finished",
            extra={
                "multicast_id": aggregate.primary_multicast_id,
                "total": aggregate.total,
                "success": aggregate.success_count,
                "failure": aggregate.failure_count,
                "canonical_ids": aggregate.canonical_id_count,
                "attempts": statistics.attempts,
            },
        )
        return aggregate


__all__ = ["MulticastOrchestrator", "build_aggregate"]
