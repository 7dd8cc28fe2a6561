"""Single-target send with retry.

A single target is a device token, a topic (``/topics/...``) or a device
group key. One attempt is classified as:

- ``Ok(outcome)``: the service answered and the answer was understood
- ``Retryable``: transport failure, transient 5xx, or an unusable body
- ``Fatal``: any other non-200 status, never retried
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from push_service.infra.push.exceptions import (
    PushParseError,
    PushProtocolError,
    PushRetryExhaustedError,
    PushTransportError,
    PushUsageError,
)
from push_service.infra.push.metrics import track_retry, track_retry_exhausted
from push_service.infra.push.parser import parse_single_response
from push_service.infra.push.payload import build_request_body
from push_service.infra.push.results import (
    AttemptResult,
    Fatal,
    Ok,
    Retryable,
    SingleOutcome,
)
from push_service.infra.push.schemas import Message
from push_service.infra.push.transport import PushTransport
from push_service.utils.retry import BackoffScheduler, RetryStatistics

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]

OPERATION = "single"


def classify_error(error: Exception) -> Retryable | Fatal:
    """Map a failed attempt's exception to its retry intent."""
    if isinstance(error, PushTransportError):
        return Retryable(reason="transport", error=error)
    if isinstance(error, PushProtocolError):
        if error.is_transient:
            return Retryable(reason="protocol", error=error)
        return Fatal(error=error)
    if isinstance(error, PushParseError):
        return Retryable(reason="parse", error=error)
    return Fatal(error=error)


class SingleRecipientDispatcher:
    """Sends a message to one target, retrying with exponential backoff."""

    def __init__(
        self,
        transport: PushTransport,
        scheduler: BackoffScheduler | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.transport = transport
        self.scheduler = scheduler or BackoffScheduler()
        self.sleep = sleep

    async def send_no_retry(self, message: Message, to: str) -> AttemptResult[SingleOutcome]:
        """Perform exactly one attempt.

        Raises:
            PushUsageError: If ``to`` is empty.
        """
        if not to:
            msg = "Target 'to' is required"
            raise PushUsageError(msg)

        payload = build_request_body(message, to=to)
        try:
            body = await self.transport.post(payload, operation=OPERATION)
            return Ok(parse_single_response(body, to))
        except (PushTransportError, PushProtocolError, PushParseError) as e:
            return classify_error(e)

    async def send(self, message: Message, to: str, retries: int) -> SingleOutcome:
        """Send with up to ``retries`` additional attempts.

        Returns:
            The outcome of the first attempt that produced one.

        Raises:
            PushUsageError: If ``to`` is empty or ``retries`` is negative.
            PushProtocolError: On a non-transient HTTP status.
            PushRetryExhaustedError: If no attempt produced an outcome.
        """
        if not to:
            msg = "Target 'to' is required"
            raise PushUsageError(msg)
        if retries < 0:
            msg = "retries must be >= 0"
            raise PushUsageError(msg)

        max_attempts = retries + 1
        statistics = RetryStatistics(start_time=time.monotonic())
        ceiling = self.scheduler.initial_ceiling
        last_error: Exception | None = None

        for attempt in range(1, max_attempts + 1):
            statistics.attempts = attempt
            result = await self.send_no_retry(message, to)

            if isinstance(result, Ok):
                if attempt > 1:
                    logger.info(
                        f"Sent to {to} after {attempt} attempts",
                        extra={"to": to, "attempts": attempt},
                    )
                return result.value

            if isinstance(result, Fatal):
                logger.warning(
                    f"Non-retryable error sending to {to}: {result.error}",
                    extra={"to": to, "attempt": attempt, "exception": str(result.error)},
                )
                raise result.error

            last_error = result.error
            if attempt < max_attempts:
                delay, ceiling = self.scheduler.next(ceiling)
                statistics.record_retry(delay, result.reason)
                track_retry(OPERATION, delay)
                logger.warning(
                    f"Retrying send to {to} after {delay:.2f}s (attempt {attempt}/{max_attempts})",
                    extra={
                        "to": to,
                        "attempt": attempt,
                        "max_attempts": max_attempts,
                        "delay": delay,
                        "reason": result.reason,
                    },
                )
                await self.sleep(delay)

        statistics.end_time = time.monotonic()
        track_retry_exhausted(OPERATION)
        logger.error(
            f"All retry attempts exhausted sending to {to}",
            extra={
                "to": to,
                "attempts": max_attempts,
                "total_delay": statistics.total_delay,
                "duration": statistics.duration,
            },
        )
        raise PushRetryExhaustedError(
            attempts=max_attempts,
            last_exception=last_error,
            statistics=statistics,
            operation="send message",
        )


__all__ = ["SingleRecipientDispatcher", "classify_error"]
