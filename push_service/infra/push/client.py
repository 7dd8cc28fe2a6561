"""Push client facade.

Wires the transport, backoff scheduler, single-target dispatcher and
multicast orchestrator behind one object.

Usage:
    from push_service.infra.push import Message, get_push_client

    async with get_push_client() as client:
        outcome = await client.send(Message(data={"k": "v"}), "/topics/news")
        result = await client.send_multicast(message, tokens)
        for token, new_token in result.canonical_ids().items():
            ...
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Sequence
from typing import TYPE_CHECKING

import httpx

from push_service.infra.push.constants import SEND_ENDPOINT
from push_service.infra.push.dispatcher import SingleRecipientDispatcher, SleepFunc
from push_service.infra.push.exceptions import PushUsageError
from push_service.infra.push.multicast import MulticastOrchestrator
from push_service.infra.push.results import (
    AggregateResult,
    AttemptResult,
    MulticastResponse,
    SingleOutcome,
)
from push_service.infra.push.schemas import Message
from push_service.infra.push.transport import PushTransport
from push_service.utils.retry import INITIAL_DELAY, MAX_CEILING, BackoffScheduler

if TYPE_CHECKING:
    from push_service.core.settings.push import PushSettings

logger = logging.getLogger(__name__)


class PushClient:
    """Client for the legacy HTTP send endpoint.

    Example:
        client = PushClient(api_key="AIza...", default_retries=5)
        try:
            result = await client.send_multicast(message, tokens)
        finally:
            await client.close()
    """

    def __init__(
        self,
        api_key: str,
        *,
        endpoint: str = SEND_ENDPOINT,
        timeout: float = 30.0,
        default_retries: int = 3,
        backoff_initial_delay: float = INITIAL_DELAY,
        backoff_max_delay: float = MAX_CEILING,
        max_keepalive_connections: int = 20,
        max_connections: int = 100,
        rng: random.Random | None = None,
        sleep: SleepFunc = asyncio.sleep,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Server API key.
            endpoint: Send endpoint URL.
            timeout: HTTP request timeout in seconds.
            default_retries: Retries used when a call does not pass ``retries``.
            backoff_initial_delay: First backoff ceiling in seconds.
            backoff_max_delay: Backoff ceiling cap in seconds.
            max_keepalive_connections: Pool size for idle connections.
            max_connections: Upper bound on open connections.
            rng: Random source for backoff jitter.
            sleep: Coroutine used to wait between attempts.
            http_transport: Optional httpx transport, mainly for tests.

        Raises:
            PushUsageError: If the API key is empty or ``default_retries`` is negative.
        """
        if not api_key:
            msg = "API key is required"
            raise PushUsageError(msg)
        if default_retries < 0:
            msg = "default_retries must be >= 0"
            raise PushUsageError(msg)

        self.default_retries = default_retries
        self.transport = PushTransport(
            api_key=api_key,
            endpoint=endpoint,
            timeout=timeout,
            max_keepalive_connections=max_keepalive_connections,
            max_connections=max_connections,
            transport=http_transport,
        )
        self.scheduler = BackoffScheduler(
            initial_delay=backoff_initial_delay,
            max_ceiling=backoff_max_delay,
            rng=rng,
        )
        self.dispatcher = SingleRecipientDispatcher(self.transport, self.scheduler, sleep)
        self.multicast = MulticastOrchestrator(self.transport, self.scheduler, sleep)

    @classmethod
    def from_settings(cls, settings: PushSettings, **overrides) -> PushClient:
        """Build a client from validated settings.

        Raises:
            PushUsageError: If the settings carry no API key.
        """
        if not settings.is_configured:
            msg = "PUSH_API_KEY is not configured"
            raise PushUsageError(msg)

        options = {
            "endpoint": settings.endpoint,
            "timeout": settings.timeout,
            "default_retries": settings.default_retries,
            "backoff_initial_delay": settings.backoff_initial_delay,
            "backoff_max_delay": settings.backoff_max_delay,
            "max_keepalive_connections": settings.max_keepalive_connections,
            "max_connections": settings.max_connections,
            **overrides,
        }
        return cls(settings.api_key.get_secret_value(), **options)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.transport.close()

    async def __aenter__(self) -> PushClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _retries(self, retries: int | None) -> int:
        return self.default_retries if retries is None else retries

    async def send(
        self,
        message: Message,
        to: str,
        retries: int | None = None,
    ) -> SingleOutcome:
        """Send to one device token, topic or device group, with retries."""
        return await self.dispatcher.send(message, to, self._retries(retries))

    async def send_no_retry(self, message: Message, to: str) -> AttemptResult[SingleOutcome]:
        """Single attempt; returns ``Ok``, ``Retryable`` or ``Fatal``."""
        return await self.dispatcher.send_no_retry(message, to)

    async def send_multicast(
        self,
        message: Message,
        recipients: Sequence[str],
        retries: int | None = None,
    ) -> AggregateResult:
        """Send to many recipients, retrying only those that may still succeed."""
        return await self.multicast.send(message, recipients, self._retries(retries))

    async def send_multicast_no_retry(
        self,
        message: Message,
        recipients: Sequence[str],
    ) -> AttemptResult[MulticastResponse]:
        """Single multicast attempt; returns ``Ok``, ``Retryable`` or ``Fatal``."""
        return await self.multicast.send_no_retry(message, recipients)


def get_push_client(settings: PushSettings | None = None, **overrides) -> PushClient:
    """Create a client from settings (loaded from the environment by default).

    The caller owns the returned client and must close it.
    """
    if settings is None:
        from push_service.core.settings import get_push_settings

        settings = get_push_settings()

    client = PushClient.from_settings(settings, **overrides)
    logger.debug(
        "Push client created",
        extra={"endpoint": settings.endpoint, "default_retries": client.default_retries},
    )
    return client


__all__ = ["PushClient", "get_push_client"]
