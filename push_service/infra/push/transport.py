"""HTTP transport for the legacy send endpoint.

Owns one pooled ``httpx.AsyncClient`` and turns every failure mode into the
push error hierarchy:

- connect/read/timeout failures -> :class:`PushTransportError`
- any status other than 200 -> :class:`PushProtocolError`
- 200 -> the raw body, left to the parser
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from push_service.infra.push.constants import SEND_ENDPOINT
from push_service.infra.push.exceptions import (
    PushProtocolError,
    PushTransportError,
    PushUsageError,
)
from push_service.infra.push.metrics import track_request

logger = logging.getLogger(__name__)


class PushTransport:
    """Posts JSON request bodies to the send endpoint.

    Example:
        ```python
        async with PushTransport(api_key="AIza...") as transport:
            body = await transport.post({"to": token, "data": {"k": "v"}})
        ```
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str = SEND_ENDPOINT,
        timeout: float = 30.0,
        max_keepalive_connections: int = 20,
        max_connections: int = 100,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            api_key: Server API key, sent as ``Authorization: key=<api_key>``.
            endpoint: Full URL of the send endpoint.
            timeout: Request timeout in seconds.
            max_keepalive_connections: Pool size for idle connections.
            max_connections: Upper bound on open connections.
            transport: Optional httpx transport (tests use ``httpx.MockTransport``).

        Raises:
            PushUsageError: If the API key is empty.
        """
        if not api_key:
            msg = "API key is required"
            raise PushUsageError(msg)

        self.endpoint = endpoint
        self.timeout = timeout

        if not endpoint.startswith("https://"):
            logger.warning(
                "Push endpoint is not using https",
                extra={"endpoint": endpoint},
            )

        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={
                "Authorization": f"key={api_key}",
                "Content-Type": "application/json",
            },
            limits=httpx.Limits(
                max_keepalive_connections=max_keepalive_connections,
                max_connections=max_connections,
            ),
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        await self.client.aclose()

    async def __aenter__(self) -> PushTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def post(self, payload: dict[str, Any], *, operation: str = "single") -> str:
        """POST a request body and return the response body of a 200 answer.

        Args:
            payload: JSON-serializable request body.
            operation: Metrics label (``single`` or ``multicast``).

        Raises:
            PushTransportError: If the request could not be completed.
            PushProtocolError: If the service answered with a non-200 status.
        """
        logger.debug(
            f"POST request to {self.endpoint}",
            extra={"operation": operation, "payload_keys": sorted(payload)},
        )

        start = time.perf_counter()
        try:
            response = await self.client.post(self.endpoint, json=payload)
        except httpx.TimeoutException as e:
            track_request(operation, "transport_error", time.perf_counter() - start)
            logger.warning(
                "Push request timed out",
                extra={"operation": operation, "timeout": self.timeout},
            )
            msg = f"Request to {self.endpoint} timed out"
            raise PushTransportError(msg) from e
        except httpx.HTTPError as e:
            track_request(operation, "transport_error", time.perf_counter() - start)
            logger.warning(
                f"Push request failed: {e}",
                extra={"operation": operation, "error_type": type(e).__name__},
            )
            msg = f"Request to {self.endpoint} failed: {e}"
            raise PushTransportError(msg) from e

        duration = time.perf_counter() - start
        logger.debug(
            f"POST response from {self.endpoint}",
            extra={
                "operation": operation,
                "status_code": response.status_code,
                "duration_ms": duration * 1000,
            },
        )

        if response.status_code != 200:
            track_request(operation, "protocol_error", duration)
            description = response.text or ""
            logger.warning(
                f"Push service returned HTTP {response.status_code}",
                extra={"operation": operation, "status_code": response.status_code},
            )
            raise PushProtocolError(response.status_code, description)

        track_request(operation, "success", duration)
        return response.text


__all__ = ["PushTransport"]
