"""httpx-backed transport."""

import asyncio

import httpx

from stripe_bindings.api.errors import TransportError
from stripe_bindings.api.request import ComposedRequest
from stripe_bindings.config.settings import get_settings
from stripe_bindings.transport.base import Transport, TransportResponse


class HttpxTransport(Transport):
    """Sends composed requests with a shared httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client
        # Loop the owned client was created on; None for injected clients
        self._client_loop: asyncio.AbstractEventLoop | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client_loop is not None and self._client_loop.is_closed():
            # Its connection pool belongs to a dead loop and cannot be closed from here
            self._client = None
            self._client_loop = None
        if self._client is None or self._client.is_closed:
            settings = get_settings()
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(settings.timeout_seconds, connect=settings.connect_timeout_seconds)
            )
            self._client_loop = asyncio.get_running_loop()
        return self._client

    async def send(self, request: ComposedRequest) -> TransportResponse:
        client = await self._get_client()
        try:
            response = await client.request(
                request.method.value,
                request.url,
                headers=dict(request.headers),
                content=request.body or None,
            )
        except httpx.ConnectError as e:
            raise TransportError("Cannot reach API host", cause=e) from e
        except httpx.TimeoutException as e:
            raise TransportError("API request timed out", cause=e) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Transport error: {e}", cause=e) from e
        return TransportResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
        )

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            self._client_loop = None
