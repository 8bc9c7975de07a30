"""Tests for stripe_bindings/transport/httpx_transport.py — httpx transport."""

import asyncio
import json

import httpx
import pytest

from stripe_bindings.api.errors import TransportError
from stripe_bindings.api.request import ComposedRequest, HTTPMethod
from stripe_bindings.transport.httpx_transport import HttpxTransport


def _transport(handler) -> HttpxTransport:
    return HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestHttpxTransport:

    async def test_send_post(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = request.content
            return httpx.Response(200, json={"id": "tok_1"})

        transport = _transport(handler)
        response = await transport.send(ComposedRequest(
            method=HTTPMethod.POST,
            url="https://api.stripe.com/v1/tokens",
            headers={"Authorization": "Bearer pk_test_1", "Content-Length": "5"},
            body=b"a=b&c",
        ))
        assert response.status_code == 200
        assert json.loads(response.content) == {"id": "tok_1"}
        assert seen == {
            "method": "POST",
            "url": "https://api.stripe.com/v1/tokens",
            "auth": "Bearer pk_test_1",
            "body": b"a=b&c",
        }
        await transport.close()

    async def test_send_get_has_no_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.content == b""
            return httpx.Response(404, content=b'{"error": {"message": "No such customer"}}')

        transport = _transport(handler)
        response = await transport.send(ComposedRequest(
            method=HTTPMethod.GET, url="https://api.stripe.com/v1/customers/cus_x", headers={},
        ))
        assert response.status_code == 404
        await transport.close()

    async def test_connect_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused")

        transport = _transport(handler)
        with pytest.raises(TransportError) as exc_info:
            await transport.send(ComposedRequest(method=HTTPMethod.GET, url="https://api.stripe.com/v1/x", headers={}))
        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        await transport.close()

    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("Timed out")

        transport = _transport(handler)
        with pytest.raises(TransportError, match="timed out"):
            await transport.send(ComposedRequest(method=HTTPMethod.GET, url="https://api.stripe.com/v1/x", headers={}))
        await transport.close()

    async def test_close(self):
        transport = _transport(lambda request: httpx.Response(200))
        client = await transport._get_client()
        await transport.close()
        assert client.is_closed
        assert transport._client is None

    async def test_close_when_no_client(self):
        """Closing without a client should not raise."""
        await HttpxTransport().close()

    async def test_lazily_creates_client(self, override_settings):
        override_settings(STRIPE_TIMEOUT_SECONDS="5")
        transport = HttpxTransport()
        client = await transport._get_client()
        assert client.timeout.read == 5.0
        await transport.close()


class TestEventLoopLifetime:

    def test_owned_client_recreated_after_loop_closed(self):
        transport = HttpxTransport()
        first = asyncio.run(transport._get_client())
        second = asyncio.run(transport._get_client())
        assert second is not first

    def test_injected_client_is_kept(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        transport = HttpxTransport(client=client)
        assert asyncio.run(transport._get_client()) is client
        assert asyncio.run(transport._get_client()) is client
