"""Shared fixtures for the Stripe bindings test suite."""

import asyncio
import json
import logging
from collections.abc import Callable

import pytest
from pydantic import BaseModel

import stripe_bindings.identity.keys as keys_mod
from stripe_bindings.api.client import APIClient
from stripe_bindings.api.device import StaticDeviceInfo
from stripe_bindings.api.request import ComposedRequest
from stripe_bindings.config.settings import get_settings
from stripe_bindings.logging.events import LOGGER_NAME
from stripe_bindings.transport.base import Transport, TransportResponse


class Customer(BaseModel):
    id: str
    object: str = "customer"
    email: str | None = None


class FakeTransport(Transport):
    """Records requests and answers them with a handler.

    The handler returns a TransportResponse, bytes, or a dict (sent as
    JSON with status 200), or raises to simulate a transport failure.
    """

    def __init__(self, handler: Callable | None = None, delay: float = 0.0):
        self.handler = handler or (lambda request: {"id": "cus_123", "object": "customer"})
        self.delay = delay
        self.requests: list[ComposedRequest] = []
        self.closed = False

    async def send(self, request: ComposedRequest) -> TransportResponse:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        reply = self.handler(request)
        if isinstance(reply, TransportResponse):
            return reply
        if isinstance(reply, dict):
            reply = json.dumps(reply).encode()
        return TransportResponse(status_code=200, content=reply)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def device_info() -> StaticDeviceInfo:
    return StaticDeviceInfo(os_version="17.0", type="iPhone14,2", model="iPhone")


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport, device_info) -> APIClient:
    """A client with a test-mode key and a fake transport."""
    return APIClient("pk_test_123", transport=transport, device_info=device_info)


@pytest.fixture(autouse=True)
def reset_testmode_warning(monkeypatch):
    monkeypatch.setattr(keys_mod, "_did_show_testmode_warning", False)


@pytest.fixture(autouse=True)
def reset_logger():
    """Undo setup_logging() so caplog sees records from every test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(STRIPE_LIVEMODE="false", STRIPE_DEBUG="false")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    # Always clear cache on teardown so other tests get fresh settings
    get_settings.cache_clear()
