"""Client facade for the Stripe API.

Each call composes key/identity, headers, parameter encoding, dispatch and
decoding, and resolves exactly once. Entry points never block or raise:
they return an asyncio.Future right away, and the optional completion
handler runs on the client's completion loop once the call finishes. A
client outlives the loops it is used on; see CompletionContext.

    client = APIClient("pk_test_123")
    result = await client.get("payment_methods/pm_123", {}, PaymentMethod)
    if result.ok:
        ...
"""

import asyncio
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any

from stripe_bindings.api.decode import decode_response
from stripe_bindings.api.device import DeviceInfoProvider, PlatformDeviceInfo
from stripe_bindings.api.dispatch import Dispatcher
from stripe_bindings.api.errors import EncodeError, StripeClientError, TransportError
from stripe_bindings.api.headers import (
    API_VERSION,
    BINDINGS_VERSION,
    compose_headers,
    params_adding_payment_user_agent,
)
from stripe_bindings.api.request import (
    ComposedRequest,
    HTTPMethod,
    RequestSpec,
    build_object_request,
    build_request,
)
from stripe_bindings.api.result import ApiResult, Failure
from stripe_bindings.api.scheduler import Completion, CompletionContext, running_loop
from stripe_bindings.config.settings import get_settings
from stripe_bindings.identity.keys import is_test_mode_key, is_user_key, validate_key
from stripe_bindings.identity.models import AppInfo, ClientConfig
from stripe_bindings.logging.events import generate_request_id, get_logger, request_id_var
from stripe_bindings.transport.base import Transport
from stripe_bindings.transport.httpx_transport import HttpxTransport


class APIClient:
    """A client for making connections to the Stripe API."""

    version = BINDINGS_VERSION
    api_version = API_VERSION

    def __init__(
        self,
        publishable_key: str | None = None,
        *,
        transport: Transport | None = None,
        device_info: DeviceInfoProvider | None = None,
        completion_context: CompletionContext | None = None,
        product_usage: Iterable[str] = (),
    ):
        self.config = ClientConfig()
        if publishable_key is not None:
            self.publishable_key = publishable_key
        self.device_info = device_info or PlatformDeviceInfo()
        self.product_usage = list(product_usage)
        self._dispatcher = Dispatcher(transport or HttpxTransport())
        self._completion = completion_context or CompletionContext()
        self._tasks: set[asyncio.Task] = set()

    # --- Configuration ---

    @property
    def publishable_key(self) -> str | None:
        """The configured key, else the settings default (STRIPE_PUBLISHABLE_KEY)."""
        if self.config.publishable_key is not None:
            return self.config.publishable_key
        return get_settings().publishable_key or None

    @publishable_key.setter
    def publishable_key(self, value: str | None) -> None:
        validate_key(value)
        self.config.publishable_key = value

    @property
    def stripe_account(self) -> str | None:
        return self.config.stripe_account

    @stripe_account.setter
    def stripe_account(self, value: str | None) -> None:
        self.config.stripe_account = value

    @property
    def app_info(self) -> AppInfo | None:
        return self.config.app_info

    @app_info.setter
    def app_info(self, value: AppInfo | None) -> None:
        self.config.app_info = value

    @property
    def betas(self) -> frozenset[str]:
        return frozenset(self.config.betas)

    def add_betas(self, *betas: str) -> None:
        self.config.betas.update(betas)

    @property
    def is_test_mode(self) -> bool:
        return is_test_mode_key(self.publishable_key)

    @property
    def publishable_key_is_user_key(self) -> bool:
        return is_user_key(self.publishable_key)

    # --- Request helpers ---

    def default_headers(
        self,
        ephemeral_key_secret: str | None = None,
        additional_headers: Mapping[str, str] | None = None,
    ) -> dict[str, str]:
        return compose_headers(
            self.config,
            self.device_info,
            self.publishable_key,
            ephemeral_key_secret=ephemeral_key_secret,
            additional_headers=additional_headers,
        )

    def configured_request(self, url: str, additional_headers: Mapping[str, str] | None = None) -> ComposedRequest:
        """A bare GET request to ``url`` carrying the default headers."""
        return ComposedRequest(
            method=HTTPMethod.GET,
            url=url,
            headers=MappingProxyType(self.default_headers(additional_headers=additional_headers)),
        )

    def params_adding_payment_user_agent(self, params: Mapping) -> dict:
        return params_adding_payment_user_agent(params, self.product_usage)

    # --- Entry points ---

    def get(
        self,
        resource: str,
        parameters: Mapping[str, Any],
        result_type: Any,
        completion: Completion | None = None,
        *,
        ephemeral_key_secret: str | None = None,
        additional_headers: Mapping[str, str] | None = None,
    ) -> asyncio.Future:
        """Make a GET request using the passed parameters."""
        spec = RequestSpec(method=HTTPMethod.GET, path=resource, parameters=parameters)
        return self._start(
            lambda: build_request(
                spec, self.config.api_url, self.default_headers(ephemeral_key_secret), additional_headers
            ),
            result_type,
            completion,
        )

    def post(
        self,
        resource: str,
        parameters: Mapping[str, Any],
        result_type: Any,
        completion: Completion | None = None,
        *,
        ephemeral_key_secret: str | None = None,
        additional_headers: Mapping[str, str] | None = None,
    ) -> asyncio.Future:
        """Make a POST request using the passed parameters."""
        spec = RequestSpec(method=HTTPMethod.POST, path=resource, parameters=parameters)
        return self._start(
            lambda: build_request(
                spec, self.config.api_url, self.default_headers(ephemeral_key_secret), additional_headers
            ),
            result_type,
            completion,
        )

    def post_object(
        self,
        resource: str,
        obj: Any,
        result_type: Any,
        completion: Completion | None = None,
        *,
        ephemeral_key_secret: str | None = None,
        additional_headers: Mapping[str, str] | None = None,
    ) -> asyncio.Future:
        """Make a POST request using the fields of a typed object (pydantic model or dataclass)."""
        return self._start(
            lambda: build_object_request(
                resource, obj, self.config.api_url, self.default_headers(ephemeral_key_secret), additional_headers
            ),
            result_type,
            completion,
        )

    async def close(self) -> None:
        await self._dispatcher.transport.close()

    # --- Internals ---

    def _start(
        self,
        build: Callable[[], ComposedRequest],
        result_type: Any,
        completion: Completion | None,
    ) -> asyncio.Future:
        future = self._completion.create_future()
        loop = future.get_loop()
        request_id = generate_request_id()

        try:
            request = build()
        except EncodeError as e:
            get_logger().warning(
                "Request object could not be encoded",
                extra={"event_data": {"request_id": request_id, **e.to_dict()}},
            )
            self._completion.deliver(future, completion, Failure(e))
            return future
        except Exception as e:
            get_logger().exception(
                "Request could not be built",
                extra={"event_data": {"request_id": request_id}},
            )
            self._completion.deliver(future, completion, Failure(StripeClientError(f"Could not build request: {e}")))
            return future

        coro = self._run(request, result_type, future, completion, request_id)
        if running_loop() is loop:
            task = loop.create_task(coro)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        else:
            asyncio.run_coroutine_threadsafe(coro, loop)
        return future

    async def _run(
        self,
        request: ComposedRequest,
        result_type: Any,
        future: asyncio.Future,
        completion: Completion | None,
        request_id: str,
    ) -> None:
        request_id_var.set(request_id)
        try:
            result = await self._perform(request, result_type)
        except Exception as e:
            get_logger().exception("Unexpected error during API call")
            result = Failure(StripeClientError(f"Unexpected error: {e}"))
        self._completion.deliver(future, completion, result)

    async def _perform(self, request: ComposedRequest, result_type: Any) -> ApiResult:
        try:
            response = await self._dispatcher.dispatch(request)
        except TransportError as e:
            return Failure(e)

        result = decode_response(response.content, result_type)
        if not result.ok:
            get_logger().info(
                "Response decoded as failure",
                extra={"event_data": {"status": response.status_code, **result.error.to_dict()}},
            )
        return result
