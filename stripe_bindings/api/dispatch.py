"""Dispatcher: hands composed requests to the transport."""

import httpx

from stripe_bindings.api.errors import TransportError
from stripe_bindings.api.request import ComposedRequest
from stripe_bindings.logging.events import RequestTimer, get_logger, request_event
from stripe_bindings.transport.base import Transport, TransportResponse


class Dispatcher:
    """Thin pass-through to the transport. No retries, no timeout policy."""

    def __init__(self, transport: Transport):
        self.transport = transport

    async def dispatch(self, request: ComposedRequest) -> TransportResponse:
        logger = get_logger()
        event = request_event(request)

        with RequestTimer() as timer:
            try:
                response = await self.transport.send(request)
            except TransportError as e:
                error = e
            except (httpx.HTTPError, OSError) as e:
                error = TransportError(f"Transport error: {e}", cause=e)
            else:
                error = None

        if error is not None:
            logger.warning(
                "Request failed",
                extra={"event_data": {**event, "latency_ms": timer.elapsed_ms, **error.to_dict()}},
            )
            raise error

        logger.info(
            "Request completed",
            extra={"event_data": {**event, "status": response.status_code, "latency_ms": timer.elapsed_ms}},
        )
        return response
