"""Completion delivery onto a single fixed event loop."""

import asyncio
import threading
from collections.abc import Callable

from stripe_bindings.api.result import ApiResult
from stripe_bindings.logging.events import get_logger

Completion = Callable[[ApiResult], None]

COMPLETION_THREAD_NAME = "stripe-completion"

_completion_loop: asyncio.AbstractEventLoop | None = None
_completion_loop_lock = threading.Lock()


def _background_loop() -> asyncio.AbstractEventLoop:
    """Process-wide loop on a daemon thread, for callers with no loop of their own."""
    global _completion_loop
    with _completion_loop_lock:
        if _completion_loop is None or _completion_loop.is_closed():
            loop = asyncio.new_event_loop()
            threading.Thread(target=loop.run_forever, name=COMPLETION_THREAD_NAME, daemon=True).start()
            _completion_loop = loop
        return _completion_loop


def running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class CompletionContext:
    """Redelivers call results onto one "main" event loop.

    The loop is either given explicitly or bound to the running loop on
    first use. A bound loop that has been closed (e.g. the end of an
    ``asyncio.run``) is replaced by the loop running at the next call.
    Callers with no running loop at all get the process-wide completion
    loop on the ``stripe-completion`` thread and should rely on the
    completion handler rather than awaiting the future.

    Delivery always goes through ``call_soon_threadsafe`` so the handler
    runs on the call's loop whichever thread or loop resolved the call.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None or self._loop.is_closed():
            if self._loop is not None:
                get_logger().info(
                    "Completion loop closed, rebinding",
                    extra={"event_data": {"event": "completion_loop_rebound"}},
                )
            self._loop = running_loop() or _background_loop()
        return self._loop

    def create_future(self) -> asyncio.Future:
        return self.loop.create_future()

    def deliver(self, future: asyncio.Future, completion: Completion | None, result: ApiResult) -> None:
        # The future's loop is the one the call was started on, even if the context rebound since
        future.get_loop().call_soon_threadsafe(self._complete, future, completion, result)

    @staticmethod
    def _complete(future: asyncio.Future, completion: Completion | None, result: ApiResult) -> None:
        # Awaiters may have cancelled the future; the handler still runs
        if not future.done():
            future.set_result(result)
        if completion is not None:
            completion(result)
