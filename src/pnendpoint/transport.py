r"""Cancellable HTTP call handles.

A ``Call`` wraps one ``httpx.Request`` and can be executed once, either
inline on the caller's thread or enqueued on a dispatcher thread pool
where completion is reported through a pair of handlers.
"""

from __future__ import annotations

__all__ = ["Call", "CallCancelledError", "is_dispatcher_thread"]

import logging
import threading
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Executor

logger: logging.Logger = logging.getLogger(__name__)

# Dispatcher running the current thread, set while an enqueued call runs
_worker_state = threading.local()


def is_dispatcher_thread(dispatcher: Executor) -> bool:
    """Whether the current thread is running an enqueued call of
    ``dispatcher``.

    Args:
        dispatcher: The executor to check against.

    Returns:
        True if called from a handler of a call enqueued on
        ``dispatcher``, otherwise False.
    """
    return getattr(_worker_state, "dispatcher", None) is dispatcher


class CallCancelledError(httpx.RequestError):
    r"""Raised when a cancelled call is executed or completes.

    Example:
        ```pycon
        >>> import httpx
        >>> from pnendpoint.transport import CallCancelledError
        >>> isinstance(CallCancelledError("Canceled"), httpx.RequestError)
        True

        ```
    """


class Call:
    r"""Handle on a single outstanding HTTP request.

    A call can be executed only once. Cancellation is advisory: a call
    cancelled before it starts fails fast, while a call cancelled during
    I/O completes the exchange, discards the response and reports
    ``CallCancelledError``.

    Args:
        client: The HTTP client sending the request.
        request: The request to send.
        dispatcher: The executor running enqueued calls.

    Example:
        ```pycon
        >>> from concurrent.futures import ThreadPoolExecutor
        >>> import httpx
        >>> from pnendpoint.transport import Call
        >>> transport = httpx.MockTransport(lambda request: httpx.Response(200, text="[1]"))
        >>> with httpx.Client(transport=transport) as client, ThreadPoolExecutor() as pool:
        ...     call = Call(client, client.build_request("GET", "https://example.com"), pool)
        ...     call.execute().text
        ...
        '[1]'

        ```
    """

    def __init__(self, client: httpx.Client, request: httpx.Request, dispatcher: Executor) -> None:
        self._client = client
        self._request = request
        self._dispatcher = dispatcher

        # State tracking (protected by lock)
        self._cancelled = False
        self._executed = False
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}({self._request.method} {self._request.url})"

    @property
    def request(self) -> httpx.Request:
        """The request sent by this call."""
        return self._request

    @property
    def is_cancelled(self) -> bool:
        """Whether ``cancel`` was called on this call."""
        with self._lock:
            return self._cancelled

    @property
    def is_executed(self) -> bool:
        """Whether this call was executed or enqueued."""
        with self._lock:
            return self._executed

    def cancel(self) -> None:
        """Request cancellation of this call.

        Calling this method more than once has no additional effect.
        """
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
        logger.debug(f"Cancelled {self!r}")

    def execute(self) -> httpx.Response:
        """Send the request and wait for the response.

        Returns:
            The response, with its body read.

        Raises:
            CallCancelledError: If the call was cancelled.
            httpx.RequestError: If the request failed at the transport level.
            RuntimeError: If the call was already executed.
        """
        self._mark_executed()
        return self._send()

    def enqueue(
        self,
        on_response: Callable[[Call, httpx.Response], None],
        on_failure: Callable[[Call, Exception], None],
    ) -> None:
        """Send the request on a dispatcher thread.

        Exactly one of the handlers is invoked, once, on the dispatcher
        thread.

        Args:
            on_response: Handler invoked with the response when one was
                received, whatever its status code.
            on_failure: Handler invoked with the exception when the request
                could not be completed or the call was cancelled.

        Raises:
            RuntimeError: If the call was already executed.
        """
        self._mark_executed()
        self._dispatcher.submit(self._run, on_response, on_failure)

    def _mark_executed(self) -> None:
        with self._lock:
            if self._executed:
                msg = f"{self!r} was already executed"
                raise RuntimeError(msg)
            self._executed = True

    def _send(self) -> httpx.Response:
        if self.is_cancelled:
            raise CallCancelledError("Canceled", request=self._request)
        response = self._client.send(self._request)
        if self.is_cancelled:
            response.close()
            raise CallCancelledError("Canceled", request=self._request)
        return response

    def _run(
        self,
        on_response: Callable[[Call, httpx.Response], None],
        on_failure: Callable[[Call, Exception], None],
    ) -> None:
        previous = getattr(_worker_state, "dispatcher", None)
        _worker_state.dispatcher = self._dispatcher
        try:
            self._complete(on_response, on_failure)
        except Exception:
            logger.exception(f"Handler of {self!r} raised an exception")
        finally:
            _worker_state.dispatcher = previous

    def _complete(
        self,
        on_response: Callable[[Call, httpx.Response], None],
        on_failure: Callable[[Call, Exception], None],
    ) -> None:
        try:
            response = self._send()
        except Exception as exc:  # noqa: BLE001
            on_failure(self, exc)
            return
        on_response(self, response)
