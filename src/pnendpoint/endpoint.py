r"""Dual-mode request executor and the operation descriptor contract.

Every remote operation is described by an ``OperationDescriptor`` that
validates its parameters, builds its call and decodes its response. A
single generic ``RequestExecutor`` runs any descriptor either in
blocking mode (``execute``) or in callback mode (``execute_async``),
classifies every failure into a uniform ``Status`` and supports silent
cancellation and retry of the outstanding call.

Example:
    ```pycon
    >>> from pnendpoint import PNConfiguration, PubSubContext, RequestExecutor
    >>> from pnendpoint.operations import TimeOperation
    >>> with PubSubContext(PNConfiguration(uuid="my-client")) as context:  # doctest: +SKIP
    ...     executor = RequestExecutor(context, TimeOperation(context))
    ...     result = executor.execute()
    ...     executor.execute_async(lambda result, status: print(status.category))
    ...

    ```
"""

from __future__ import annotations

__all__ = ["OperationDescriptor", "RequestExecutor"]

import logging
import threading
from abc import ABC, abstractmethod
from functools import partial
from typing import TYPE_CHECKING, Generic, TypeVar

import httpx

from pnendpoint.core.classifier import (
    SUCCESS_STATUS_CODE,
    classify_exception,
    classify_http_error,
    read_error_body,
)
from pnendpoint.core.status import build_status
from pnendpoint.enums import StatusCategory
from pnendpoint.exceptions import HttpError, PubSubError, ResponseDecodeError, TransportError
from pnendpoint.utils.structured_logging import correlation_id_scope, log_structured

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from pnendpoint.context import PubSubContext
    from pnendpoint.enums import OperationType
    from pnendpoint.models import Status, StatusCallback
    from pnendpoint.transport import Call

logger: logging.Logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationDescriptor(ABC, Generic[T]):
    """Abstract description of one remote operation.

    A descriptor supplies everything that differs between operations:
    parameter validation, call construction and response decoding.
    """

    @property
    @abstractmethod
    def operation_type(self) -> OperationType:
        """The tag reported in the status of every attempt."""

    @abstractmethod
    def validate_params(self) -> None:
        """Validate the caller-supplied parameters.

        Raises:
            ValidationError: If the parameters are invalid.
        """

    @abstractmethod
    def build_call(self, base_params: Mapping[str, str]) -> Call:
        """Build the call of this operation.

        Args:
            base_params: The query parameters shared by every request.

        Returns:
            A call that has not been executed yet.

        Raises:
            ValidationError: If the call cannot be built from the
                parameters.
        """

    @abstractmethod
    def create_response(self, response: httpx.Response) -> T:
        """Decode a successful response.

        Args:
            response: The response, with status code 200.

        Returns:
            The typed result of the operation.

        Raises:
            ResponseDecodeError: If the payload cannot be interpreted.
        """

    @abstractmethod
    def is_auth_required(self) -> bool:
        """Whether the auth key must be attached to the request."""

    def affected_channels(self) -> Sequence[str]:
        """Channels statically known to be affected by this operation."""
        return ()

    def affected_channel_groups(self) -> Sequence[str]:
        """Channel groups statically known to be affected by this
        operation."""
        return ()


class RequestExecutor(Generic[T]):
    r"""Execute an operation in blocking or callback mode.

    The executor owns at most one outstanding call at a time. Every new
    dispatch replaces the reference to the previous call without
    cancelling or waiting for it. The current call, the silence flag and
    the cached callback are shared with the dispatcher threads and are
    protected by a lock.

    Args:
        context: The client context providing identity and transport.
        descriptor: The operation to execute.
    """

    def __init__(self, context: PubSubContext, descriptor: OperationDescriptor[T]) -> None:
        self._context = context
        self._descriptor = descriptor

        # State tracking (protected by lock)
        self._call: Call | None = None
        self._cached_callback: StatusCallback[T] | None = None
        self._silence_failures = False
        self._silenced_call: Call | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(operation={self._descriptor.operation_type.value})"

    @property
    def context(self) -> PubSubContext:
        return self._context

    @property
    def descriptor(self) -> OperationDescriptor[T]:
        return self._descriptor

    @property
    def current_call(self) -> Call | None:
        """The most recently dispatched call, if any."""
        with self._lock:
            return self._call

    @property
    def silence_failures(self) -> bool:
        """Whether transport failures are currently swallowed."""
        with self._lock:
            return self._silence_failures

    def execute(self) -> T:
        """Execute the operation and block until its result is known.

        Returns:
            The decoded result of the operation.

        Raises:
            ValidationError: If the parameters are invalid. No request is
                sent in this case.
            TransportError: If the call could not be completed.
            HttpError: If the server answered with a non-success status
                code.
            ResponseDecodeError: If the successful response could not be
                decoded.
        """
        self._descriptor.validate_params()
        call = self._dispatch()

        with correlation_id_scope(call.request.url.params.get("requestid")):
            logger.debug(f"Executing {call!r}")
            try:
                response = call.execute()
            except httpx.RequestError as exc:
                logger.debug(f"{call!r} failed with {type(exc).__name__}: {exc}")
                raise TransportError(str(exc), affected_call=call, cause=exc) from exc

            if response.status_code != SUCCESS_STATUS_CODE:
                body_text, body = read_error_body(response)
                logger.debug(f"{call!r} failed with status {response.status_code}")
                raise HttpError(
                    body_text, status_code=response.status_code, body=body, affected_call=call
                )

            return self._create_response(call, response)

    def execute_async(self, callback: StatusCallback[T]) -> None:
        """Execute the operation without blocking.

        ``callback`` is invoked exactly once with ``(result, status)`` on a
        dispatcher thread, unless the call fails after a silent
        cancellation. If the parameters are invalid, ``callback`` is invoked
        immediately on the calling thread with a ``BAD_REQUEST`` status and
        no request is sent.

        Args:
            callback: The function receiving the result (None on failure)
                and the status of the attempt.
        """
        with self._lock:
            self._cached_callback = callback

        try:
            self._descriptor.validate_params()
            call = self._dispatch()
        except PubSubError as exc:
            logger.debug(f"{self!r} rejected before dispatch: {exc}")
            callback(None, build_status(self, StatusCategory.BAD_REQUEST, error=exc))
            return

        logger.debug(f"Enqueuing {call!r}")
        call.enqueue(partial(self._on_response, callback), partial(self._on_failure, callback))

    def silent_cancel(self) -> None:
        """Cancel the outstanding call without notifying the callback.

        This is a no-op if there is no outstanding call or if it is
        already cancelled.
        """
        with self._lock:
            call = self._call
            if call is None or call.is_cancelled:
                return
            self._silence_failures = True
            self._silenced_call = call
            call.cancel()
        logger.debug(f"Silently cancelled {call!r}")

    def retry(self) -> None:
        """Re-issue the operation with the most recent callback.

        Raises:
            RuntimeError: If ``execute_async`` was never called.
        """
        with self._lock:
            callback = self._cached_callback
            if callback is None:
                msg = f"{self!r} cannot retry: execute_async was never called"
                raise RuntimeError(msg)
            self._silence_failures = False
        logger.debug(f"Retrying {self!r}")
        self.execute_async(callback)

    def _dispatch(self) -> Call:
        base_params = self._context.create_base_params(
            auth_required=self._descriptor.is_auth_required()
        )
        call = self._descriptor.build_call(base_params)
        with self._lock:
            self._call = call
        return call

    def _create_response(self, call: Call, response: httpx.Response) -> T:
        try:
            return self._descriptor.create_response(response)
        except PubSubError:
            raise
        except Exception as exc:
            msg = f"Could not decode {self._descriptor.operation_type.value} response: {exc}"
            raise ResponseDecodeError(
                msg, status_code=response.status_code, affected_call=call, cause=exc
            ) from exc

    def _consume_silence(self, call: Call) -> bool:
        with self._lock:
            if call is self._silenced_call:
                self._silenced_call = None
                return True
            return self._silence_failures

    def _on_response(self, callback: StatusCallback[T], call: Call, response: httpx.Response) -> None:
        with correlation_id_scope(call.request.url.params.get("requestid")):
            if response.status_code != SUCCESS_STATUS_CODE:
                body_text, body = read_error_body(response)
                classification = classify_http_error(
                    response.status_code, body_text, body, affected_call=call
                )
                status = build_status(
                    self,
                    classification.category,
                    response=response,
                    error=classification.error,
                    error_channels=classification.affected_channels,
                    error_channel_groups=classification.affected_channel_groups,
                )
                self._deliver(callback, None, status)
                return

            try:
                result = self._create_response(call, response)
            except ResponseDecodeError as exc:
                status = build_status(
                    self, StatusCategory.MALFORMED_RESPONSE, response=response, error=exc
                )
                self._deliver(callback, None, status)
                return

            status = build_status(self, StatusCategory.ACKNOWLEDGMENT, response=response)
            self._deliver(callback, result, status)

    def _on_failure(self, callback: StatusCallback[T], call: Call, exc: Exception) -> None:
        if self._consume_silence(call):
            logger.debug(f"Silenced failure of {call!r}: {exc}")
            return

        with correlation_id_scope(call.request.url.params.get("requestid")):
            classification = classify_exception(exc, affected_call=call)
            status = build_status(self, classification.category, error=classification.error)
            self._deliver(callback, None, status)

    def _deliver(self, callback: StatusCallback[T], result: T | None, status: Status) -> None:
        log_structured(
            logger,
            logging.DEBUG,
            f"{status.operation.value} finished with {status.category.value}",
            operation=status.operation.value,
            category=status.category.value,
            status_code=status.status_code,
            is_error=status.error,
        )
        try:
            callback(result, status)
        except Exception:
            logger.exception(f"Callback of {self!r} raised an exception")
