r"""Result records delivered for every request attempt.

A ``Status`` is produced exactly once per completed or failed attempt
and is the uniform envelope of the outcome, error or success.
"""

from __future__ import annotations

__all__ = ["ErrorData", "Status", "StatusCallback"]

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    import httpx

    from pnendpoint.endpoint import RequestExecutor
    from pnendpoint.enums import OperationType, StatusCategory


@dataclass(frozen=True)
class ErrorData:
    """Structured error payload of a status.

    Attributes:
        information: A human-readable message.
        body: The parsed JSON error body returned by the server, if any.
        exception: The exception describing the failure.
    """

    information: str
    body: Any = None
    exception: Exception | None = None


@dataclass(frozen=True)
class Status:
    """Outcome of one request attempt.

    Attributes:
        category: The outcome category.
        operation: The operation that produced this status.
        error: Whether the attempt failed.
        error_data: Details about the failure, if any.
        status_code: The HTTP status code, or None if no response was
            reached.
        tls_enabled: Whether the request was sent over https, or None if
            no response was reached.
        origin: The host the request was sent to, or None if no response
            was reached.
        uuid: The ``uuid`` query parameter of the executed request.
        auth_key: The ``auth`` query parameter of the executed request.
        client_request: The executed request, if a response was reached.
        executed_endpoint: The executor that produced this status.
        affected_channels: Channels affected by this outcome.
        affected_channel_groups: Channel groups affected by this outcome.
    """

    category: StatusCategory
    operation: OperationType
    error: bool = False
    error_data: ErrorData | None = None
    status_code: int | None = None
    tls_enabled: bool | None = None
    origin: str | None = None
    uuid: str | None = None
    auth_key: str | None = None
    client_request: httpx.Request | None = None
    executed_endpoint: RequestExecutor[Any] | None = None
    affected_channels: tuple[str, ...] = ()
    affected_channel_groups: tuple[str, ...] = ()

    def retry(self) -> None:
        """Re-issue the request of the executor that produced this
        status."""
        if self.executed_endpoint is not None:
            self.executed_endpoint.retry()

    def silent_cancel(self) -> None:
        """Cancel the outstanding call of the executor that produced this
        status without notifying its callback."""
        if self.executed_endpoint is not None:
            self.executed_endpoint.silent_cancel()


T = TypeVar("T")

# Receives the decoded result (None on failure) and the status of an attempt
StatusCallback = Callable[[T | None, Status], None]
