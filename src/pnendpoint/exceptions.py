r"""Exceptions raised by the request execution core.

All exceptions derive from ``PubSubError`` which carries enough context
(message, error kind, parsed body, status code and the affected call) to
reconstruct a status for the failed attempt.
"""

from __future__ import annotations

__all__ = [
    "ErrorKind",
    "HttpError",
    "PubSubError",
    "ResponseDecodeError",
    "TransportError",
    "ValidationError",
]

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pnendpoint.transport import Call


class ErrorKind(Enum):
    """Reason attached to an error.

    The value is a short human-readable description of the reason.
    """

    CONNECTION_NOT_SET = "Connection not set"
    CONNECT_EXCEPTION = "Connect exception. Please verify if network is reachable"
    SUBSCRIBE_TIMEOUT = "Request timed out"
    HTTP_ERROR = "HTTP error"
    PARSING_ERROR = "Parsing error"
    INVALID_ARGUMENTS = "Invalid arguments"


class PubSubError(RuntimeError):
    r"""Base exception for failures of a remote operation.

    Args:
        message: A descriptive error message.
        kind: The reason of the failure.
        status_code: The HTTP status code, if a response was reached.
        body: The parsed JSON body of the error response, if any.
        affected_call: The call that was being executed, if any.
        cause: The original exception that caused this error, if any.

    Example:
        ```pycon
        >>> from pnendpoint.exceptions import ErrorKind, PubSubError
        >>> error = PubSubError("boom", kind=ErrorKind.HTTP_ERROR, status_code=500)
        >>> error.status_code
        500
        >>> error.kind
        <ErrorKind.HTTP_ERROR: 'HTTP error'>

        ```
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.HTTP_ERROR,
        status_code: int | None = None,
        body: Any = None,
        affected_call: Call | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.body = body
        self.affected_call = affected_call
        self.cause = cause


class ValidationError(PubSubError):
    r"""Raised when caller-supplied parameters are invalid.

    It is always raised before any network access.

    Example:
        ```pycon
        >>> from pnendpoint.exceptions import ValidationError
        >>> raise ValidationError("Channel missing")
        Traceback (most recent call last):
            ...
        pnendpoint.exceptions.ValidationError: Channel missing

        ```
    """

    def __init__(self, message: str, *, kind: ErrorKind = ErrorKind.INVALID_ARGUMENTS) -> None:
        super().__init__(message, kind=kind)


class TransportError(PubSubError):
    r"""Raised when the call could not be completed at the I/O level."""

    def __init__(
        self, message: str, *, affected_call: Call | None = None, cause: BaseException | None = None
    ) -> None:
        super().__init__(
            message, kind=ErrorKind.PARSING_ERROR, affected_call=affected_call, cause=cause
        )


class HttpError(PubSubError):
    r"""Raised when the server answered with a non-success status code.

    The message is the raw error body text, or ``"N/A"`` when the body
    could not be read.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: Any = None,
        affected_call: Call | None = None,
    ) -> None:
        super().__init__(
            message,
            kind=ErrorKind.HTTP_ERROR,
            status_code=status_code,
            body=body,
            affected_call=affected_call,
        )


class ResponseDecodeError(PubSubError):
    r"""Raised when a successful response payload cannot be
    interpreted."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        affected_call: Call | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            message,
            kind=ErrorKind.PARSING_ERROR,
            status_code=status_code,
            affected_call=affected_call,
            cause=cause,
        )
