r"""Classification of request outcomes into status categories.

This module maps the raw outcome of a request (a non-success HTTP status
code with its error body, or a transport-level exception) to a status
category, an error describing the failure and the channels and channel
groups it affects. It is shared by the blocking and the callback
execution paths.
"""

from __future__ import annotations

__all__ = [
    "Classification",
    "SUCCESS_STATUS_CODE",
    "classify_exception",
    "classify_http_error",
    "parse_json_body",
    "read_error_body",
]

import json
import logging
import socket
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from pnendpoint.enums import StatusCategory
from pnendpoint.exceptions import ErrorKind, HttpError, PubSubError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pnendpoint.transport import Call

logger: logging.Logger = logging.getLogger(__name__)

SUCCESS_STATUS_CODE = 200
FORBIDDEN_STATUS_CODE = 403
BAD_REQUEST_STATUS_CODE = 400

# Body text used when the error body of a response cannot be read
UNAVAILABLE_BODY = "N/A"

# Prefix the server puts in front of channel group names
CHANNEL_GROUP_SEPARATOR = ":"


@dataclass(frozen=True)
class Classification:
    """Result of classifying a failed request outcome.

    Attributes:
        category: The status category of the outcome.
        error: The error describing the failure.
        affected_channels: Channels named by the error, possibly empty.
        affected_channel_groups: Channel groups named by the error,
            possibly empty.
    """

    category: StatusCategory
    error: PubSubError
    affected_channels: tuple[str, ...] = ()
    affected_channel_groups: tuple[str, ...] = ()


def parse_json_body(text: str) -> Any:
    """Parse a response body as JSON, best effort.

    Args:
        text: The body text.

    Returns:
        The parsed JSON value, or None if the text is not valid JSON.

    Example:
        ```pycon
        >>> from pnendpoint.core.classifier import parse_json_body
        >>> parse_json_body('{"status": 403}')
        {'status': 403}
        >>> parse_json_body("N/A") is None
        True

        ```
    """
    try:
        return json.loads(text)
    except ValueError:
        return None


def read_error_body(response: httpx.Response) -> tuple[str, Any]:
    """Read the error body of a non-success response, best effort.

    Args:
        response: The non-success response.

    Returns:
        A tuple with the body text (``"N/A"`` if it cannot be read) and the
        parsed JSON body (None if it cannot be parsed).
    """
    try:
        text = response.text
    except (httpx.StreamError, httpx.TransportError, UnicodeDecodeError) as exc:
        logger.debug(f"Could not read error body of response {response.status_code}: {exc}")
        text = UNAVAILABLE_BODY
    return text, parse_json_body(text)


def _extract_names(payload: dict[str, Any], key: str) -> Iterator[str]:
    names = payload.get(key)
    if not isinstance(names, list):
        return
    for name in names:
        if isinstance(name, str):
            yield name


def _strip_separator(group: str) -> str:
    if group.startswith(CHANNEL_GROUP_SEPARATOR):
        return group[len(CHANNEL_GROUP_SEPARATOR) :]
    return group


def classify_http_error(
    status_code: int,
    body_text: str,
    body: Any,
    *,
    affected_call: Call | None = None,
) -> Classification:
    """Classify a non-success HTTP response.

    A 403 response is classified as ``ACCESS_DENIED`` and the channels and
    channel groups listed in ``payload.channels`` and
    ``payload.channel-groups`` of the body are reported as affected. The
    leading separator of channel group names is stripped. A 400 response
    is classified as ``BAD_REQUEST`` and any other status code as
    ``UNKNOWN``.

    Args:
        status_code: The HTTP status code.
        body_text: The raw error body text.
        body: The parsed JSON error body, or None.
        affected_call: The call that received the response.

    Returns:
        The classification of the response.

    Example:
        ```pycon
        >>> from pnendpoint.core.classifier import classify_http_error
        >>> body = {"payload": {"channels": ["a", "b"], "channel-groups": [":g1"]}}
        >>> classification = classify_http_error(403, "", body)
        >>> classification.category
        <StatusCategory.ACCESS_DENIED: 'access_denied'>
        >>> classification.affected_channels, classification.affected_channel_groups
        (('a', 'b'), ('g1',))

        ```
    """
    error = HttpError(body_text, status_code=status_code, body=body, affected_call=affected_call)

    if status_code == FORBIDDEN_STATUS_CODE:
        channels: tuple[str, ...] = ()
        groups: tuple[str, ...] = ()
        payload = body.get("payload") if isinstance(body, dict) else None
        if isinstance(payload, dict):
            channels = tuple(_extract_names(payload, "channels"))
            groups = tuple(_strip_separator(g) for g in _extract_names(payload, "channel-groups"))
        return Classification(
            category=StatusCategory.ACCESS_DENIED,
            error=error,
            affected_channels=channels,
            affected_channel_groups=groups,
        )

    if status_code == BAD_REQUEST_STATUS_CODE:
        return Classification(category=StatusCategory.BAD_REQUEST, error=error)

    return Classification(category=StatusCategory.UNKNOWN, error=error)


def _iter_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _chain_contains(exc: BaseException, types: tuple[type[BaseException], ...]) -> bool:
    return any(isinstance(link, types) for link in _iter_chain(exc))


def classify_exception(exc: Exception, *, affected_call: Call | None = None) -> Classification:
    """Classify an exception raised while completing a call.

    An unresolved host or a refused connection is classified as
    ``UNEXPECTED_DISCONNECT``, a timeout as ``TIMEOUT`` and any other
    exception as ``BAD_REQUEST``. The exception chain is inspected, so an
    ``httpx.ConnectError`` caused by a ``socket.gaierror`` is reported as
    an unresolved host.

    Args:
        exc: The exception.
        affected_call: The call that failed.

    Returns:
        The classification of the exception.

    Example:
        ```pycon
        >>> import httpx
        >>> from pnendpoint.core.classifier import classify_exception
        >>> classify_exception(httpx.ReadTimeout("timed out")).category
        <StatusCategory.TIMEOUT: 'timeout'>
        >>> classify_exception(httpx.ConnectError("refused")).category
        <StatusCategory.UNEXPECTED_DISCONNECT: 'unexpected_disconnect'>
        >>> classify_exception(ValueError("boom")).category
        <StatusCategory.BAD_REQUEST: 'bad_request'>

        ```
    """
    if _chain_contains(exc, (socket.gaierror,)):
        category, kind = StatusCategory.UNEXPECTED_DISCONNECT, ErrorKind.CONNECTION_NOT_SET
    elif _chain_contains(exc, (httpx.ConnectError, ConnectionRefusedError)):
        category, kind = StatusCategory.UNEXPECTED_DISCONNECT, ErrorKind.CONNECT_EXCEPTION
    elif _chain_contains(exc, (httpx.TimeoutException, TimeoutError)):
        category, kind = StatusCategory.TIMEOUT, ErrorKind.SUBSCRIBE_TIMEOUT
    else:
        category, kind = StatusCategory.BAD_REQUEST, ErrorKind.HTTP_ERROR

    error = PubSubError(str(exc), kind=kind, affected_call=affected_call, cause=exc)
    return Classification(category=category, error=error)
