r"""Assembly of the status record of a request attempt."""

from __future__ import annotations

__all__ = ["build_status"]

from typing import TYPE_CHECKING, Any

from pnendpoint.exceptions import PubSubError
from pnendpoint.models import ErrorData, Status

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx

    from pnendpoint.endpoint import RequestExecutor
    from pnendpoint.enums import StatusCategory


def _error_data(error: Exception) -> ErrorData:
    if isinstance(error, PubSubError):
        return ErrorData(information=error.message, body=error.body, exception=error)
    return ErrorData(information=str(error), exception=error)


def build_status(
    endpoint: RequestExecutor[Any],
    category: StatusCategory,
    *,
    response: httpx.Response | None = None,
    error: Exception | None = None,
    error_channels: Sequence[str] = (),
    error_channel_groups: Sequence[str] = (),
) -> Status:
    """Build the status of one request attempt.

    The status is flagged as an error when no response was reached or an
    error is provided. When a response was reached, the status code, the
    TLS flag, the origin host and the ``uuid``/``auth`` query parameters
    of the executed request are recorded. Error-scoped channels and channel
    groups take precedence over the ones statically known by the
    operation.

    Args:
        endpoint: The executor that ran the attempt.
        category: The outcome category.
        response: The response, if one was reached.
        error: The error describing the failure, if any.
        error_channels: Channels named by the error.
        error_channel_groups: Channel groups named by the error.

    Returns:
        The status of the attempt.
    """
    descriptor = endpoint.descriptor
    fields: dict[str, Any] = {}

    if response is not None:
        request = response.request
        fields.update(
            status_code=response.status_code,
            tls_enabled=request.url.scheme == "https",
            origin=request.url.host,
            uuid=request.url.params.get("uuid"),
            auth_key=request.url.params.get("auth"),
            client_request=request,
        )

    affected_channels = error_channels or descriptor.affected_channels()
    affected_channel_groups = error_channel_groups or descriptor.affected_channel_groups()

    return Status(
        category=category,
        operation=descriptor.operation_type,
        error=response is None or error is not None,
        error_data=_error_data(error) if error is not None else None,
        executed_endpoint=endpoint,
        affected_channels=tuple(affected_channels),
        affected_channel_groups=tuple(affected_channel_groups),
        **fields,
    )
