r"""Operation fetching the current server time token."""

from __future__ import annotations

__all__ = ["TimeOperation", "TimeResult"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pnendpoint.endpoint import OperationDescriptor
from pnendpoint.enums import OperationType
from pnendpoint.exceptions import ResponseDecodeError

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

    from pnendpoint.context import PubSubContext
    from pnendpoint.transport import Call


@dataclass(frozen=True)
class TimeResult:
    """Result of a time request.

    Attributes:
        timetoken: The server time, in 100 nanosecond units since the
            epoch.
    """

    timetoken: int


class TimeOperation(OperationDescriptor[TimeResult]):
    r"""Fetch the current server time token with ``GET /time/0``.

    The server answers with a JSON array holding a single integer, e.g.
    ``[17000000000000000]``.

    Args:
        context: The client context used to build the call.
    """

    operation_type = OperationType.TIME

    def __init__(self, context: PubSubContext) -> None:
        self._context = context

    def validate_params(self) -> None:
        pass

    def build_call(self, base_params: Mapping[str, str]) -> Call:
        return self._context.new_call("GET", "/time/0", params=base_params)

    def create_response(self, response: httpx.Response) -> TimeResult:
        payload = response.json()
        if (
            not isinstance(payload, list)
            or not payload
            or isinstance(payload[0], bool)
            or not isinstance(payload[0], int)
        ):
            msg = f"Unexpected time payload: {response.text!r}"
            raise ResponseDecodeError(msg, status_code=response.status_code)
        return TimeResult(timetoken=payload[0])

    def is_auth_required(self) -> bool:
        return False
