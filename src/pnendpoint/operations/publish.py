r"""Operation publishing a message to a channel."""

from __future__ import annotations

__all__ = ["PublishOperation", "PublishResult"]

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from pnendpoint.endpoint import OperationDescriptor
from pnendpoint.enums import OperationType
from pnendpoint.exceptions import ResponseDecodeError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    import httpx

    from pnendpoint.context import PubSubContext
    from pnendpoint.transport import Call


@dataclass(frozen=True)
class PublishResult:
    """Result of a publish request.

    Attributes:
        timetoken: The time token assigned to the published message.
    """

    timetoken: int


class PublishOperation(OperationDescriptor[PublishResult]):
    r"""Publish a JSON-serializable message with
    ``GET /publish/{pub_key}/{sub_key}/0/{channel}/0/{message}``.

    The server answers with ``[1, "Sent", "<timetoken>"]``.

    Args:
        context: The client context used to build the call.
        channel: The channel to publish to.
        message: The message, serialized as JSON.
        store: Optional flag overriding whether the message is stored in
            history.
        ttl: Optional number of hours the message is stored for.
        meta: Optional metadata used by subscriber filters.

    Example:
        ```pycon
        >>> from pnendpoint import PNConfiguration, PubSubContext, RequestExecutor
        >>> from pnendpoint.operations import PublishOperation
        >>> config = PNConfiguration(publish_key="demo", subscribe_key="demo")
        >>> with PubSubContext(config) as context:  # doctest: +SKIP
        ...     operation = PublishOperation(context, channel="news", message={"text": "hi"})
        ...     RequestExecutor(context, operation).execute().timetoken
        ...

        ```
    """

    operation_type = OperationType.PUBLISH

    def __init__(
        self,
        context: PubSubContext,
        *,
        channel: str | None = None,
        message: Any = None,
        store: bool | None = None,
        ttl: int | None = None,
        meta: dict[str, Any] | None = None,
    ) -> None:
        self._context = context
        self._channel = channel
        self._message = message
        self._store = store
        self._ttl = ttl
        self._meta = meta

    def validate_params(self) -> None:
        config = self._context.config
        if self._message is None:
            raise ValidationError("Message missing")
        if not self._channel:
            raise ValidationError("Channel missing")
        if not config.publish_key:
            raise ValidationError("Publish key not configured")
        if not config.subscribe_key:
            raise ValidationError("Subscribe key not configured")

    def build_call(self, base_params: Mapping[str, str]) -> Call:
        config = self._context.config
        try:
            payload = json.dumps(self._message)
        except (TypeError, ValueError) as exc:
            msg = f"Message is not JSON serializable: {exc}"
            raise ValidationError(msg) from exc

        params = dict(base_params)
        if self._store is not None:
            params["store"] = "1" if self._store else "0"
        if self._ttl is not None:
            params["ttl"] = str(self._ttl)
        if self._meta is not None:
            params["meta"] = json.dumps(self._meta)

        path = (
            f"/publish/{config.publish_key}/{config.subscribe_key}/0/"
            f"{quote(self._channel, safe='')}/0/{quote(payload, safe='')}"
        )
        return self._context.new_call("GET", path, params=params)

    def create_response(self, response: httpx.Response) -> PublishResult:
        payload = response.json()
        if not isinstance(payload, list) or len(payload) < 3:
            msg = f"Unexpected publish payload: {response.text!r}"
            raise ResponseDecodeError(msg, status_code=response.status_code)
        return PublishResult(timetoken=int(payload[2]))

    def is_auth_required(self) -> bool:
        return True

    def affected_channels(self) -> Sequence[str]:
        return (self._channel,) if self._channel else ()
