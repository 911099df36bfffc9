r"""Client context shared by every operation of one client instance.

The context owns the HTTP client and the dispatcher thread pool, acts as
the identity provider of the client (version, uuid, instance id, request
ids, auth key) and builds both the base query parameters and the calls
of every operation.
"""

from __future__ import annotations

__all__ = ["PubSubContext"]

import logging
import uuid
from concurrent.futures import Executor, ThreadPoolExecutor
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import httpx

from pnendpoint.config import PNConfiguration
from pnendpoint.transport import Call, is_dispatcher_thread

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType
    from typing import Self

logger: logging.Logger = logging.getLogger(__name__)


class PubSubContext:
    r"""Context shared by the operations of one client.

    The context can be used as a context manager, in which case the HTTP
    client is closed and the dispatcher is shut down on exit.

    Args:
        config: The client configuration. A default one is used if
            ``None``.
        client: Optional ``httpx.Client`` to send requests with. It must
            have a ``base_url``. If ``None``, a client is created from the
            configuration and closed by ``close``. A provided client is
            never closed by the context.
        dispatcher: Optional executor running callback-mode calls. If
            ``None``, a thread pool is created from the configuration and
            shut down by ``close``.
        version: The version reported in the client identification string.
            Defaults to the installed package version.

    Example:
        ```pycon
        >>> from pnendpoint import PNConfiguration, PubSubContext
        >>> with PubSubContext(PNConfiguration(uuid="my-client")) as context:
        ...     params = context.create_base_params(auth_required=False)
        ...     params["uuid"]
        ...
        'my-client'

        ```
    """

    def __init__(
        self,
        config: PNConfiguration | None = None,
        *,
        client: httpx.Client | None = None,
        dispatcher: Executor | None = None,
        version: str | None = None,
    ) -> None:
        self._config = config if config is not None else PNConfiguration()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=self._config.base_url, timeout=self._config.timeout()
        )
        self._owns_dispatcher = dispatcher is None
        self._dispatcher = dispatcher or ThreadPoolExecutor(
            max_workers=self._config.max_workers, thread_name_prefix="pnendpoint"
        )
        if version is None:
            from pnendpoint import __version__

            version = __version__
        self._version = version
        self._instance_id = str(uuid.uuid4())

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def config(self) -> PNConfiguration:
        return self._config

    @property
    def client(self) -> httpx.Client:
        return self._client

    @property
    def version(self) -> str:
        return self._version

    @property
    def instance_id(self) -> str:
        """Identifier of this context, stable for its lifetime."""
        return self._instance_id

    @property
    def sdk_identifier(self) -> str:
        """Client identification string sent as ``pnsdk``."""
        return f"{self._config.sdk_name}/{self._version}"

    def request_id(self) -> str:
        """Generate a new request identifier."""
        return str(uuid.uuid4())

    def create_base_params(self, *, auth_required: bool) -> Mapping[str, str]:
        """Build the query parameters shared by every request.

        Args:
            auth_required: Whether the operation requires the auth key.

        Returns:
            A read-only mapping containing ``pnsdk`` and ``uuid``, plus
            ``instanceid`` and ``requestid`` when enabled in the
            configuration, plus ``auth`` when an auth key is configured and
            ``auth_required`` is true.

        Example:
            ```pycon
            >>> from pnendpoint import PNConfiguration, PubSubContext
            >>> config = PNConfiguration(
            ...     uuid="my-client", auth_key="secret", include_request_identifier=False
            ... )
            >>> with PubSubContext(config, version="1.0.0") as context:
            ...     dict(context.create_base_params(auth_required=True))
            ...
            {'pnsdk': 'PubNub-Python-Endpoint/1.0.0', 'uuid': 'my-client', 'auth': 'secret'}

            ```
        """
        params = {
            "pnsdk": self.sdk_identifier,
            "uuid": self._config.uuid,
        }
        if self._config.include_instance_identifier:
            params["instanceid"] = self._instance_id
        if self._config.include_request_identifier:
            params["requestid"] = self.request_id()
        if self._config.auth_key is not None and auth_required:
            params["auth"] = self._config.auth_key
        return MappingProxyType(params)

    def new_call(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> Call:
        """Create a call sending one request through this context.

        Args:
            method: The HTTP method.
            path: The path, relative to the configured origin.
            params: The query parameters.
            **kwargs: Additional keyword arguments passed to
                ``httpx.Client.build_request`` (e.g. ``json`` or
                ``headers``).

        Returns:
            A call that has not been executed yet.
        """
        request = self._client.build_request(
            method, path, params=dict(params) if params is not None else None, **kwargs
        )
        return Call(self._client, request, self._dispatcher)

    def close(self) -> None:
        """Close the resources owned by this context.

        Calls still queued on the dispatcher are allowed to complete. When
        called from a callback running on the dispatcher, the dispatcher is
        shut down without waiting because a worker cannot wait for itself.
        """
        if self._owns_dispatcher:
            self._dispatcher.shutdown(wait=not is_dispatcher_thread(self._dispatcher))
        if self._owns_client:
            self._client.close()
        logger.debug("Closed pub/sub context")
