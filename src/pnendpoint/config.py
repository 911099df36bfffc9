r"""Configuration dataclass and defaults for the client context.

This module provides configuration constants and a dataclass-based
configuration object consumed by ``PubSubContext``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_NON_SUBSCRIBE_REQUEST_TIMEOUT",
    "DEFAULT_ORIGIN",
    "DEFAULT_SDK_NAME",
    "PNConfiguration",
]

import uuid as uuid_lib
from dataclasses import dataclass, field, replace
from typing import Any

import httpx

from pnendpoint.core.validation import validate_identity, validate_transport_params

# Host every request is sent to
DEFAULT_ORIGIN = "ps.pndsn.com"

# Seconds to wait for a TCP/TLS connection to be established
DEFAULT_CONNECT_TIMEOUT = 5.0

# Seconds to wait for a response to a non-subscribe request
DEFAULT_NON_SUBSCRIBE_REQUEST_TIMEOUT = 10.0

# Number of dispatcher threads delivering callback-mode results
DEFAULT_MAX_WORKERS = 4

# Client identification prefix, sent as "<sdk_name>/<version>"
DEFAULT_SDK_NAME = "PubNub-Python-Endpoint"


def _generate_uuid() -> str:
    return f"pn-{uuid_lib.uuid4()}"


@dataclass
class PNConfiguration:
    """Configuration for a ``PubSubContext``.

    Args:
        uuid: Identifier of this client, sent with every request. A random
            one is generated if not provided.
        publish_key: Optional key authorizing publish operations.
        subscribe_key: Optional key identifying the keyset to read from.
        auth_key: Optional authentication key, attached to requests of
            operations that require authentication.
        origin: Host requests are sent to.
        secure: Whether to use https.
        include_instance_identifier: Whether to send the context instance id
            with every request.
        include_request_identifier: Whether to send a fresh request id with
            every request.
        connect_timeout: Seconds to wait for a connection. Must be > 0.
        non_subscribe_request_timeout: Seconds to wait for a response.
            Must be > 0.
        max_workers: Number of dispatcher threads. Must be >= 1.
        sdk_name: Client identification prefix.

    Example:
        ```pycon
        >>> from pnendpoint.config import PNConfiguration
        >>> config = PNConfiguration(uuid="my-client")
        >>> config.origin
        'ps.pndsn.com'
        >>> config.base_url
        'https://ps.pndsn.com'
        >>> config.merge(secure=False).base_url
        'http://ps.pndsn.com'

        ```
    """

    uuid: str = field(default_factory=_generate_uuid)
    publish_key: str | None = None
    subscribe_key: str | None = None
    auth_key: str | None = None
    origin: str = DEFAULT_ORIGIN
    secure: bool = True
    include_instance_identifier: bool = False
    include_request_identifier: bool = True
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    non_subscribe_request_timeout: float = DEFAULT_NON_SUBSCRIBE_REQUEST_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    sdk_name: str = DEFAULT_SDK_NAME

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_identity(uuid=self.uuid, origin=self.origin)
        validate_transport_params(
            connect_timeout=self.connect_timeout,
            non_subscribe_request_timeout=self.non_subscribe_request_timeout,
            max_workers=self.max_workers,
        )

    @property
    def base_url(self) -> str:
        """The scheme and host every request is sent to."""
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.origin}"

    def timeout(self) -> httpx.Timeout:
        """Build the ``httpx.Timeout`` used by the transport.

        Returns:
            A timeout using ``non_subscribe_request_timeout`` for reads,
            writes and pool acquisition and ``connect_timeout`` for
            connecting.
        """
        return httpx.Timeout(self.non_subscribe_request_timeout, connect=self.connect_timeout)

    def merge(self, **overrides: Any) -> PNConfiguration:
        """Create a new configuration with specified parameters
        overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new PNConfiguration instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
