r"""Parameter validation utilities for the client configuration.

This module provides validation functions for configuration values to
ensure they meet the required constraints before an HTTP client is
created from them.
"""

from __future__ import annotations

__all__ = ["validate_identity", "validate_timeout", "validate_transport_params"]


def validate_timeout(timeout: float, name: str = "timeout") -> None:
    """Validate a timeout value.

    Args:
        timeout: Maximum seconds to wait. Must be > 0.
        name: The parameter name used in the error message.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from pnendpoint.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"{name} must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_identity(uuid: str, origin: str) -> None:
    """Validate the identity fields of a configuration.

    Args:
        uuid: The client uuid sent with every request. Must not be empty
            or blank.
        origin: The host requests are sent to. Must not be empty.

    Raises:
        ValueError: If uuid or origin is empty.

    Example:
        ```pycon
        >>> from pnendpoint.core.validation import validate_identity
        >>> validate_identity(uuid="my-client", origin="ps.pndsn.com")

        ```
    """
    if not uuid or not uuid.strip():
        msg = f"uuid must be a non-empty string, got {uuid!r}"
        raise ValueError(msg)
    if not origin:
        msg = f"origin must be a non-empty string, got {origin!r}"
        raise ValueError(msg)


def validate_transport_params(
    connect_timeout: float,
    non_subscribe_request_timeout: float,
    max_workers: int,
) -> None:
    """Validate transport parameters.

    Args:
        connect_timeout: Maximum seconds to wait for a connection.
            Must be > 0.
        non_subscribe_request_timeout: Maximum seconds to wait for a
            response. Must be > 0.
        max_workers: Number of dispatcher threads used by callback mode.
            Must be > 0.

    Raises:
        ValueError: If a timeout is non-positive or max_workers < 1.

    Example:
        ```pycon
        >>> from pnendpoint.core.validation import validate_transport_params
        >>> validate_transport_params(
        ...     connect_timeout=5.0, non_subscribe_request_timeout=10.0, max_workers=4
        ... )

        ```
    """
    validate_timeout(connect_timeout, name="connect_timeout")
    validate_timeout(non_subscribe_request_timeout, name="non_subscribe_request_timeout")
    if max_workers < 1:
        msg = f"max_workers must be >= 1, got {max_workers}"
        raise ValueError(msg)
