r"""pnendpoint - Request execution core for pub/sub client SDKs.

This package provides the contract shared by every remote operation of a
pub/sub client: executing an HTTP call in blocking mode or in callback
mode, classifying every outcome into a uniform status, and cancelling or
retrying the outstanding call. Built on top of the httpx library.

Key Features:
    - One generic executor for every operation, driven by an injected
      operation descriptor
    - Blocking execution raising typed errors
    - Callback execution delivering ``(result, status)`` on a dispatcher
      thread
    - Uniform status categories for HTTP errors and transport failures
    - Silent cancellation and retry of the outstanding call
    - Optional JSON structured logging with per-request correlation IDs

Example:
    ```pycon
    >>> from pnendpoint import PNConfiguration, PubSubContext, RequestExecutor
    >>> from pnendpoint.operations import TimeOperation
    >>> def on_time(result, status):
    ...     if status.error:
    ...         print(f"failed: {status.category}")
    ...     else:
    ...         print(result.timetoken)
    ...
    >>> with PubSubContext(PNConfiguration(uuid="my-client")) as context:  # doctest: +SKIP
    ...     executor = RequestExecutor(context, TimeOperation(context))
    ...     executor.execute_async(on_time)
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "ErrorData",
    "ErrorKind",
    "HttpError",
    "OperationDescriptor",
    "OperationType",
    "PNConfiguration",
    "PubSubContext",
    "PubSubError",
    "RequestExecutor",
    "ResponseDecodeError",
    "Status",
    "StatusCategory",
    "TransportError",
    "ValidationError",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from pnendpoint.config import PNConfiguration
from pnendpoint.context import PubSubContext
from pnendpoint.endpoint import OperationDescriptor, RequestExecutor
from pnendpoint.enums import OperationType, StatusCategory
from pnendpoint.exceptions import (
    ErrorKind,
    HttpError,
    PubSubError,
    ResponseDecodeError,
    TransportError,
    ValidationError,
)
from pnendpoint.models import ErrorData, Status

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
