r"""Core shared logic for the blocking and callback execution paths.

This package contains the status classifier, the status builder and
the configuration validation functions.
"""

from __future__ import annotations

__all__ = [
    "SUCCESS_STATUS_CODE",
    "Classification",
    "build_status",
    "classify_exception",
    "classify_http_error",
    "parse_json_body",
    "read_error_body",
    "validate_identity",
    "validate_timeout",
    "validate_transport_params",
]

from pnendpoint.core.classifier import (
    SUCCESS_STATUS_CODE,
    Classification,
    classify_exception,
    classify_http_error,
    parse_json_body,
    read_error_body,
)
from pnendpoint.core.status import build_status
from pnendpoint.core.validation import (
    validate_identity,
    validate_timeout,
    validate_transport_params,
)
