from __future__ import annotations

from unittest.mock import Mock

import httpx
import pytest

from pnendpoint.core.status import build_status
from pnendpoint.enums import OperationType, StatusCategory
from pnendpoint.exceptions import HttpError
from pnendpoint.models import ErrorData


@pytest.fixture
def endpoint() -> Mock:
    """Create a mock executor whose operation has static channels."""
    descriptor = Mock(operation_type=OperationType.PUBLISH)
    descriptor.affected_channels.return_value = ["static-ch"]
    descriptor.affected_channel_groups.return_value = []
    return Mock(descriptor=descriptor)


def _response(url: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, text="[1]", request=httpx.Request("GET", url))


##################################
#     Tests for build_status     #
##################################


def test_build_status_success(endpoint: Mock) -> None:
    response = _response("https://ps.pndsn.com/time/0?uuid=my-uuid&auth=my-auth")
    status = build_status(endpoint, StatusCategory.ACKNOWLEDGMENT, response=response)
    assert status.category == StatusCategory.ACKNOWLEDGMENT
    assert status.operation == OperationType.PUBLISH
    assert not status.error
    assert status.error_data is None
    assert status.status_code == 200
    assert status.tls_enabled
    assert status.origin == "ps.pndsn.com"
    assert status.uuid == "my-uuid"
    assert status.auth_key == "my-auth"
    assert status.client_request is response.request
    assert status.executed_endpoint is endpoint


def test_build_status_plain_http(endpoint: Mock) -> None:
    response = _response("http://example.com/time/0")
    status = build_status(endpoint, StatusCategory.ACKNOWLEDGMENT, response=response)
    assert status.tls_enabled is False
    assert status.origin == "example.com"
    assert status.uuid is None
    assert status.auth_key is None


def test_build_status_without_response_is_error(endpoint: Mock) -> None:
    status = build_status(endpoint, StatusCategory.TIMEOUT)
    assert status.error
    assert status.status_code is None
    assert status.tls_enabled is None
    assert status.origin is None
    assert status.client_request is None


def test_build_status_with_error(endpoint: Mock) -> None:
    error = HttpError("Forbidden", status_code=403, body={"status": 403})
    response = _response("https://ps.pndsn.com/x", status_code=403)
    status = build_status(
        endpoint, StatusCategory.ACCESS_DENIED, response=response, error=error
    )
    assert status.error
    assert status.status_code == 403
    assert status.error_data == ErrorData(
        information="Forbidden", body={"status": 403}, exception=error
    )


def test_build_status_with_foreign_exception(endpoint: Mock) -> None:
    error = ValueError("boom")
    status = build_status(endpoint, StatusCategory.BAD_REQUEST, error=error)
    assert status.error_data == ErrorData(information="boom", exception=error)


def test_build_status_static_channels(endpoint: Mock) -> None:
    status = build_status(endpoint, StatusCategory.TIMEOUT)
    assert status.affected_channels == ("static-ch",)
    assert status.affected_channel_groups == ()


def test_build_status_error_channels_take_precedence(endpoint: Mock) -> None:
    status = build_status(
        endpoint,
        StatusCategory.ACCESS_DENIED,
        error_channels=["a", "b"],
        error_channel_groups=["g1"],
    )
    assert status.affected_channels == ("a", "b")
    assert status.affected_channel_groups == ("g1",)


def test_build_status_empty_error_channels_fall_back(endpoint: Mock) -> None:
    status = build_status(endpoint, StatusCategory.ACCESS_DENIED, error_channels=[])
    assert status.affected_channels == ("static-ch",)
