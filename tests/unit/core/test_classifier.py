from __future__ import annotations

import socket
from unittest.mock import Mock, PropertyMock

import httpx
import pytest

from pnendpoint.core.classifier import (
    Classification,
    classify_exception,
    classify_http_error,
    parse_json_body,
    read_error_body,
)
from pnendpoint.enums import StatusCategory
from pnendpoint.exceptions import ErrorKind, HttpError
from pnendpoint.transport import CallCancelledError

#####################################
#     Tests for parse_json_body     #
#####################################


def test_parse_json_body_object() -> None:
    assert parse_json_body('{"error": true}') == {"error": True}


def test_parse_json_body_array() -> None:
    assert parse_json_body("[1, 2]") == [1, 2]


@pytest.mark.parametrize("text", ["N/A", "", "<html>Forbidden</html>", "{"])
def test_parse_json_body_invalid(text: str) -> None:
    assert parse_json_body(text) is None


#####################################
#     Tests for read_error_body     #
#####################################


def test_read_error_body_json() -> None:
    response = httpx.Response(400, text='{"message": "Invalid key"}')
    assert read_error_body(response) == ('{"message": "Invalid key"}', {"message": "Invalid key"})


def test_read_error_body_not_json() -> None:
    response = httpx.Response(502, text="Bad Gateway")
    assert read_error_body(response) == ("Bad Gateway", None)


def test_read_error_body_unreadable() -> None:
    """Test that an unreadable body is reported as unavailable."""
    response = Mock(spec=httpx.Response, status_code=500)
    type(response).text = PropertyMock(side_effect=httpx.ResponseNotRead())
    assert read_error_body(response) == ("N/A", None)


#########################################
#     Tests for classify_http_error     #
#########################################


def test_classify_http_error_forbidden_with_payload() -> None:
    body = {"payload": {"channels": ["a", "b"], "channel-groups": [":g1"]}}
    classification = classify_http_error(403, "forbidden", body)
    assert classification.category == StatusCategory.ACCESS_DENIED
    assert classification.affected_channels == ("a", "b")
    assert classification.affected_channel_groups == ("g1",)


def test_classify_http_error_forbidden_keeps_unprefixed_groups() -> None:
    body = {"payload": {"channel-groups": ["g1", ":g2", "::g3"]}}
    classification = classify_http_error(403, "", body)
    assert classification.affected_channel_groups == ("g1", "g2", ":g3")


def test_classify_http_error_forbidden_without_payload() -> None:
    classification = classify_http_error(403, "Forbidden", None)
    assert classification == Classification(
        category=StatusCategory.ACCESS_DENIED, error=classification.error
    )
    assert classification.affected_channels == ()
    assert classification.affected_channel_groups == ()


@pytest.mark.parametrize(
    "body",
    [
        [1, 2],
        {"payload": "denied"},
        {"payload": {"channels": "a"}},
        {"payload": {"channels": [1, None, "a"], "channel-groups": {"g": 1}}},
    ],
)
def test_classify_http_error_forbidden_malformed_payload(body: object) -> None:
    classification = classify_http_error(403, "", body)
    assert classification.category == StatusCategory.ACCESS_DENIED
    assert classification.affected_channels in {(), ("a",)}
    assert classification.affected_channel_groups == ()


def test_classify_http_error_bad_request() -> None:
    classification = classify_http_error(400, "Invalid Arguments", {"status": 400})
    assert classification.category == StatusCategory.BAD_REQUEST
    assert classification.affected_channels == ()


@pytest.mark.parametrize("status_code", [201, 204, 301, 404, 414, 429, 500, 502, 503, 504])
def test_classify_http_error_other_status_is_unknown(status_code: int) -> None:
    classification = classify_http_error(status_code, "error", None)
    assert classification.category == StatusCategory.UNKNOWN


def test_classify_http_error_error_fields() -> None:
    call = Mock()
    body = {"message": "Server Error"}
    error = classify_http_error(500, '{"message": "Server Error"}', body, affected_call=call).error
    assert isinstance(error, HttpError)
    assert error.kind == ErrorKind.HTTP_ERROR
    assert error.message == '{"message": "Server Error"}'
    assert error.body == body
    assert error.status_code == 500
    assert error.affected_call is call


########################################
#     Tests for classify_exception     #
########################################


def _connect_error_caused_by(cause: BaseException) -> httpx.ConnectError:
    exc = httpx.ConnectError(str(cause))
    exc.__cause__ = cause
    return exc


def test_classify_exception_unresolved_host() -> None:
    exc = _connect_error_caused_by(socket.gaierror(-2, "Name or service not known"))
    classification = classify_exception(exc)
    assert classification.category == StatusCategory.UNEXPECTED_DISCONNECT
    assert classification.error.kind == ErrorKind.CONNECTION_NOT_SET


def test_classify_exception_bare_gaierror() -> None:
    classification = classify_exception(socket.gaierror(-2, "Name or service not known"))
    assert classification.category == StatusCategory.UNEXPECTED_DISCONNECT
    assert classification.error.kind == ErrorKind.CONNECTION_NOT_SET


def test_classify_exception_connection_refused() -> None:
    exc = _connect_error_caused_by(ConnectionRefusedError(111, "Connection refused"))
    classification = classify_exception(exc)
    assert classification.category == StatusCategory.UNEXPECTED_DISCONNECT
    assert classification.error.kind == ErrorKind.CONNECT_EXCEPTION


def test_classify_exception_connect_error() -> None:
    classification = classify_exception(httpx.ConnectError("All connection attempts failed"))
    assert classification.category == StatusCategory.UNEXPECTED_DISCONNECT
    assert classification.error.kind == ErrorKind.CONNECT_EXCEPTION


@pytest.mark.parametrize(
    "exc",
    [
        httpx.ReadTimeout("timed out"),
        httpx.ConnectTimeout("timed out"),
        httpx.WriteTimeout("timed out"),
        httpx.PoolTimeout("timed out"),
        TimeoutError("timed out"),
    ],
)
def test_classify_exception_timeout(exc: Exception) -> None:
    classification = classify_exception(exc)
    assert classification.category == StatusCategory.TIMEOUT
    assert classification.error.kind == ErrorKind.SUBSCRIBE_TIMEOUT


@pytest.mark.parametrize(
    "exc",
    [
        httpx.ReadError("connection reset"),
        httpx.RemoteProtocolError("server disconnected"),
        CallCancelledError("Canceled"),
        ValueError("boom"),
        RuntimeError("boom"),
    ],
)
def test_classify_exception_other_is_bad_request(exc: Exception) -> None:
    classification = classify_exception(exc)
    assert classification.category == StatusCategory.BAD_REQUEST
    assert classification.error.kind == ErrorKind.HTTP_ERROR


def test_classify_exception_error_fields() -> None:
    call = Mock()
    exc = httpx.ReadTimeout("The read operation timed out")
    error = classify_exception(exc, affected_call=call).error
    assert error.message == "The read operation timed out"
    assert error.cause is exc
    assert error.affected_call is call
    assert error.status_code is None


def test_classify_exception_self_referencing_chain() -> None:
    exc = ValueError("loop")
    other = RuntimeError("other")
    exc.__context__ = other
    other.__context__ = exc
    assert classify_exception(exc).category == StatusCategory.BAD_REQUEST
