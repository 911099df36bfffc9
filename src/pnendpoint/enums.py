r"""Enumerations describing operations and status categories.

Every terminal status produced by a request executor is tagged with the
operation that produced it and a coarse-grained outcome category.
"""

from __future__ import annotations

__all__ = ["OperationType", "StatusCategory"]

from enum import Enum


class StatusCategory(Enum):
    """Coarse-grained classification of the outcome of one request
    attempt.

    Attributes:
        ACKNOWLEDGMENT: The request succeeded and the response was decoded.
        ACCESS_DENIED: The server rejected the request with 403 Forbidden.
        BAD_REQUEST: The request was invalid, or failed for an unclassified
            transport reason.
        MALFORMED_RESPONSE: The server answered 200 but the payload could not
            be decoded.
        TIMEOUT: The transport timed out.
        UNEXPECTED_DISCONNECT: The host could not be resolved or the
            connection was refused.
        UNKNOWN: Any other non-success HTTP status code.
    """

    ACKNOWLEDGMENT = "acknowledgment"
    ACCESS_DENIED = "access_denied"
    BAD_REQUEST = "bad_request"
    MALFORMED_RESPONSE = "malformed_response"
    TIMEOUT = "timeout"
    UNEXPECTED_DISCONNECT = "unexpected_disconnect"
    UNKNOWN = "unknown"


class OperationType(Enum):
    """Tag identifying which remote operation produced a status."""

    PUBLISH = "publish"
    SIGNAL = "signal"
    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"
    HEARTBEAT = "heartbeat"
    WHERE_NOW = "where_now"
    HERE_NOW = "here_now"
    SET_STATE = "set_state"
    GET_STATE = "get_state"
    HISTORY = "history"
    FETCH_MESSAGES = "fetch_messages"
    DELETE_MESSAGES = "delete_messages"
    ADD_CHANNELS_TO_GROUP = "add_channels_to_group"
    REMOVE_CHANNELS_FROM_GROUP = "remove_channels_from_group"
    LIST_CHANNELS_FOR_GROUP = "list_channels_for_group"
    REMOVE_GROUP = "remove_group"
    ACCESS_MANAGER_GRANT = "access_manager_grant"
    ACCESS_MANAGER_AUDIT = "access_manager_audit"
    TIME = "time"
