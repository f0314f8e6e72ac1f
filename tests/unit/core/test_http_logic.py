r"""Unit tests for the logic shared by the HTTP clients."""

from __future__ import annotations

import time

import httpx
import pytest

from cloudsdk.context import background, with_timeout
from cloudsdk.core import decode_response, request_context, request_timeout
from cloudsdk.exceptions import ErrorKind, StructuredError

#####################################
#     Tests for decode_response     #
#####################################


def test_decode_response_json() -> None:
    """Test that a successful JSON body is decoded."""
    response = httpx.Response(200, json={"id": "svr-1", "status": "ACTIVE"})
    assert decode_response(response) == {"id": "svr-1", "status": "ACTIVE"}


def test_decode_response_empty() -> None:
    """Test that an empty body decodes to None."""
    assert decode_response(httpx.Response(204)) is None


def test_decode_response_error_status() -> None:
    """Test that an error status raises an http_status error."""
    response = httpx.Response(404, json={"errorCode": 1001, "message": "server not found"})
    with pytest.raises(StructuredError) as exc_info:
        decode_response(response)
    error = exc_info.value
    assert error.error_kind is ErrorKind.HTTP_STATUS
    assert error.status_code == 404
    assert error.error_code == 1001


def test_decode_response_invalid_json() -> None:
    """Test that an undecodable body raises a deserialization error."""
    response = httpx.Response(200, text="<html>ok</html>")
    with pytest.raises(StructuredError) as exc_info:
        decode_response(response)
    error = exc_info.value
    assert error.error_kind is ErrorKind.DESERIALIZATION
    assert error.status_code == 200
    assert isinstance(error.cause, ValueError)


#####################################
#     Tests for request_context     #
#####################################


def test_request_context_default_timeout() -> None:
    """Test that the default timeout applies without caller deadline."""
    with request_context(background(), 30.0) as ctx:
        assert ctx.deadline is not None
        assert 29.0 < ctx.remaining() <= 30.0


def test_request_context_keeps_caller_deadline() -> None:
    """Test that the caller deadline governs over the default timeout."""
    with with_timeout(background(), 100.0) as caller, request_context(caller, 30.0) as ctx:
        assert ctx.deadline == caller.deadline


def test_request_context_is_released_with_caller() -> None:
    """Test that canceling the caller finishes the request context."""
    caller = background()
    with request_context(caller, 30.0) as ctx:
        caller.cancel()
        assert ctx.done()


#####################################
#     Tests for request_timeout     #
#####################################


def test_request_timeout_without_deadline() -> None:
    """Test that a context without deadline gives no timeout."""
    assert request_timeout(background()) is None


def test_request_timeout_remaining() -> None:
    """Test that the timeout is the time left before the deadline."""
    with with_timeout(background(), 10.0) as ctx:
        time.sleep(0.01)
        assert 9.0 < request_timeout(ctx) < 10.0
