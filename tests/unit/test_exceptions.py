from __future__ import annotations

import pytest

from arestrava.exceptions import (
    ArestravaError,
    BadStatusError,
    CallCancelledError,
    CallTimeoutError,
    DecodeError,
    DocumentCollisionError,
    DocumentFieldError,
    PlanConsumedError,
    RetriesExhaustedError,
    TokenRefreshError,
    UnauthorizedError,
)


@pytest.mark.parametrize(
    "error",
    [
        BadStatusError(500),
        RetriesExhaustedError(attempts=3),
        UnauthorizedError(),
        TokenRefreshError("failed"),
        DecodeError(status_code=200, body=b""),
        PlanConsumedError("consumed"),
        CallTimeoutError("deadline"),
        CallCancelledError("cancelled"),
        DocumentFieldError(key="id", expected="int"),
        DocumentCollisionError("users"),
    ],
)
def test_errors_share_base_class(error: Exception) -> None:
    assert isinstance(error, ArestravaError)


####################################
#     Tests for BadStatusError     #
####################################


def test_bad_status_error() -> None:
    error = BadStatusError(404)
    assert error.status_code == 404
    assert str(error) == "bad status code: 404"


###########################################
#     Tests for RetriesExhaustedError     #
###########################################


def test_retries_exhausted_error() -> None:
    error = RetriesExhaustedError(attempts=3, status_code=503)
    assert str(error) == "max retries exhausted"
    assert error.attempts == 3
    assert error.status_code == 503


def test_retries_exhausted_error_without_status() -> None:
    assert RetriesExhaustedError(attempts=1).status_code is None


#######################################
#     Tests for UnauthorizedError     #
#######################################


def test_unauthorized_error() -> None:
    error = UnauthorizedError()
    assert str(error) == "invalid tokens"
    assert error.status_code == 401
    assert not isinstance(error, BadStatusError)


def test_unauthorized_error_reason() -> None:
    assert UnauthorizedError().reason is None
    assert UnauthorizedError(reason={"message": "Authorization Error"}).reason == {
        "message": "Authorization Error"
    }


#######################################
#     Tests for TokenRefreshError     #
#######################################


def test_token_refresh_error() -> None:
    error = TokenRefreshError("refresh failed", status_code=400, reason={"message": "bad"})
    assert str(error) == "refresh failed"
    assert error.status_code == 400
    assert error.reason == {"message": "bad"}


def test_token_refresh_error_defaults() -> None:
    error = TokenRefreshError("refresh failed")
    assert error.status_code is None
    assert error.reason is None


#################################
#     Tests for DecodeError     #
#################################


def test_decode_error() -> None:
    error = DecodeError(status_code=200, body=b"oops")
    assert error.status_code == 200
    assert error.body == b"oops"
    assert "status 200" in str(error)


########################################
#     Tests for DocumentFieldError     #
########################################


def test_document_field_error() -> None:
    error = DocumentFieldError(key="expires_at", expected="int")
    assert isinstance(error, ValueError)
    assert error.key == "expires_at"
    assert error.expected == "int"
    assert str(error) == "document field 'expires_at' is missing or is not a int"


############################################
#     Tests for DocumentCollisionError     #
############################################


def test_document_collision_error() -> None:
    error = DocumentCollisionError("users")
    assert error.collection == "users"
    assert str(error) == "collision inserting into users"
