"""Session Tokens — verifies JWT decoding and rejection paths."""

from datetime import timedelta

import jwt
import pytest

from travel_map.core.domain_types import SessionUser
from travel_map.core.errors import UnauthorizedError
from travel_map.infrastructure.session_tokens import (
    decode_session_token, issue_session_token,
)

SECRET = "unit-test-secret-0123456789abcdef"


def test_issued_token_decodes_to_same_user():
    user = SessionUser(
        id="amy@example.com", email="amy@example.com", name="Amy",
        image="https://img/amy.png",
    )
    assert decode_session_token(issue_session_token(user, SECRET), SECRET) == user


def test_optional_claims_may_be_missing():
    token = issue_session_token(SessionUser(id="u-1"), SECRET)
    assert decode_session_token(token, SECRET) == SessionUser(id="u-1")


def test_expired_token_rejected():
    token = issue_session_token(
        SessionUser(id="u-1"), SECRET, ttl=timedelta(seconds=-10),
    )
    with pytest.raises(UnauthorizedError, match="expired"):
        decode_session_token(token, SECRET)


def test_wrong_secret_rejected():
    token = issue_session_token(SessionUser(id="u-1"), SECRET)
    with pytest.raises(UnauthorizedError, match="Invalid session"):
        decode_session_token(token, "another-secret-0123456789abcdef00")


def test_token_without_sub_uses_email():
    token = jwt.encode({"email": "amy@example.com"}, SECRET, algorithm="HS256")
    assert decode_session_token(token, SECRET) == SessionUser(
        id="amy@example.com", email="amy@example.com",
    )


def test_token_without_sub_or_email_rejected():
    token = jwt.encode({"name": "Amy"}, SECRET, algorithm="HS256")
    with pytest.raises(UnauthorizedError):
        decode_session_token(token, SECRET)


def test_garbage_rejected():
    with pytest.raises(UnauthorizedError):
        decode_session_token("not-a-jwt", SECRET)


def test_unauthorized_maps_to_401():
    with pytest.raises(UnauthorizedError) as exc_info:
        decode_session_token("not-a-jwt", SECRET)
    assert exc_info.value.http_status == 401
