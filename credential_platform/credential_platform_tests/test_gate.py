"""Tests for the bearer-token authentication gate."""
import pytest

from credential_platform.credential_platform.credential_service.auth import (
    SecretProvider,
    TokenIssuer,
    TokenVerifier,
    authenticate,
)
from credential_platform.credential_platform.credential_service.errors import Reason, Rejected

KEY = "gate-test-signing-key-with-32-plus-bytes"


@pytest.fixture
def verifier():
    return TokenVerifier(SecretProvider(KEY))


@pytest.fixture
def token():
    return TokenIssuer(SecretProvider(KEY)).issue(17, "gate@x.com")


def test_valid_bearer_token_returns_user_id(verifier, token):
    assert authenticate(f"Bearer {token}", verifier) == 17


@pytest.mark.parametrize("header", [None, ""])
def test_missing_header(verifier, header):
    with pytest.raises(Rejected) as exc_info:
        authenticate(header, verifier)
    assert exc_info.value.reason is Reason.NO_TOKEN
    assert exc_info.value.status_code == 401


@pytest.mark.parametrize("header", [
    "Basic xyz",
    "bearer abc",
    "BEARER abc",
    "Bearer",
    "Bearer  abc",
    "Bearer abc def",
])
def test_bad_scheme(verifier, header):
    with pytest.raises(Rejected) as exc_info:
        authenticate(header, verifier)
    assert exc_info.value.reason is Reason.BAD_SCHEME
    assert exc_info.value.message == "Malformed Authorization header"


def test_lowercase_scheme_with_valid_token_is_rejected(verifier, token):
    with pytest.raises(Rejected) as exc_info:
        authenticate(f"bearer {token}", verifier)
    assert exc_info.value.reason is Reason.BAD_SCHEME


def test_empty_token(verifier):
    with pytest.raises(Rejected) as exc_info:
        authenticate("Bearer ", verifier)
    assert exc_info.value.reason is Reason.INVALID_TOKEN


def test_token_from_other_key(token):
    other = TokenVerifier(SecretProvider("a-completely-different-key-of-32-bytes"))

    with pytest.raises(Rejected) as exc_info:
        authenticate(f"Bearer {token}", other)
    assert exc_info.value.reason is Reason.INVALID_TOKEN
    assert exc_info.value.message == "Invalid token"
