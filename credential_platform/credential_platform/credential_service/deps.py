"""
Request dependencies shared by the routes: the process-wide token issuer and
verifier, and the bearer-token gate.
"""
from typing import Optional
from fastapi import Depends, Header, HTTPException, Request

from .auth import SecretProvider, TokenIssuer, TokenVerifier, authenticate
from .config import settings
from .errors import Rejected
from .utils.event_logger import log_auth_event

# One provider per process so issuer and verifier always share a key
secret_provider = SecretProvider(settings.JWT_SECRET)
token_issuer = TokenIssuer(secret_provider)
token_verifier = TokenVerifier(secret_provider)


def get_token_issuer() -> TokenIssuer:
    return token_issuer


def get_token_verifier() -> TokenVerifier:
    return token_verifier


def http_error(exc: Rejected) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> int:
    try:
        return authenticate(authorization, verifier)
    except Rejected as exc:
        log_auth_event("auth_rejected", request, reason=exc.reason.name)
        raise http_error(exc) from exc
