from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from dataclasses import dataclass
from typing import Optional
import logging
import math
import jwt

from .errors import (
    BadSignature,
    Expired,
    HashingFailure,
    IssuanceFailure,
    MalformedToken,
    MissingIdentity,
    Reason,
    Rejected,
    UnexpectedAlgorithm,
    VerificationFailure,
)

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "secret_jwt_chave_trocar"
ALGORITHM = "HS256"
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")
ACCESS_TOKEN_EXPIRE_HOURS = 24

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class SecretProvider:
    """
    Resolves the symmetric signing key once and hands out the same bytes for
    the lifetime of the instance.
    """

    def __init__(self, configured_secret: Optional[str] = None):
        self._configured_secret = configured_secret
        self._key: Optional[bytes] = None

    def resolve(self) -> bytes:
        if self._key is None:
            secret = self._configured_secret
            if not secret:
                # Shorter than the 32 bytes PyJWT recommends for HS256, so PyJWT warns on every sign/verify
                logger.warning("JWT_SECRET is not set, signing tokens with the built-in default secret")
                secret = DEFAULT_JWT_SECRET
            self._key = secret.encode("utf-8")
        return self._key


def hash_password(password: str) -> str:
    try:
        return pwd_context.hash(password)
    except (ValueError, TypeError) as e:
        raise HashingFailure(str(e)) from e


def verify_password(hashed_password: str, plain_password: str) -> bool:
    if not hashed_password or not plain_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unknown or corrupt hash: same answer as a wrong password
        return False


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    expires_at: int


class TokenIssuer:
    def __init__(self, secrets: SecretProvider, lifetime: timedelta = timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)):
        self.secrets = secrets
        self.lifetime = lifetime

    def issue(self, user_id: int, email: str, now: Optional[datetime] = None) -> str:
        """
        Sign a token binding ``user_id`` and ``email``.

        Args:
            user_id: The user's ID
            email: The user's email
            now: Issuance time, defaults to the current UTC time

        Returns:
            Compact HS256 JWT with ``user_id``, ``email`` and ``exp`` claims

        Raises:
            IssuanceFailure: If the signing primitive fails
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "user_id": user_id,
            "email": email,
            "exp": int((issued_at + self.lifetime).timestamp()),
        }
        try:
            return jwt.encode(payload, self.secrets.resolve(), algorithm=ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise IssuanceFailure(str(e)) from e


class TokenVerifier:
    def __init__(self, secrets: SecretProvider):
        self.secrets = secrets

    def verify(self, token: str) -> TokenClaims:
        """
        Validate a signed token and extract its claims.

        The header algorithm is checked against the HMAC family before any
        signature work, so tokens claiming ``none`` or an asymmetric algorithm
        never reach key handling.

        Raises:
            MalformedToken, UnexpectedAlgorithm, BadSignature, Expired,
            MissingIdentity: all subclasses of VerificationFailure
        """
        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise MalformedToken(str(e)) from e

        alg = header.get("alg")
        if alg not in HMAC_ALGORITHMS:
            raise UnexpectedAlgorithm(f"unexpected signing method: {alg!r}")

        try:
            data = jwt.decode(
                token,
                self.secrets.resolve(),
                algorithms=list(HMAC_ALGORITHMS),
                options={"require": ["exp"]},
            )
        except jwt.InvalidSignatureError as e:
            raise BadSignature(str(e)) from e
        except jwt.ExpiredSignatureError as e:
            raise Expired(str(e)) from e
        except jwt.PyJWTError as e:
            raise MalformedToken(str(e)) from e

        user_id = data.get("user_id")
        if (
            isinstance(user_id, bool)
            or not isinstance(user_id, (int, float))
            or (isinstance(user_id, float) and not math.isfinite(user_id))
        ):
            raise MissingIdentity("token does not contain a valid user_id")
        email = data.get("email", "")
        if not isinstance(email, str):
            raise MissingIdentity("token does not contain a valid email")

        return TokenClaims(user_id=int(user_id), email=email, expires_at=int(data["exp"]))


def authenticate(authorization: Optional[str], verifier: TokenVerifier) -> int:
    """
    Resolve a raw Authorization header value to the authenticated user id.

    Raises:
        Rejected: NO_TOKEN, BAD_SCHEME or INVALID_TOKEN
    """
    if not authorization:
        raise Rejected(Reason.NO_TOKEN)

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise Rejected(Reason.BAD_SCHEME)

    try:
        claims = verifier.verify(parts[1])
    except VerificationFailure as e:
        logger.debug("Token rejected: %s: %s", type(e).__name__, e)
        raise Rejected(Reason.INVALID_TOKEN) from e

    return claims.user_id
