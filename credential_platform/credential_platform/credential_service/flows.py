"""
Registration and login: the two user-facing operations built on the
password hasher, the credential store and the token issuer.
"""
from typing import List
import logging

from .auth import TokenIssuer, hash_password, verify_password
from .errors import HashingFailure, InsertionFailure, IssuanceFailure, LookupFailure, Reason, Rejected
from .store import CredentialStore, Identity

logger = logging.getLogger(__name__)


def register(store: CredentialStore, email: str, password: str) -> int:
    if not email or not password:
        raise Rejected(Reason.MISSING_FIELD)

    try:
        password_hash = hash_password(password)
    except HashingFailure as e:
        raise Rejected(Reason.HASHING_FAILURE) from e

    try:
        user_id = store.insert(email, password_hash)
    except InsertionFailure as e:
        raise Rejected(Reason.INSERTION_FAILURE) from e

    logger.info("Registered user_id=%s email=%s", user_id, email)
    return user_id


def login(store: CredentialStore, issuer: TokenIssuer, email: str, password: str) -> str:
    try:
        record = store.fetch_by_email(email)
    except LookupFailure as e:
        raise Rejected(Reason.LOOKUP_FAILURE) from e
    if record is None:
        raise Rejected(Reason.NOT_FOUND)

    if not verify_password(record.password_hash, password):
        raise Rejected(Reason.BAD_PASSWORD)

    try:
        return issuer.issue(record.identity.id, record.identity.email)
    except IssuanceFailure as e:
        raise Rejected(Reason.ISSUANCE_FAILURE) from e


def list_users(store: CredentialStore) -> List[Identity]:
    try:
        return store.list_identities()
    except LookupFailure as e:
        raise Rejected(Reason.LOOKUP_FAILURE) from e
