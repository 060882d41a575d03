"""
Credential store backed by the ``users`` table.
"""
from dataclasses import dataclass
from typing import List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import InsertionFailure, LookupFailure
from .models import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    id: int
    email: str


@dataclass(frozen=True)
class CredentialRecord:
    identity: Identity
    password_hash: str


class CredentialStore:
    def __init__(self, db: Session):
        self.db = db

    def insert(self, email: str, password_hash: str) -> int:
        """
        Persist a new user and return its id.

        Raises:
            InsertionFailure: On any database error, a duplicate email included
        """
        user = User(email=email, password_hash=password_hash)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning("Insert failed for email=%s: %s", email, e.__class__.__name__)
            raise InsertionFailure(str(e)) from e
        return user.id

    def fetch_by_email(self, email: str) -> Optional[CredentialRecord]:
        try:
            user = self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            logger.error("Lookup failed for email=%s: %s", email, e)
            raise LookupFailure(str(e)) from e
        if user is None:
            return None
        return CredentialRecord(
            identity=Identity(id=user.id, email=user.email),
            password_hash=user.password_hash,
        )

    def list_identities(self) -> List[Identity]:
        try:
            users = self.db.query(User).order_by(User.id).all()
        except SQLAlchemyError as e:
            logger.error("Listing users failed: %s", e)
            raise LookupFailure(str(e)) from e
        return [Identity(id=u.id, email=u.email) for u in users]
