"""
Users Router - protected listing of registered users.
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_user_id, http_error
from ..errors import Rejected
from ..flows import list_users
from ..schemas import UserResponse
from ..store import CredentialStore

router = APIRouter(tags=["users"])
logger = logging.getLogger(__name__)


@router.get("/users", response_model=list[UserResponse])
def get_users(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    List every registered user (id and email only).
    Requires a valid bearer token.
    """
    try:
        users = list_users(CredentialStore(db))
    except Rejected as exc:
        raise http_error(exc) from exc

    logger.info("User listing requested by user_id=%s (%d users)", user_id, len(users))
    return users
