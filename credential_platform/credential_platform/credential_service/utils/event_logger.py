"""
Event logger utility for authentication events.
"""
from datetime import datetime, timezone
from typing import List, Optional
from fastapi import Request
import sys
import logging
import os

from ..config import settings

logger = logging.getLogger(__name__)


def build_handlers(log_dir: str) -> List[logging.Handler]:
    """Stdout always; ``<log_dir>/auth_events.log`` when the directory is writable."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    try:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(log_dir, "auth_events.log")))
    except OSError as e:
        print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)
    return handlers


def configure_logging(log_dir: str = settings.LOG_DIR, level: str = settings.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=build_handlers(log_dir)
    )


ALLOWED_EVENT_TYPES = {
    "register_success",
    "register_failure",
    "login_success",
    "login_failure",
    "auth_rejected",
}


def client_ip(request: Request) -> Optional[str]:
    """Client address, falling back to the first X-Forwarded-For hop."""
    if request.client and request.client.host:
        return request.client.host
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return None


def log_auth_event(
    event_type: str,
    request: Request,
    email: Optional[str] = None,
    user_id: Optional[int] = None,
    reason: Optional[str] = None
) -> None:
    """
    Write one line per authentication outcome to stdout and the event log file.

    Args:
        event_type: One of: register_success, register_failure, login_success,
                    login_failure, auth_rejected
        request: FastAPI Request object
        email: Email the request was made for, if any
        user_id: Resolved user id, if any
        reason: Rejection reason name for failure events

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    level = logging.INFO if event_type.endswith("_success") else logging.WARNING
    logger.log(
        level,
        "AUTH %s user_id=%s email=%s reason=%s ip=%s user_agent=%s timestamp=%s",
        event_type, user_id, email, reason, client_ip(request),
        request.headers.get("user-agent"), datetime.now(timezone.utc).isoformat()
    )
