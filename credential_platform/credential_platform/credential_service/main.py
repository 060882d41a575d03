from fastapi import FastAPI, Depends, Request, status
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db, init_db
from .auth import TokenIssuer
from .deps import get_token_issuer, http_error
from .errors import Rejected
from .flows import login as login_flow, register as register_flow
from .schemas import UserCreate, UserLogin, Token, RegistrationResponse
from .store import CredentialStore
from .utils.event_logger import configure_logging, log_auth_event
from .routes import users

# Configure logging
configure_logging()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Create tables on startup"""
    init_db()
    yield


app = FastAPI(
    title="Credential Service",
    description="User registration, login and bearer-token authentication",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include protected user listing
app.include_router(users.router)


@app.post("/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, request: Request, db: Session = Depends(get_db)):
    try:
        user_id = register_flow(CredentialStore(db), user.email, user.password)
    except Rejected as exc:
        log_auth_event("register_failure", request, email=user.email, reason=exc.reason.name)
        raise http_error(exc) from exc

    log_auth_event("register_success", request, email=user.email, user_id=user_id)
    return RegistrationResponse(id=user_id, message=f"User created with ID: {user_id}")


@app.post("/login", response_model=Token)
def login(
    credentials: UserLogin,
    request: Request,
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    try:
        token = login_flow(CredentialStore(db), issuer, credentials.email, credentials.password)
    except Rejected as exc:
        log_auth_event("login_failure", request, email=credentials.email, reason=exc.reason.name)
        raise http_error(exc) from exc

    log_auth_event("login_success", request, email=credentials.email)
    return Token(token=token)
