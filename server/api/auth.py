# server/api/auth.py

import re
import logging
from pydantic import BaseModel, ConfigDict, Field
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session
from config import Settings, get_settings
from database import get_db
from core.errors import AppError, InternalError, NotFoundError, UnauthorizedError, ValidationError
from core.payload import parse_body
from core.security import (
    TokenError,
    create_access_token,
    decode_access_token,
    get_password_hash,
    token_lifetime,
    verify_password,
)
from core.session import attach_token, clear_token, read_token
from core.store import UserStore
from models.user import User as UserModel


logger = logging.getLogger(__name__)

router = APIRouter()


USERNAME_PATTERN = re.compile(r"[a-zA-Z0-9]+")
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

USERNAME_RULES = "Username must be 3-20 characters long and alphanumeric"
EMAIL_RULES = "Invalid email address"
PASSWORD_RULES = (
    "Password must be at least 8 characters long and contain at least one "
    "uppercase letter, one lowercase letter, and one number"
)
PASSWORD_MISMATCH = "Passwords do not match"


# -------------------------------
# Request / Response schemas
# -------------------------------

class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str | None = None
    email: str | None = None
    password: str | None = None
    confirm_password: str | None = Field(default=None, alias="confirmPassword")


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class AuthResponse(BaseModel):
    id: int
    message: str


# -------------------------------
# Helpers
# -------------------------------

def validate_registration(username: str | None, email: str | None, password: str | None, confirm_password: str | None):
    """
    Checks registration input in order and raises on the first failure.
    """
    if not username or not 3 <= len(username) <= 20 or not USERNAME_PATTERN.fullmatch(username):
        raise ValidationError(USERNAME_RULES)
    if not email or not EMAIL_PATTERN.fullmatch(email):
        raise ValidationError(EMAIL_RULES)
    if not password or len(password) < 8 or not is_strong_password(password):
        raise ValidationError(PASSWORD_RULES)
    if password != confirm_password:
        raise ValidationError(PASSWORD_MISMATCH)


def is_strong_password(password: str) -> bool:
    return (
        re.search(r"[a-z]", password) is not None
        and re.search(r"[A-Z]", password) is not None
        and re.search(r"[0-9]", password) is not None
    )


def issue_session_token(user: UserModel, settings: Settings) -> str:
    claims = {"userId": user.id, "username": user.username}
    return create_access_token(
        claims,
        settings.require_signing_secret(),
        expires_delta=token_lifetime(settings.jwt_expire_minutes),
    )


# -------------------------------
# Endpoints
# -------------------------------

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    response: Response,
    req: RegisterRequest = Depends(parse_body(RegisterRequest)),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    validate_registration(req.username, req.email, req.password, req.confirm_password)

    try:
        hashed = get_password_hash(req.password)
        user = UserStore(db).create(req.username, req.email, hashed)
        token = issue_session_token(user, settings)
    except AppError as e:
        logger.info("Registration rejected for %s: %s", req.username, e.message)
        raise
    except Exception:
        logger.exception("Failed to register user %s", req.username)
        raise InternalError()

    attach_token(response, token, settings)
    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return {"id": user.id, "message": "Registration successful! Please log in."}


@router.post("/login", response_model=AuthResponse)
def login(
    response: Response,
    req: LoginRequest = Depends(parse_body(LoginRequest)),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if not req.username or not req.password:
        raise ValidationError("Username and password are required")

    try:
        user = UserStore(db).find_by_username(req.username)
        if user is None:
            raise NotFoundError("User not found")
        if not verify_password(req.password, user.hashed_password):
            raise UnauthorizedError("Invalid password")
        token = issue_session_token(user, settings)
    except AppError:
        raise
    except Exception:
        logger.exception("Failed to log in user %s", req.username)
        raise InternalError()

    attach_token(response, token, settings)
    logger.info("User %s logged in", user.username)
    return {"id": user.id, "message": "Login successful!"}


@router.post("/logout")
def logout(response: Response):
    clear_token(response)
    return {"message": "Logout successful"}


@router.get("/profile")
def profile(request: Request, settings: Settings = Depends(get_settings)):
    token = read_token(request)
    if not token:
        raise UnauthorizedError("No token")

    try:
        return decode_access_token(token, settings.require_signing_secret())
    except TokenError as e:
        logger.warning("JWT verification failed: %s", e.reason)
        raise UnauthorizedError("Invalid token")
