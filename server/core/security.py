# server/core/security.py

from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext


ALGORITHM = "HS256"


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenError(Exception):
    """Raised when a session token cannot be verified."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


# -------------------------------
# Password hashing
# -------------------------------

def get_password_hash(password: str) -> str:
    if not password:
        raise ValueError("Password must not be empty")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------
# Session tokens
# -------------------------------

def create_access_token(data: dict, secret: str, expires_delta: timedelta | None = None) -> str:
    """
    Signs `data` as an HS256 JWT stamped with `iat`. An `exp` claim is added
    only when `expires_delta` is given.
    """
    now = datetime.now(timezone.utc)
    to_encode = data.copy()
    to_encode.setdefault("iat", now)
    if expires_delta is not None:
        to_encode.update({"exp": now + expires_delta})
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def decode_access_token(token: str, secret: str) -> dict:
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError as e:
        raise TokenError(str(e) or e.__class__.__name__) from e


def token_lifetime(expire_minutes: int) -> timedelta | None:
    if expire_minutes <= 0:
        return None
    return timedelta(minutes=expire_minutes)
