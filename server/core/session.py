# server/core/session.py

from fastapi import Request, Response
from config import Settings


COOKIE_NAME = "token"


def read_token(request: Request) -> str | None:
    return request.cookies.get(COOKIE_NAME) or None


def attach_token(response: Response, token: str, settings: Settings):
    max_age = settings.jwt_expire_minutes * 60 if settings.jwt_expire_minutes > 0 else None
    response.set_cookie(
        COOKIE_NAME,
        token,
        max_age=max_age,
        httponly=True,
        samesite=settings.cookie_samesite,
        secure=settings.cookie_secure,
    )


def clear_token(response: Response):
    response.set_cookie(COOKIE_NAME, "", samesite="none", secure=True)
