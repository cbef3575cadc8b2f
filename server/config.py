# server/config.py

import os
from dataclasses import dataclass
from functools import lru_cache
from dotenv import load_dotenv
from core.errors import ConfigurationError


load_dotenv()


DEFAULT_DATABASE_URL = "sqlite:///./data/app.db"
DEFAULT_OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y"}


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, read once from the environment (and .env).
    """
    database_url: str = DEFAULT_DATABASE_URL
    jwt_secret: str | None = None
    jwt_expire_minutes: int = 1440
    site_url: str | None = None
    openai_api_key: str | None = None
    openai_api_url: str = DEFAULT_OPENAI_API_URL
    openai_model: str = "gpt-3.5-turbo"
    openai_max_tokens: int = 100
    openai_timeout: float = 60.0
    cookie_secure: bool = False
    cookie_samesite: str = "lax"
    host: str = "0.0.0.0"
    port: int = 4050
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL") or os.getenv("MONGO_URL") or DEFAULT_DATABASE_URL,
            jwt_secret=os.getenv("JWT_SECRET") or None,
            jwt_expire_minutes=int(os.getenv("JWT_EXPIRE_MINUTES", "1440")),
            site_url=os.getenv("SITE_URL") or None,
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_api_url=os.getenv("OPENAI_API_URL", DEFAULT_OPENAI_API_URL),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-3.5-turbo"),
            openai_max_tokens=int(os.getenv("OPENAI_MAX_TOKENS", "100")),
            openai_timeout=float(os.getenv("OPENAI_TIMEOUT", "60")),
            cookie_secure=_env_bool("COOKIE_SECURE", False),
            cookie_samesite=os.getenv("COOKIE_SAMESITE", "lax").lower(),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "4050")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def cors_origins(self) -> list[str]:
        return [self.site_url] if self.site_url else ["*"]

    def require_signing_secret(self) -> str:
        if not self.jwt_secret:
            raise ConfigurationError("JWT_SECRET is not defined in environment variables")
        return self.jwt_secret


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
