import importlib

import pytest

from config import DEFAULT_DATABASE_URL, Settings, get_settings
from core.errors import ConfigurationError


ENV_VARS = [
    "DATABASE_URL", "MONGO_URL", "JWT_SECRET", "JWT_EXPIRE_MINUTES", "SITE_URL",
    "OPENAI_API_KEY", "COOKIE_SECURE", "COOKIE_SAMESITE", "PORT",
]


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings.from_env()

    assert s.database_url == DEFAULT_DATABASE_URL
    assert s.jwt_secret is None
    assert s.jwt_expire_minutes == 1440
    assert s.cors_origins == ["*"]
    assert s.port == 4050
    assert s.cookie_secure is False


def test_reads_environment(clean_env):
    clean_env.setenv("MONGO_URL", "sqlite:///./other.db")
    clean_env.setenv("JWT_SECRET", "s3cret")
    clean_env.setenv("SITE_URL", "https://app.example.com")
    clean_env.setenv("JWT_EXPIRE_MINUTES", "0")
    clean_env.setenv("COOKIE_SECURE", "yes")
    clean_env.setenv("COOKIE_SAMESITE", "None")

    s = Settings.from_env()

    assert s.database_url == "sqlite:///./other.db"
    assert s.require_signing_secret() == "s3cret"
    assert s.cors_origins == ["https://app.example.com"]
    assert s.jwt_expire_minutes == 0
    assert s.cookie_secure is True
    assert s.cookie_samesite == "none"


def test_database_url_wins_over_mongo_url(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite:///./a.db")
    clean_env.setenv("MONGO_URL", "sqlite:///./b.db")

    assert Settings.from_env().database_url == "sqlite:///./a.db"


def test_missing_signing_secret_fails(clean_env):
    with pytest.raises(ConfigurationError):
        Settings.from_env().require_signing_secret()


def test_app_refuses_to_start_without_signing_secret(monkeypatch):
    import main

    monkeypatch.delenv("JWT_SECRET", raising=False)
    get_settings.cache_clear()
    try:
        with pytest.raises(ConfigurationError):
            importlib.reload(main)
    finally:
        monkeypatch.undo()
        get_settings.cache_clear()
        importlib.reload(main)

    assert main.settings.jwt_secret
