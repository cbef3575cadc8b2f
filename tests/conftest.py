import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "server"))

os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config import Settings, get_settings
from database import get_db
from models import Base


TEST_SECRET = "test-secret"
COMPLETION_URL = "https://llm.test/v1/chat/completions"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        jwt_secret=TEST_SECRET,
        openai_api_key="sk-test",
        openai_api_url=COMPLETION_URL,
    )


@pytest.fixture()
def session_factory():
    """
    Fresh in-memory database per test. StaticPool keeps the single connection
    alive across the threadpool used by sync endpoints.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def app(settings, session_factory):
    from main import app as fastapi_app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_settings] = lambda: settings
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def mock_completion_api(app):
    """
    Routes the completion proxy's outbound calls to a handler set by the test.
    Captured requests are kept on `.calls`.
    """
    from api.completions import get_http_client

    calls = []
    state = {"handler": lambda request: httpx.Response(200, json={})}

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return state["handler"](request)

    async def override_get_http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as c:
            yield c

    app.dependency_overrides[get_http_client] = override_get_http_client

    return MockCompletionAPI(calls, state)


class MockCompletionAPI:
    def __init__(self, calls, state):
        self.calls = calls
        self._state = state

    def respond_with(self, fn):
        self._state["handler"] = fn


VALID_REGISTRATION = {
    "username": "alice1",
    "email": "a@b.com",
    "password": "Passw0rd",
    "confirmPassword": "Passw0rd",
}


@pytest.fixture()
def registration() -> dict:
    return dict(VALID_REGISTRATION)
