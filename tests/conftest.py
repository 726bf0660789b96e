# tests/conftest.py
from __future__ import annotations

import json
import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, date, datetime, time
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-chetana")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("CHAT_HISTORY_ENABLED", "true")

from chetana.api.v1.dependencies import (  # noqa: E402
    get_gemini_client_dep,
    get_history_store_dep,
    get_rate_limiter_dep,
    get_streak_tracker,
)
from chetana.core.security import create_access_token  # noqa: E402
from chetana.db.session import Base  # noqa: E402
from chetana.db.session import get_db as app_get_session  # noqa: E402
from chetana.main import app as fastapi_app  # noqa: E402
from chetana.models import User  # noqa: E402
from chetana.services import membership  # noqa: E402
from chetana.services.chat_history import ChatHistoryStore  # noqa: E402
from chetana.services.gemini import GeminiClient, GeminiConfig  # noqa: E402
from chetana.services.rate_limit import SlidingWindowRateLimiter  # noqa: E402
from chetana.services.streaks import StreakTracker  # noqa: E402
from chetana.services.users import UserService  # noqa: E402

TEST_DB_URL = "sqlite://"

# Wednesday mid-afternoon, well before the default cutoff.
FIXED_NOW = datetime(2025, 3, 12, 15, 30, tzinfo=UTC)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="session")
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(engine: Engine, session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit, so every test starts from empty tables.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def rate_limiter() -> SlidingWindowRateLimiter:
    """Fresh in-memory limiter so tests do not share an action budget."""
    return SlidingWindowRateLimiter(max_actions=50, window_seconds=60)


@pytest.fixture()
def history_store(session_factory: sessionmaker[Session]) -> ChatHistoryStore:
    return ChatHistoryStore(session_factory, enabled=True)


@pytest.fixture()
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture()
def streak_tracker(fixed_clock: Callable[[], datetime]) -> StreakTracker:
    return StreakTracker(clock=fixed_clock, deadline=time(23, 59), timezone="UTC")


def _fake_model_reply(request: httpx.Request) -> httpx.Response:
    prompt = json.loads(request.content)["contents"][0]["parts"][0]["text"]
    text = "sadness" if prompt.startswith("Classify the emotion") else "I'm here with you."
    return httpx.Response(
        200,
        json={"candidates": [{"content": {"parts": [{"text": text}]}}]},
    )


def _build_gemini_client(
    handler: Callable[[httpx.Request], httpx.Response] = _fake_model_reply,
    *,
    api_key: str | None = "test-key",
) -> GeminiClient:
    config = GeminiConfig(
        api_key=api_key,
        model="test-model",
        base_url="https://llm.test/v1beta",
        timeout_seconds=5.0,
        temperature=0.7,
        top_k=40,
        top_p=0.95,
        max_output_tokens=256,
    )
    return GeminiClient(config, transport=httpx.MockTransport(handler))


@pytest.fixture()
def make_gemini_client() -> Callable[..., GeminiClient]:
    """Build a language model client that talks to an in-process fake."""
    return _build_gemini_client


@pytest.fixture()
def gemini_client() -> GeminiClient:
    return _build_gemini_client()


@pytest.fixture(autouse=True)
def override_service_dependencies(
    app: FastAPI,
    rate_limiter: SlidingWindowRateLimiter,
    history_store: ChatHistoryStore,
    gemini_client: GeminiClient,
    streak_tracker: StreakTracker,
) -> Iterator[None]:
    overrides: dict[Callable[..., Any], Callable[[], Any]] = {
        get_rate_limiter_dep: lambda: rate_limiter,
        get_history_store_dep: lambda: history_store,
        get_gemini_client_dep: lambda: gemini_client,
        get_streak_tracker: lambda: streak_tracker,
    }
    app.dependency_overrides.update(overrides)
    try:
        yield
    finally:
        for dependency in overrides:
            app.dependency_overrides.pop(dependency, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a regular account."""
    return UserService.register(
        db_session,
        name="Test User",
        email="test.user@example.com",
        password="correct-horse",
        dob=date(1998, 4, 2),
    )


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second regular account."""
    return UserService.register(
        db_session,
        name="Other User",
        email="other.user@example.com",
        password="battery-staple",
        dob=date(2000, 1, 15),
    )


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    """Create an account whose email is on the admin list."""
    return UserService.register(
        db_session,
        name="Admin",
        email="admin@chetana.com",
        password="admin-password",
        dob=date(1990, 6, 30),
    )


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the regular test user."""
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}


@pytest.fixture()
def admin_token(admin_user: User) -> dict[str, str]:
    """Return authorization headers for the admin user."""
    token = create_access_token(admin_user.id, is_admin=True)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def member(db_session: Session) -> Callable[..., str]:
    """Join a forum identity to one or more communities and return it."""

    def _join(user_uid: str, *communities: str) -> str:
        for community in communities or ("depression",):
            membership.join(db_session, user_uid, community)
        return user_uid

    return _join
