"""Shared test fixtures and configuration."""
import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple, Union
from unittest.mock import AsyncMock, Mock

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DASHBOARD_PASSWORD", "testpass123")
os.environ.setdefault("RESTAURANT_NAME", "Test Steakhouse")
os.environ.setdefault("SHEETS_API_URL", "https://sheets.test/exec")

from app.main import app
from app.db.database import get_db
from app.db.models import Base
from app.core.config import Settings
from app.core.dependencies import get_menu_assistant, get_menu_repository, get_sheets_client
from app.services.assistant.assistant import MenuAssistant
from app.services.menu.in_memory_menu import InMemoryMenuProvider
from app.services.menu.repository import MenuRepository
from app.services.sheets.client import SheetsClient


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
SHEETS_URL = "https://sheets.test/exec"

Handler = Union[Dict[str, Any], httpx.Response, Callable[[Dict[str, Any]], Any]]


class FakeSheetsBackend:
    """Stands in for the remote script endpoint behind httpx.MockTransport.

    Register a response per action; every request is recorded as
    (action, payload) where payload is the query string or JSON body.
    """

    def __init__(self):
        self.responses: Dict[str, Handler] = {}
        self.requests: List[Tuple[str, Dict[str, Any]]] = []
        self.raw_requests: List[httpx.Request] = []

    def on(self, action: str, response: Handler) -> None:
        self.responses[action] = response

    def payloads(self, action: str) -> List[Dict[str, Any]]:
        return [payload for name, payload in self.requests if name == action]

    def handle(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            payload: Dict[str, Any] = dict(request.url.params)
        else:
            payload = json.loads(request.content.decode("utf-8"))
        action = payload.get("action", "")
        self.requests.append((action, payload))
        self.raw_requests.append(request)

        response = self.responses.get(action)
        if response is None:
            return httpx.Response(500, text=f"no handler for {action}")
        if callable(response):
            response = response(payload)
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)


@pytest.fixture
def test_settings():
    """Override settings for testing."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        dashboard_password="testpass123",
        sheets_api_url=SHEETS_URL,
        restaurant_name="Test Steakhouse",
        menu_cache_seconds=0.0,
        openai_api_key="",
    )


@pytest.fixture
async def test_db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_db(test_db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def test_menu_path():
    """Return path to test menu YAML file."""
    return Path(__file__).parent / "fixtures" / "test_menu.yaml"


@pytest.fixture
def test_menu_provider(test_menu_path):
    """Static provider over the test menu."""
    return InMemoryMenuProvider(menu_file=str(test_menu_path))


@pytest.fixture
def test_menu_repository(test_menu_provider):
    """Create menu repository with test data."""
    return MenuRepository(test_menu_provider)


@pytest.fixture
def sheets_backend():
    """Fake remote endpoint."""
    return FakeSheetsBackend()


@pytest.fixture
def sheets_client(sheets_backend):
    """Remote endpoint client wired to the fake backend."""
    return SheetsClient(SHEETS_URL, transport=httpx.MockTransport(sheets_backend.handle))


@pytest.fixture
def override_get_db():
    """Override get_db with an in-memory database created on first use.

    Tables are created inside the test client's event loop.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    created = False

    async def _override_get_db():
        nonlocal created
        if not created:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            created = True
        async with session_factory() as session:
            yield session

    return _override_get_db


@pytest.fixture
def mock_openai():
    """Mock OpenAI API client."""
    mock_client = Mock()
    mock_completion = Mock()
    mock_completion.choices = [Mock(message=Mock(content="本店推薦板腱牛排套餐。"))]
    mock_client.chat.completions.create = AsyncMock(return_value=mock_completion)
    return mock_client


@pytest.fixture
def test_client(
    override_get_db,
    test_menu_repository,
    sheets_client,
    mock_openai,
    test_settings,
    monkeypatch,
):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_menu_repository] = lambda: test_menu_repository
    app.dependency_overrides[get_sheets_client] = lambda: sheets_client
    app.dependency_overrides[get_menu_assistant] = lambda: MenuAssistant(
        test_menu_repository, client=mock_openai
    )

    # Override settings in modules that read it per request
    monkeypatch.setattr("app.core.config.settings", test_settings)
    monkeypatch.setattr("app.api.auth.settings", test_settings)
    monkeypatch.setattr("app.api.cart.settings", test_settings)
    monkeypatch.setattr("app.api.admin.settings", test_settings)
    monkeypatch.setattr("app.services.assistant.assistant.settings", test_settings)

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def authenticated_client(test_client, test_settings):
    """Create test client with valid session cookie."""
    response = test_client.post(
        "/api/auth/login",
        json={"password": test_settings.dashboard_password},
    )
    assert response.status_code == 200

    # Session cookie is automatically stored in test_client
    return test_client


@pytest.fixture(autouse=True)
def clean_auth_sessions():
    """Clean up authentication sessions before and after tests."""
    from app.api import auth
    auth._sessions.clear()
    yield
    auth._sessions.clear()


@pytest.fixture(autouse=True)
def clean_carts():
    """Clean up stored carts before and after tests."""
    from app.services.cart import store
    store._carts.clear()
    yield
    store._carts.clear()
