"""Shared pytest fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from anonqa.main import create_app
from anonqa.settings import Settings
from anonqa.stores.memory import InMemoryStore

ADMIN_TOKEN = "test-admin-token"


class FakeClock:
    """Deterministic clock; advance() moves time forward."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 15, 10, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1.0) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryStore:
    """In-memory store with a controllable clock."""
    return InMemoryStore(clock=clock)


@pytest.fixture
def app(store: InMemoryStore):
    settings = Settings(store_backend="memory", admin_token=ADMIN_TOKEN)
    return create_app(settings=settings, store=store)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Token": ADMIN_TOKEN}
