"""
Pytest configuration and fixtures for roster tests.
"""

from __future__ import annotations

import os

# Set test environment variables before importing config
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("STORE_BACKEND", "memory")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from roster.main import app  # noqa: E402
from roster.models.user import UserRecord  # noqa: E402
from roster.repos.memory import MemoryUserStore  # noqa: E402
from roster.services.query_cache import QueryCache  # noqa: E402

ANN = UserRecord(
    id="1",
    first_name="Ann",
    last_name="Lee",
    email="ann@x.com",
    avatar="https://img.example.com/ann.png",
    role="Backend",
    salary=5000,
)
RAVI = UserRecord(
    id="2",
    first_name="Ravi",
    last_name="Kumar",
    email="ravi.kumar@kula.in",
    avatar="https://img.example.com/ravi.png",
    role="Frontend",
    salary=42000,
)
MEERA = UserRecord(
    id="3",
    first_name="Meera",
    last_name="Nair",
    email="meera@kula.in",
    avatar="",
    role="Product Manager",
    salary=88000,
)


@pytest.fixture
def sample_users() -> list[UserRecord]:
    return [ANN, RAVI, MEERA]


@pytest.fixture
def store(sample_users) -> MemoryUserStore:
    return MemoryUserStore(sample_users)


@pytest.fixture
def cache() -> QueryCache:
    """Cache with no retries and a 60s freshness window; each test gets a fresh instance."""
    return QueryCache(ttl=60.0, retries=0, retry_base=0.0)


@pytest_asyncio.fixture(loop_scope="session")
async def async_client(store, cache):
    """Async HTTP client against the ASGI app, wired to the memory store."""
    app.state.store = store
    app.state.cache = cache
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def valid_form() -> dict[str, str]:
    return {
        "first_name": "Priya",
        "last_name": "Shah",
        "email": "priya@kula.in",
        "avatar": "https://img.example.com/priya.png",
        "role": "Fullstack",
        "salary": "25000",
    }
