"""
So Quoteable Backend — Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the whole suite.
How:   The environment is overridden BEFORE anything from `quoteable` is
       imported, because settings and the engine are built at import time.

Fixtures:
    mock_db_session:  AsyncMock standing in for AsyncSession (no real DB)
    person / quote / image / generated_image: real ORM instances, never persisted
    test_client:      HTTPX AsyncClient wired to the app, with the DB
                      dependency replaced by mock_db_session
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["CLOUDINARY_CLOUD_NAME"] = "demo"
os.environ["CLOUDINARY_API_KEY"] = "test-key-not-real"
os.environ["CLOUDINARY_API_SECRET"] = "test-secret-not-real"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid  # noqa: E402
from datetime import timedelta  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from quoteable.models import GeneratedImage, Image, Person, Quote  # noqa: E402
from quoteable.models.person import utcnow  # noqa: E402


def scalars_result(items):
    """Mimic `(await db.execute(...)).scalars().all()`."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = list(items)
    result.scalar_one_or_none.return_value = items[0] if items else None
    return result


def lookup(*records):
    """Side effect for `db.get(Model, id)` that resolves against the given instances."""
    table = {(type(r), r.id): r for r in records}

    async def get(model, ident):
        return table.get((model, ident))

    return get


@pytest.fixture
def mock_db_session():
    """
    Usage:
        mock_db_session.get.return_value = person
        result = await person_service.get_person(mock_db_session, person.id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def person():
    now = utcnow()
    return Person(
        id=uuid.uuid4(),
        name="Albert Einstein",
        slug="albert-einstein",
        bio="Theoretical physicist.",
        birth_date="1879-03-14",
        death_date="1955-04-18",
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def quote(person):
    now = utcnow()
    return Quote(
        id=uuid.uuid4(),
        person_id=person.id,
        text="Imagination is more important than knowledge.",
        source="Saturday Evening Post, 1929",
        source_url=None,
        verified=True,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def image(person):
    return Image(
        id=uuid.uuid4(),
        person_id=person.id,
        cloudinary_id="so-quotable/people/albert-einstein",
        url="https://res.cloudinary.com/demo/image/upload/so-quotable/people/albert-einstein.jpg",
        width=1600,
        height=1200,
        source="Wikimedia Commons",
        license="Public domain",
        created_at=utcnow(),
    )


@pytest.fixture
def generated_image(quote, image):
    now = utcnow()
    return GeneratedImage(
        id=uuid.uuid4(),
        quote_id=quote.id,
        image_id=image.id,
        cloudinary_id="so-quotable/generated/card-abc123",
        url="https://res.cloudinary.com/demo/image/upload/so-quotable/generated/card-abc123.jpg",
        transformation="w_1200,h_630,c_fill/f_auto,q_auto",
        expires_at=now + timedelta(days=30),
        created_at=now,
    )


@pytest_asyncio.fixture
async def test_client(mock_db_session):
    """
    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from quoteable.database import get_db_session
    from quoteable.main import app

    async def override_db_session():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
