"""Shared fixtures for the labeling test suite."""

import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# settings refuse to load without a database URL
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from infrastructure.context import LabelingScope  # noqa: E402
from infrastructure.database.database import Base  # noqa: E402
from services.labeling import LabelingService  # noqa: E402
from tests.fakes import FakeClassificationOracle, FakeOppositionOracle  # noqa: E402


@pytest_asyncio.fixture
async def db_session():
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def scope() -> LabelingScope:
    return LabelingScope(namespace="post")


@pytest.fixture
def classification_oracle() -> FakeClassificationOracle:
    return FakeClassificationOracle(category="Politics & Governance")


@pytest.fixture
def opposition_oracle() -> FakeOppositionOracle:
    return FakeOppositionOracle()


@pytest.fixture
def labeling_service(db_session, scope, classification_oracle, opposition_oracle) -> LabelingService:
    return LabelingService(
        db_session,
        scope,
        classification_oracle=classification_oracle,
        opposition_oracle=opposition_oracle,
    )
