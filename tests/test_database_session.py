import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from infrastructure.database import database
from infrastructure.database.models.labeling import Label


@pytest.fixture
def session_factory(db_session, monkeypatch):
    factory = sessionmaker(bind=db_session.bind, class_=AsyncSession, autoflush=False, expire_on_commit=False)
    monkeypatch.setattr(database, "SessionLocal", factory)
    return factory


@pytest.mark.asyncio
async def test_get_db_commits_on_success(session_factory, db_session):
    sessions = database.get_db()
    db = await sessions.__anext__()
    db.add(Label(namespace="post", label="committed"))

    with pytest.raises(StopAsyncIteration):
        await sessions.__anext__()

    result = await db_session.execute(select(Label.label))
    assert result.scalars().all() == ["committed"]


@pytest.mark.asyncio
async def test_get_db_rolls_back_on_error(session_factory, db_session):
    sessions = database.get_db()
    db = await sessions.__anext__()
    db.add(Label(namespace="post", label="discarded"))
    await db.flush()

    with pytest.raises(RuntimeError):
        await sessions.athrow(RuntimeError("request failed"))

    result = await db_session.execute(select(Label.label))
    assert result.scalars().all() == []
