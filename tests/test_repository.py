"""QuestionRepository tests against an in-memory SQLite database.

Uses aiosqlite with a StaticPool so every session shares the same
in-memory database.  Tables are created from the ORM metadata.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from helpers.factories import binary, plain

from riskcheck_db.models.base import Base
from riskcheck_db.repository import QuestionRepository


# =====================================================================
# Fixtures
# =====================================================================


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database and session per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def repo():
    return QuestionRepository()


# =====================================================================
# Round trips
# =====================================================================


@pytest.mark.asyncio
async def test_empty_pool(db, repo):
    """A fresh database has no questions."""
    assert await repo.count(db) == 0
    assert await repo.load_all(db) == []


@pytest.mark.asyncio
async def test_default_pool_round_trip(db, repo, default_questions):
    """Saving and loading preserves order, rules and labels."""
    saved = await repo.save_all(db, default_questions)
    await db.commit()
    assert saved == 28

    loaded = await repo.load_all(db)
    assert loaded == default_questions


@pytest.mark.asyncio
async def test_pool_order_is_display_order(db, repo):
    """Pool order comes from display_order, not from ids."""
    await repo.save_all(db, [binary(30), binary(10), binary(20)])
    assert [q.id for q in await repo.load_all(db)] == [30, 10, 20]


@pytest.mark.asyncio
async def test_save_all_replaces_previous_snapshot(db, repo):
    """A second save fully replaces the first."""
    await repo.save_all(db, [binary(1, follow_up={"Yes": 2}), binary(2)])
    await db.commit()
    loaded = await repo.load_all(db)

    # Same session: previously loaded rows must not clash with the reinsert
    edited = [loaded[1], plain(3, "numeric")]
    await repo.save_all(db, edited)
    await db.commit()

    result = await repo.load_all(db)
    assert [q.id for q in result] == [2, 3]
    assert result[1].control_type == "numeric"
    assert await repo.count(db) == 2


@pytest.mark.asyncio
async def test_follow_up_tokens_round_trip(db, repo):
    """Every answer token can carry its own edge."""
    q = binary(1, yes=1, no=2, na=3, follow_up={"Yes": 2, "No": 3, "N/A": 4})
    await repo.save_all(db, [q, binary(2), binary(3), binary(4)])
    loaded = (await repo.load_all(db))[0]
    assert loaded.follow_up == {"Yes": 2, "No": 3, "N/A": 4}
    assert loaded.risk_points == {"Yes": 1, "No": 2, "N/A": 3}


# =====================================================================
# Constraints
# =====================================================================


@pytest.mark.asyncio
async def test_dangling_edge_dropped_on_save(db, repo, caplog):
    """Edges to ids outside the snapshot cannot be stored."""
    await repo.save_all(db, [binary(1, follow_up={"Yes": 99, "No": 2}), binary(2)])
    loaded = await repo.load_all(db)
    assert loaded[0].follow_up == {"No": 2}
    assert "target does not exist" in caplog.text


@pytest.mark.asyncio
async def test_duplicate_ids_rejected_before_writing(db, repo):
    """A snapshot with duplicate ids leaves the stored pool untouched."""
    await repo.save_all(db, [binary(1)])
    await db.commit()
    with pytest.raises(ValueError, match="Duplicate"):
        await repo.save_all(db, [binary(5), binary(5)])
    assert [q.id for q in await repo.load_all(db)] == [1]


@pytest.mark.asyncio
async def test_reset_restores_defaults(db, repo, default_questions):
    """reset replaces whatever is stored with the default pool."""
    await repo.save_all(db, [binary(1)])
    await repo.reset(db, default_questions)
    assert await repo.count(db) == 28
