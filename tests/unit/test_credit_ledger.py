import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.db import crud
from app.models import Base, Comparison, CreditReservation, CreditUsage
from app.services import credit_ledger
from app.services.comparisons import create_comparison
from app.services.errors import DuplicateComparisonError, InsufficientCreditsError, NotFoundError
from tests.helpers import seed_inspection_pair


@pytest_asyncio.fixture
async def db():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


async def _comparison(db, seeded) -> Comparison:
    comp = Comparison(
        user_id=seeded.user_id, property_id=seeded.property_id,
        move_in_inspection_id=seeded.move_in_id, move_out_inspection_id=seeded.move_out_id,
    )
    db.add(comp)
    await db.commit()
    return comp


async def test_reserve_then_commit_records_one_audit_row(db):
    seeded = await seed_inspection_pair(db, credits=3)
    comp = await _comparison(db, seeded)

    await credit_ledger.reserve(db, seeded.user_id, comp.id)
    await db.commit()
    assert await credit_ledger.get_balance(db, seeded.user_id) == 2

    usage = await credit_ledger.commit(db, seeded.user_id, comp.id)
    await db.commit()
    assert usage.credits_before == 3
    assert usage.credits_after == 2
    assert usage.credits_used == 1
    assert await credit_ledger.get_balance(db, seeded.user_id) == 2


async def test_commit_is_at_most_once(db):
    seeded = await seed_inspection_pair(db, credits=3)
    comp = await _comparison(db, seeded)
    await credit_ledger.reserve(db, seeded.user_id, comp.id)

    first = await credit_ledger.commit(db, seeded.user_id, comp.id)
    second = await credit_ledger.commit(db, seeded.user_id, comp.id)
    await db.commit()

    assert first.id == second.id
    rows = (await db.execute(select(CreditUsage).where(CreditUsage.comparison_id == comp.id))).scalars().all()
    assert len(rows) == 1
    assert await credit_ledger.get_balance(db, seeded.user_id) == 2


async def test_commit_without_reservation_debits_directly(db):
    seeded = await seed_inspection_pair(db, credits=1)
    comp = await _comparison(db, seeded)

    usage = await credit_ledger.commit(db, seeded.user_id, comp.id)
    await db.commit()
    assert (usage.credits_before, usage.credits_after) == (1, 0)
    assert await credit_ledger.get_balance(db, seeded.user_id) == 0


async def test_reserve_rejects_insufficient_balance(db):
    seeded = await seed_inspection_pair(db, credits=0)
    comp = await _comparison(db, seeded)
    with pytest.raises(InsufficientCreditsError):
        await credit_ledger.reserve(db, seeded.user_id, comp.id)
    await db.rollback()
    assert await credit_ledger.get_balance(db, seeded.user_id) == 0


async def test_release_refunds_and_blocks_commit_from_reusing_it(db):
    seeded = await seed_inspection_pair(db, credits=2)
    comp = await _comparison(db, seeded)
    await credit_ledger.reserve(db, seeded.user_id, comp.id)
    await db.commit()

    assert await credit_ledger.release(db, comp.id) is True
    await db.commit()
    assert await credit_ledger.get_balance(db, seeded.user_id) == 2
    assert await credit_ledger.release(db, comp.id) is False
    assert await credit_ledger.get_usage_for_comparison(db, comp.id) is None


async def test_check_balance(db):
    seeded = await seed_inspection_pair(db, credits=1)
    assert await credit_ledger.check_balance(db, seeded.user_id) == 1
    with pytest.raises(InsufficientCreditsError):
        await credit_ledger.check_balance(db, seeded.user_id, amount=2)
    with pytest.raises(NotFoundError):
        await credit_ledger.check_balance(db, "missing-user")


async def test_list_usage_newest_first_with_limit(db):
    seeded = await seed_inspection_pair(db, credits=5)
    comps = []
    for i in range(3):
        other = await seed_inspection_pair(db, credits=0, email=f"other{i}@example.com")
        comp = Comparison(
            user_id=seeded.user_id, property_id=seeded.property_id,
            move_in_inspection_id=other.move_in_id, move_out_inspection_id=other.move_out_id,
        )
        db.add(comp)
        await db.commit()
        await credit_ledger.commit(db, seeded.user_id, comp.id)
        await db.commit()
        comps.append(comp)

    rows = await credit_ledger.list_usage(db, seeded.user_id, limit=2)
    assert len(rows) == 2
    assert rows[0].comparison_id == comps[-1].id
    assert await credit_ledger.get_balance(db, seeded.user_id) == 2


async def test_racing_duplicate_hits_unique_constraint(db, monkeypatch):
    seeded = await seed_inspection_pair(db, credits=5)
    await create_comparison(db, seeded.user_id, seeded.property_id,
                            seeded.move_in_id, seeded.move_out_id)
    assert await credit_ledger.get_balance(db, seeded.user_id) == 4

    async def no_existing(*args, **kwargs):
        return None

    # the second request does not see the first one's row yet
    monkeypatch.setattr(crud, "find_comparison_for_pair", no_existing)
    with pytest.raises(DuplicateComparisonError):
        await create_comparison(db, seeded.user_id, seeded.property_id,
                                seeded.move_in_id, seeded.move_out_id)

    count = (await db.execute(select(func.count()).select_from(Comparison))).scalar_one()
    assert count == 1
    assert await credit_ledger.get_balance(db, seeded.user_id) == 4
    reservations = (await db.execute(select(func.count()).select_from(CreditReservation))).scalar_one()
    assert reservations == 1
