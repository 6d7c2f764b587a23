from datetime import datetime

import pytest
from hypothesis import given, settings, strategies as st

from filastock.core import errors
from filastock.core.lifecycle import UnitStatus
from filastock.schemas.inventory import UsageCreate
from filastock.services import units as unit_store
from filastock.services import usage as usage_ledger

from .conftest import OWNER_A, unit_payload


@pytest.fixture()
async def unit(db_session, catalog_a):
    brand, mtype = catalog_a
    return await unit_store.create_unit(db_session, owner_id=OWNER_A, payload=unit_payload(brand, mtype))


def test_apply_deduction():
    assert usage_ledger.apply_deduction(1000.0, 250.0) == (750.0, None)
    assert usage_ledger.apply_deduction(100.0, 100.0) == (0.0, None)
    assert usage_ledger.apply_deduction(100.0, 0.0) == (100.0, None)
    assert usage_ledger.apply_deduction(50.0, 80.0) == (0.0, usage_ledger.OVERDRAW_WARNING)


def test_apply_deduction_tolerates_float_noise():
    remaining, warning = usage_ledger.apply_deduction(0.3, 0.1)
    assert warning is None
    # 0.3 - 0.1 leaves 0.19999999999999998, just under 0.2
    remaining, warning = usage_ledger.apply_deduction(remaining, 0.2)
    assert warning is None
    assert remaining == 0.0


@given(
    total_cents=st.integers(min_value=1, max_value=500_000),
    cuts=st.lists(st.integers(min_value=0, max_value=1_000_000), max_size=15),
)
@settings(max_examples=200)
def test_deductions_within_total_never_warn(total_cents, cuts):
    # Scale the cuts so they sum to at most the total
    budget = total_cents
    amounts = []
    for cut in cuts:
        take = cut % (budget + 1)
        amounts.append(take / 100)
        budget -= take
    total = total_cents / 100

    remaining = total
    for amount in amounts:
        remaining, warning = usage_ledger.apply_deduction(remaining, amount)
        assert warning is None
        assert remaining >= 0.0
    assert remaining == pytest.approx(total - sum(amounts), abs=1e-6)


async def test_deductions_accumulate(db_session, unit):
    for amount in (120.0, 80.5, 99.5):
        await usage_ledger.record_usage(
            db_session, owner_id=OWNER_A, unit_id=unit.id, payload=UsageCreate(amount=amount)
        )
    fetched = await unit_store.get_unit(db_session, owner_id=OWNER_A, unit_id=unit.id)
    assert fetched.remaining_weight == pytest.approx(700.0)
    assert await usage_ledger.total_usage(db_session, owner_id=OWNER_A, unit_id=unit.id) == pytest.approx(300.0)


async def test_overdraw_clamps_to_zero_with_warning(db_session, unit, caplog):
    await usage_ledger.record_usage(
        db_session, owner_id=OWNER_A, unit_id=unit.id, payload=UsageCreate(amount=950.0)
    )
    event, remaining, warning = await usage_ledger.record_usage(
        db_session, owner_id=OWNER_A, unit_id=unit.id, payload=UsageCreate(amount=80.0, project_name="benchy")
    )
    assert remaining == 0.0
    assert warning == usage_ledger.OVERDRAW_WARNING
    # The event keeps the requested amount
    assert event.amount == 80.0
    assert event.project_name == "benchy"
    assert "overdrawn" in caplog.text


async def test_usage_does_not_change_status(db_session, unit):
    await usage_ledger.record_usage(
        db_session, owner_id=OWNER_A, unit_id=unit.id, payload=UsageCreate(amount=5000.0)
    )
    fetched = await unit_store.get_unit(db_session, owner_id=OWNER_A, unit_id=unit.id)
    assert fetched.remaining_weight == 0.0
    assert fetched.status == UnitStatus.UNOPENED


async def test_negative_amount_rejected(db_session, unit):
    with pytest.raises(errors.ValidationError):
        await usage_ledger.record_usage(
            db_session, owner_id=OWNER_A, unit_id=unit.id, payload=UsageCreate(amount=-1)
        )
    assert await usage_ledger.list_usage(db_session, owner_id=OWNER_A, unit_id=unit.id) == []


async def test_list_usage_time_window(db_session, unit):
    for day in (1, 10, 20):
        await usage_ledger.record_usage(
            db_session,
            owner_id=OWNER_A,
            unit_id=unit.id,
            payload=UsageCreate(amount=10.0, used_at=datetime(2026, 4, day, 12, 0)),
        )
    events = await usage_ledger.list_usage(
        db_session,
        owner_id=OWNER_A,
        unit_id=unit.id,
        start=datetime(2026, 4, 5),
        end=datetime(2026, 4, 25),
    )
    assert [e.used_at.day for e in events] == [20, 10]

    everything = await usage_ledger.list_usage(db_session, owner_id=OWNER_A)
    assert len(everything) == 3


async def test_deleting_unit_drops_its_usage(db_session, unit):
    await usage_ledger.record_usage(
        db_session, owner_id=OWNER_A, unit_id=unit.id, payload=UsageCreate(amount=10.0)
    )
    await unit_store.delete_unit(db_session, owner_id=OWNER_A, unit_id=unit.id)
    assert await usage_ledger.list_usage(db_session, owner_id=OWNER_A) == []
