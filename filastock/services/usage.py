"""
Usage ledger: append-only weight deductions against a unit.

A deduction larger than what is left clamps ``remaining_weight`` to 0 and is
reported back as a warning instead of failing the call. Recorded events are
never edited or removed, except together with their unit.
"""

import logging
import math
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.lifecycle import as_naive_utc, utcnow
from ..core.validation import check_usage_amount
from ..db.inventory.usage import UsageEvent
from ..schemas.inventory import UsageCreate
from . import units as unit_store

logger = logging.getLogger(__name__)

OVERDRAW_WARNING = "Usage amount exceeds remaining inventory; remaining weight set to 0"


def apply_deduction(remaining: float, amount: float) -> Tuple[float, Optional[str]]:
    """New remaining weight after deducting ``amount``, clamped at 0.

    Amounts within float noise of what is left consume the unit exactly.
    """
    if math.isclose(amount, remaining, rel_tol=1e-9, abs_tol=1e-9):
        return 0.0, None
    if amount > remaining:
        return 0.0, OVERDRAW_WARNING
    return remaining - amount, None


async def record_usage(
    db: AsyncSession,
    *,
    owner_id: str,
    unit_id: UUID,
    payload: UsageCreate,
) -> Tuple[UsageEvent, float, Optional[str]]:
    """Record a usage event and deduct it from the unit.

    Returns the event, the unit's new remaining weight and an optional
    warning when the deduction had to be clamped.
    """
    amount = check_usage_amount(payload.amount)
    unit = await unit_store.get_unit(db, owner_id=owner_id, unit_id=unit_id)

    previous = unit.remaining_weight
    new_remaining, warning = apply_deduction(previous, amount)
    event = UsageEvent(
        owner_id=owner_id,
        unit_id=unit.id,
        amount=amount,
        used_at=as_naive_utc(payload.used_at) or utcnow(),
        project_name=payload.project_name,
        notes=payload.notes,
    )
    try:
        db.add(event)
        unit.remaining_weight = new_remaining
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    if warning:
        logger.warning(
            "unit %s overdrawn: requested %.2f with %.2f left (owner=%s)",
            unit.id, amount, previous, owner_id,
        )
    return event, unit.remaining_weight, warning


async def list_usage(
    db: AsyncSession,
    *,
    owner_id: str,
    unit_id: Optional[UUID] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[UsageEvent]:
    if unit_id is not None:
        # Ownership check; foreign units read as missing
        await unit_store.get_unit(db, owner_id=owner_id, unit_id=unit_id)

    stmt = select(UsageEvent).where(UsageEvent.owner_id == owner_id)
    if unit_id is not None:
        stmt = stmt.where(UsageEvent.unit_id == unit_id)
    if start is not None:
        stmt = stmt.where(UsageEvent.used_at >= as_naive_utc(start))
    if end is not None:
        stmt = stmt.where(UsageEvent.used_at <= as_naive_utc(end))
    res = await db.execute(stmt.order_by(UsageEvent.used_at.desc()))
    return list(res.scalars().all())


async def total_usage(db: AsyncSession, *, owner_id: str, unit_id: UUID) -> float:
    await unit_store.get_unit(db, owner_id=owner_id, unit_id=unit_id)
    res = await db.execute(
        select(func.coalesce(func.sum(UsageEvent.amount), 0.0)).where(
            UsageEvent.owner_id == owner_id, UsageEvent.unit_id == unit_id
        )
    )
    return float(res.scalar_one())
