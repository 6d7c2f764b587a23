"""
Inventory unit store.

All reads and writes are scoped by ``owner_id``; a unit owned by someone else
is reported exactly like a missing one. Lifecycle changes go through
``core.lifecycle`` and every create/update registers its (brand, color) pair
through ``catalog.ensure_color``.
"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core import errors, lifecycle
from ..core.config import settings
from ..core.filters import UnitFilter, apply_filter, sql_conditions
from ..core.validation import (
    check_color_code,
    check_remaining_weight,
    check_total_weight,
    check_unit_price,
    require_name,
)
from ..db.inventory.unit import InventoryUnit
from ..db.inventory.usage import UsageEvent
from ..schemas.inventory import UnitBulkCreate, UnitCreate, UnitUpdate
from . import catalog

logger = logging.getLogger(__name__)

# Fields a caller may set to null explicitly
NULLABLE_FIELDS = {"color_code", "notes"}


def _unit_query():
    return select(InventoryUnit).options(
        selectinload(InventoryUnit.brand),
        selectinload(InventoryUnit.material_type),
    )


async def get_unit(db: AsyncSession, *, owner_id: str, unit_id: UUID) -> InventoryUnit:
    res = await db.execute(
        _unit_query().where(InventoryUnit.id == unit_id, InventoryUnit.owner_id == owner_id)
    )
    unit = res.scalar_one_or_none()
    if not unit:
        raise errors.NotFoundError("Inventory unit", unit_id)
    return unit


async def list_units(
    db: AsyncSession,
    *,
    owner_id: str,
    filters: Optional[UnitFilter] = None,
) -> List[InventoryUnit]:
    filters = filters or UnitFilter()
    stmt = (
        _unit_query()
        .where(InventoryUnit.owner_id == owner_id, *sql_conditions(InventoryUnit, filters))
        .order_by(InventoryUnit.created_at.desc())
    )
    res = await db.execute(stmt)
    # Color matching (and a re-check of the rest) happens in Python
    return apply_filter(res.scalars().all(), filters)


def _validated_fields(payload: UnitCreate) -> dict:
    total_weight = check_total_weight(payload.total_weight)
    return {
        "color_name": require_name(payload.color_name, "color_name"),
        "color_code": check_color_code(payload.color_code),
        "total_weight": total_weight,
        "remaining_weight": total_weight,
        "unit_price": check_unit_price(payload.unit_price),
        "acquired_on": payload.acquired_on,
        "notes": payload.notes or None,
    }


async def create_unit(db: AsyncSession, *, owner_id: str, payload: UnitCreate) -> InventoryUnit:
    fields = _validated_fields(payload)
    brand = await catalog.get_brand(db, owner_id=owner_id, brand_id=payload.brand_id)
    mtype = await catalog.get_material_type(db, owner_id=owner_id, type_id=payload.type_id)

    try:
        await catalog.ensure_color(
            db,
            owner_id=owner_id,
            brand_id=brand.id,
            color_name=fields["color_name"],
            color_code=fields["color_code"],
        )
        unit = InventoryUnit(
            owner_id=owner_id,
            brand=brand,
            material_type=mtype,
            status=lifecycle.UnitStatus.UNOPENED,
            **fields,
        )
        db.add(unit)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("created unit %s (owner=%s brand=%s type=%s)", unit.id, owner_id, brand.id, mtype.id)
    return unit


async def create_units_bulk(db: AsyncSession, *, owner_id: str, payload: UnitBulkCreate) -> List[InventoryUnit]:
    """Create ``quantity`` identical units in a single transaction.

    Either every unit is committed or none is. Units may start directly in the
    opened state, sharing one ``opened_at``.
    """
    if payload.quantity < 1 or payload.quantity > settings.bulk_create_max:
        raise errors.ValidationError(
            f"Quantity must be between 1 and {settings.bulk_create_max}", field="quantity"
        )
    fields = _validated_fields(payload)
    status, opened_at = lifecycle.initial_state(payload.opened, payload.opened_at)

    brand = await catalog.get_brand(db, owner_id=owner_id, brand_id=payload.brand_id)
    mtype = await catalog.get_material_type(db, owner_id=owner_id, type_id=payload.type_id)

    try:
        await catalog.ensure_color(
            db,
            owner_id=owner_id,
            brand_id=brand.id,
            color_name=fields["color_name"],
            color_code=fields["color_code"],
        )
        units = [
            InventoryUnit(
                owner_id=owner_id,
                brand=brand,
                material_type=mtype,
                status=status,
                opened_at=opened_at,
                **fields,
            )
            for _ in range(payload.quantity)
        ]
        db.add_all(units)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.warning("bulk create of %d units rolled back (owner=%s)", payload.quantity, owner_id)
        raise

    logger.info("bulk created %d units (owner=%s status=%s)", len(units), owner_id, status.value)
    return units


async def update_unit(db: AsyncSession, *, owner_id: str, unit_id: UUID, payload: UnitUpdate) -> InventoryUnit:
    """Apply the fields explicitly present in ``payload``.

    Absent fields keep their stored value. An explicit null clears
    ``color_code``/``notes`` and is rejected for required fields.
    """
    unit = await get_unit(db, owner_id=owner_id, unit_id=unit_id)
    data = payload.model_dump(exclude_unset=True)

    for k, v in data.items():
        if v is None and k not in NULLABLE_FIELDS:
            raise errors.ValidationError(f"{k} cannot be null", field=k)

    changes = {}
    if "color_name" in data:
        changes["color_name"] = require_name(data["color_name"], "color_name")
    if "color_code" in data:
        changes["color_code"] = check_color_code(data["color_code"])
    if "unit_price" in data:
        changes["unit_price"] = check_unit_price(data["unit_price"])
    if "acquired_on" in data:
        changes["acquired_on"] = data["acquired_on"]
    if "notes" in data:
        changes["notes"] = data["notes"] or None

    total_weight = unit.total_weight
    if "total_weight" in data:
        total_weight = check_total_weight(data["total_weight"])
        changes["total_weight"] = total_weight
    remaining = data.get("remaining_weight", unit.remaining_weight)
    if "remaining_weight" in data or "total_weight" in data:
        changes["remaining_weight"] = check_remaining_weight(remaining, total_weight)

    brand = unit.brand
    if "brand_id" in data and data["brand_id"] != unit.brand_id:
        brand = await catalog.get_brand(db, owner_id=owner_id, brand_id=data["brand_id"])
    mtype = unit.material_type
    if "type_id" in data and data["type_id"] != unit.type_id:
        mtype = await catalog.get_material_type(db, owner_id=owner_id, type_id=data["type_id"])

    try:
        await catalog.ensure_color(
            db,
            owner_id=owner_id,
            brand_id=brand.id,
            color_name=changes.get("color_name", unit.color_name),
            color_code=changes.get("color_code", unit.color_code),
        )
        unit.brand = brand
        unit.material_type = mtype
        for k, v in changes.items():
            setattr(unit, k, v)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return unit


async def delete_unit(db: AsyncSession, *, owner_id: str, unit_id: UUID) -> None:
    unit = await get_unit(db, owner_id=owner_id, unit_id=unit_id)
    try:
        await db.execute(delete(UsageEvent).where(UsageEvent.unit_id == unit.id))
        await db.delete(unit)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("deleted unit %s (owner=%s)", unit_id, owner_id)


async def _transition(db: AsyncSession, unit: InventoryUnit, apply, *args) -> InventoryUnit:
    before = unit.status
    apply(unit, *args)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("unit %s: %s -> %s", unit.id, lifecycle.UnitStatus(before).value, unit.status.value)
    return unit


async def open_unit(db: AsyncSession, *, owner_id: str, unit_id: UUID, at: Optional[datetime] = None) -> InventoryUnit:
    unit = await get_unit(db, owner_id=owner_id, unit_id=unit_id)
    return await _transition(db, unit, lifecycle.open_unit, at)


async def deplete_unit(db: AsyncSession, *, owner_id: str, unit_id: UUID, at: Optional[datetime] = None) -> InventoryUnit:
    unit = await get_unit(db, owner_id=owner_id, unit_id=unit_id)
    return await _transition(db, unit, lifecycle.deplete_unit, at)


async def restore_unit(db: AsyncSession, *, owner_id: str, unit_id: UUID) -> InventoryUnit:
    unit = await get_unit(db, owner_id=owner_id, unit_id=unit_id)
    return await _transition(db, unit, lifecycle.restore_unit)
