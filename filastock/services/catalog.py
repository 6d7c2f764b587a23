"""
Brand / material type / brand color catalog.

Besides plain owner-scoped CRUD this module holds the two guards the
inventory store relies on:

- delete_brand / delete_material_type refuse while any unit references the
  target (ReferencedEntityError).
- ensure_color is the idempotent auto-add used on unit writes, while
  create_color is the strict explicit create (DuplicateError on collision).
"""

import logging
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core import errors
from ..core.cache import catalog_cache
from ..core.config import settings
from ..core.validation import check_color_code, require_name
from ..db.brand import Brand
from ..db.color import ColorEntry
from ..db.inventory.unit import InventoryUnit
from ..db.material_type import MaterialType
from ..schemas.catalog import (
    BrandCreate,
    BrandUpdate,
    ColorCreate,
    ColorUpdate,
    MaterialTypeCreate,
    MaterialTypeUpdate,
)

logger = logging.getLogger(__name__)

BRAND_NAMES = "brand"
TYPE_NAMES = "type"


async def _commit(db: AsyncSession) -> None:
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise


# ---------------------------------------------------------------------------
# Brands
# ---------------------------------------------------------------------------

async def get_brand(db: AsyncSession, *, owner_id: str, brand_id: UUID) -> Brand:
    res = await db.execute(select(Brand).where(Brand.id == brand_id, Brand.owner_id == owner_id))
    brand = res.scalar_one_or_none()
    if not brand:
        raise errors.NotFoundError("Brand", brand_id)
    return brand


async def list_brands(db: AsyncSession, *, owner_id: str) -> List[Brand]:
    res = await db.execute(
        select(Brand).where(Brand.owner_id == owner_id).order_by(func.lower(Brand.name).asc())
    )
    return list(res.scalars().all())


async def _brand_name_taken(db: AsyncSession, owner_id: str, name: str, exclude_id: UUID = None) -> bool:
    stmt = select(Brand.id).where(Brand.owner_id == owner_id, Brand.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Brand.id != exclude_id)
    res = await db.execute(stmt)
    return res.first() is not None


async def create_brand(db: AsyncSession, *, owner_id: str, payload: BrandCreate) -> Brand:
    name = require_name(payload.name)
    if await _brand_name_taken(db, owner_id, name):
        raise errors.DuplicateError("Brand name already exists")

    brand = Brand(
        owner_id=owner_id,
        name=name,
        description=payload.description or None,
        website=payload.website or None,
    )
    db.add(brand)
    await _commit(db)
    catalog_cache.invalidate(owner_id, BRAND_NAMES)
    return brand


async def update_brand(db: AsyncSession, *, owner_id: str, brand_id: UUID, payload: BrandUpdate) -> Brand:
    brand = await get_brand(db, owner_id=owner_id, brand_id=brand_id)
    data = payload.model_dump(exclude_unset=True)

    if "name" in data:
        name = require_name(data["name"])
        if name != brand.name and await _brand_name_taken(db, owner_id, name, exclude_id=brand.id):
            raise errors.DuplicateError("Brand name already exists")
        brand.name = name
    if "description" in data:
        brand.description = data["description"] or None
    if "website" in data:
        brand.website = data["website"] or None

    await _commit(db)
    catalog_cache.invalidate(owner_id, BRAND_NAMES)
    return brand


async def count_units_for_brand(db: AsyncSession, brand_id: UUID) -> int:
    res = await db.execute(select(func.count(InventoryUnit.id)).where(InventoryUnit.brand_id == brand_id))
    return int(res.scalar_one())


async def delete_brand(db: AsyncSession, *, owner_id: str, brand_id: UUID) -> None:
    brand = await get_brand(db, owner_id=owner_id, brand_id=brand_id)

    refs = await count_units_for_brand(db, brand.id)
    if refs > 0:
        logger.info("refusing to delete brand %s: %d units reference it", brand.id, refs)
        raise errors.ReferencedEntityError("brand", refs)

    try:
        await db.execute(delete(ColorEntry).where(ColorEntry.brand_id == brand_id))
        await db.delete(brand)
        await db.commit()
    except IntegrityError:
        # A unit was added after the count; the RESTRICT key refused the delete
        await db.rollback()
        refs = await count_units_for_brand(db, brand_id)
        if not refs:
            raise
        logger.info("brand %s gained %d units while being deleted", brand_id, refs)
        raise errors.ReferencedEntityError("brand", refs)
    except Exception:
        await db.rollback()
        raise
    catalog_cache.invalidate(owner_id, BRAND_NAMES)


# ---------------------------------------------------------------------------
# Material types
# ---------------------------------------------------------------------------

async def get_material_type(db: AsyncSession, *, owner_id: str, type_id: UUID) -> MaterialType:
    res = await db.execute(
        select(MaterialType).where(MaterialType.id == type_id, MaterialType.owner_id == owner_id)
    )
    mtype = res.scalar_one_or_none()
    if not mtype:
        raise errors.NotFoundError("Material type", type_id)
    return mtype


async def list_material_types(db: AsyncSession, *, owner_id: str) -> List[MaterialType]:
    res = await db.execute(
        select(MaterialType)
        .where(MaterialType.owner_id == owner_id)
        .order_by(func.lower(MaterialType.name).asc())
    )
    return list(res.scalars().all())


async def _type_name_taken(db: AsyncSession, owner_id: str, name: str, exclude_id: UUID = None) -> bool:
    stmt = select(MaterialType.id).where(MaterialType.owner_id == owner_id, MaterialType.name == name)
    if exclude_id is not None:
        stmt = stmt.where(MaterialType.id != exclude_id)
    res = await db.execute(stmt)
    return res.first() is not None


def _check_temp_range(low: Optional[int], high: Optional[int], field: str) -> None:
    if low is not None and high is not None and low > high:
        raise errors.ValidationError(f"{field} minimum cannot exceed maximum", field=field)


async def create_material_type(db: AsyncSession, *, owner_id: str, payload: MaterialTypeCreate) -> MaterialType:
    name = require_name(payload.name)
    _check_temp_range(payload.print_temp_min, payload.print_temp_max, "print_temp")
    _check_temp_range(payload.bed_temp_min, payload.bed_temp_max, "bed_temp")
    if await _type_name_taken(db, owner_id, name):
        raise errors.DuplicateError("Material type name already exists")

    mtype = MaterialType(
        owner_id=owner_id,
        name=name,
        description=payload.description or None,
        print_temp_min=payload.print_temp_min,
        print_temp_max=payload.print_temp_max,
        bed_temp_min=payload.bed_temp_min,
        bed_temp_max=payload.bed_temp_max,
    )
    db.add(mtype)
    await _commit(db)
    catalog_cache.invalidate(owner_id, TYPE_NAMES)
    return mtype


async def update_material_type(
    db: AsyncSession, *, owner_id: str, type_id: UUID, payload: MaterialTypeUpdate
) -> MaterialType:
    mtype = await get_material_type(db, owner_id=owner_id, type_id=type_id)
    data = payload.model_dump(exclude_unset=True)

    if "name" in data:
        name = require_name(data["name"])
        if name != mtype.name and await _type_name_taken(db, owner_id, name, exclude_id=mtype.id):
            raise errors.DuplicateError("Material type name already exists")
        data["name"] = name
    if "description" in data:
        data["description"] = data["description"] or None

    _check_temp_range(
        data.get("print_temp_min", mtype.print_temp_min),
        data.get("print_temp_max", mtype.print_temp_max),
        "print_temp",
    )
    _check_temp_range(
        data.get("bed_temp_min", mtype.bed_temp_min),
        data.get("bed_temp_max", mtype.bed_temp_max),
        "bed_temp",
    )

    for k, v in data.items():
        setattr(mtype, k, v)

    await _commit(db)
    catalog_cache.invalidate(owner_id, TYPE_NAMES)
    return mtype


async def count_units_for_type(db: AsyncSession, type_id: UUID) -> int:
    res = await db.execute(select(func.count(InventoryUnit.id)).where(InventoryUnit.type_id == type_id))
    return int(res.scalar_one())


async def delete_material_type(db: AsyncSession, *, owner_id: str, type_id: UUID) -> None:
    mtype = await get_material_type(db, owner_id=owner_id, type_id=type_id)

    refs = await count_units_for_type(db, mtype.id)
    if refs > 0:
        logger.info("refusing to delete material type %s: %d units reference it", mtype.id, refs)
        raise errors.ReferencedEntityError("material type", refs)

    try:
        await db.delete(mtype)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        refs = await count_units_for_type(db, type_id)
        if not refs:
            raise
        logger.info("material type %s gained %d units while being deleted", type_id, refs)
        raise errors.ReferencedEntityError("material type", refs)
    except Exception:
        await db.rollback()
        raise
    catalog_cache.invalidate(owner_id, TYPE_NAMES)


# ---------------------------------------------------------------------------
# Display names (cached)
# ---------------------------------------------------------------------------

async def brand_names(db: AsyncSession, *, owner_id: str) -> Dict[UUID, str]:
    names = catalog_cache.get(owner_id, BRAND_NAMES)
    if names is None:
        res = await db.execute(select(Brand.id, Brand.name).where(Brand.owner_id == owner_id))
        names = {row.id: row.name for row in res.all()}
        catalog_cache.set(owner_id, BRAND_NAMES, names)
    return names


async def type_names(db: AsyncSession, *, owner_id: str) -> Dict[UUID, str]:
    names = catalog_cache.get(owner_id, TYPE_NAMES)
    if names is None:
        res = await db.execute(
            select(MaterialType.id, MaterialType.name).where(MaterialType.owner_id == owner_id)
        )
        names = {row.id: row.name for row in res.all()}
        catalog_cache.set(owner_id, TYPE_NAMES, names)
    return names


# ---------------------------------------------------------------------------
# Brand colors
# ---------------------------------------------------------------------------

async def _find_color(db: AsyncSession, brand_id: UUID, color_name: str) -> Optional[ColorEntry]:
    res = await db.execute(
        select(ColorEntry).where(ColorEntry.brand_id == brand_id, ColorEntry.color_name == color_name)
    )
    return res.scalar_one_or_none()


async def ensure_color(
    db: AsyncSession,
    *,
    owner_id: str,
    brand_id: UUID,
    color_name: str,
    color_code: Optional[str] = None,
) -> Tuple[ColorEntry, bool]:
    """Register (brand, color) if it is missing; a no-op when it already exists.

    Does not commit: the entry joins the caller's unit write. Returns the
    entry and whether it was created.
    """
    name = require_name(color_name, "color_name")
    existing = await _find_color(db, brand_id, name)
    if existing is not None:
        return existing, False

    entry = ColorEntry(
        owner_id=owner_id,
        brand_id=brand_id,
        color_name=name,
        color_code=check_color_code(color_code) or settings.default_color_code,
    )
    try:
        async with db.begin_nested():
            db.add(entry)
    except IntegrityError:
        # Registered by a concurrent writer after the lookup above
        existing = await _find_color(db, brand_id, name)
        if existing is None:
            raise
        logger.debug("color %r for brand %s registered concurrently", name, brand_id)
        return existing, False

    logger.debug("auto-registered color %r for brand %s", name, brand_id)
    return entry, True


async def list_colors(db: AsyncSession, *, owner_id: str, brand_id: UUID) -> List[ColorEntry]:
    await get_brand(db, owner_id=owner_id, brand_id=brand_id)
    res = await db.execute(
        select(ColorEntry)
        .where(ColorEntry.brand_id == brand_id, ColorEntry.owner_id == owner_id)
        .order_by(ColorEntry.color_name.asc())
    )
    return list(res.scalars().all())


async def find_color(db: AsyncSession, *, owner_id: str, brand_id: UUID, color_name: str) -> Optional[ColorEntry]:
    await get_brand(db, owner_id=owner_id, brand_id=brand_id)
    return await _find_color(db, brand_id, (color_name or "").strip())


async def get_color(db: AsyncSession, *, owner_id: str, brand_id: UUID, color_id: UUID) -> ColorEntry:
    res = await db.execute(
        select(ColorEntry).where(
            ColorEntry.id == color_id,
            ColorEntry.brand_id == brand_id,
            ColorEntry.owner_id == owner_id,
        )
    )
    entry = res.scalar_one_or_none()
    if not entry:
        raise errors.NotFoundError("Color", color_id)
    return entry


async def create_color(db: AsyncSession, *, owner_id: str, brand_id: UUID, payload: ColorCreate) -> ColorEntry:
    name = require_name(payload.color_name, "color_name")
    code = check_color_code(payload.color_code) or settings.default_color_code
    await get_brand(db, owner_id=owner_id, brand_id=brand_id)

    if await _find_color(db, brand_id, name) is not None:
        raise errors.DuplicateError("Color name already exists")

    entry = ColorEntry(owner_id=owner_id, brand_id=brand_id, color_name=name, color_code=code)
    try:
        async with db.begin_nested():
            db.add(entry)
    except IntegrityError:
        raise errors.DuplicateError("Color name already exists")
    await _commit(db)
    return entry


async def update_color(
    db: AsyncSession, *, owner_id: str, brand_id: UUID, color_id: UUID, payload: ColorUpdate
) -> ColorEntry:
    entry = await get_color(db, owner_id=owner_id, brand_id=brand_id, color_id=color_id)
    data = payload.model_dump(exclude_unset=True)

    if "color_name" in data:
        name = require_name(data["color_name"], "color_name")
        if name != entry.color_name and await _find_color(db, brand_id, name) is not None:
            raise errors.DuplicateError("Color name already exists")
        entry.color_name = name
    if "color_code" in data:
        entry.color_code = check_color_code(data["color_code"]) or settings.default_color_code

    await _commit(db)
    return entry


async def delete_color(db: AsyncSession, *, owner_id: str, brand_id: UUID, color_id: UUID) -> None:
    entry = await get_color(db, owner_id=owner_id, brand_id=brand_id, color_id=color_id)
    await db.delete(entry)
    await _commit(db)
