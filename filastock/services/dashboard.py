from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.aggregation import (
    InventoryOverview,
    InventoryStats,
    PriceStats,
    build_overview,
    compute_price_stats,
    compute_stats,
    validate_threshold,
)
from ..core.filters import UnitFilter
from . import catalog
from . import units as unit_store


async def get_inventory_overview(
    db: AsyncSession,
    *,
    owner_id: str,
    filters: Optional[UnitFilter] = None,
) -> InventoryOverview:
    """Brand / type / color summaries over the owner's (filtered) units."""
    rows = await unit_store.list_units(db, owner_id=owner_id, filters=filters)
    return build_overview(
        rows,
        brand_names=await catalog.brand_names(db, owner_id=owner_id),
        type_names=await catalog.type_names(db, owner_id=owner_id),
    )


async def get_stats(
    db: AsyncSession,
    *,
    owner_id: str,
    threshold: Optional[float] = None,
    filters: Optional[UnitFilter] = None,
) -> InventoryStats:
    threshold = validate_threshold(threshold)
    rows = await unit_store.list_units(db, owner_id=owner_id, filters=filters)
    return compute_stats(
        rows,
        threshold=threshold,
        brand_names=await catalog.brand_names(db, owner_id=owner_id),
        type_names=await catalog.type_names(db, owner_id=owner_id),
    )


async def get_price_stats(
    db: AsyncSession,
    *,
    owner_id: str,
    filters: Optional[UnitFilter] = None,
) -> PriceStats:
    # Spend history covers everything bought, depleted spools included
    filters = filters or UnitFilter(include_depleted=True)
    rows = await unit_store.list_units(db, owner_id=owner_id, filters=filters)
    return compute_price_stats(
        rows,
        brand_names=await catalog.brand_names(db, owner_id=owner_id),
        type_names=await catalog.type_names(db, owner_id=owner_id),
    )
