from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from ..core.auth import current_owner_id
from ..core.filters import UnitFilter
from ..db.database import get_async_session
from ..schemas.dashboard import InventoryOverviewRead, InventoryStatsRead, PriceStatsRead
from ..services import dashboard
from .units import unit_filter_params

router = APIRouter()


@router.get("/inventory", response_model=InventoryOverviewRead)
async def inventory_overview(
    filters: UnitFilter = Depends(unit_filter_params),
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    overview = await dashboard.get_inventory_overview(db, owner_id=owner_id, filters=filters)
    return InventoryOverviewRead.model_validate(overview)


@router.get("/stats", response_model=InventoryStatsRead)
async def inventory_stats(
    threshold: Optional[float] = Query(None, description="Low stock ratio, 0..1 (default 0.2)"),
    filters: UnitFilter = Depends(unit_filter_params),
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    stats = await dashboard.get_stats(db, owner_id=owner_id, threshold=threshold, filters=filters)
    return InventoryStatsRead.model_validate(stats)


@router.get("/prices", response_model=PriceStatsRead)
async def price_stats(
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    stats = await dashboard.get_price_stats(db, owner_id=owner_id)
    return PriceStatsRead.model_validate(stats)
