from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from ..core.auth import current_owner_id
from ..core.filters import UnitFilter
from ..core.lifecycle import UnitStatus
from ..db.database import get_async_session
from ..schemas.inventory import (
    BulkCreateRead,
    TransitionRequest,
    UnitBulkCreate,
    UnitCreate,
    UnitRead,
    UnitUpdate,
    UsageCreate,
    UsageRead,
    UsageResultRead,
)
from ..services import units as unit_store
from ..services import usage as usage_ledger

router = APIRouter()


def unit_filter_params(
    brand_id: Optional[UUID] = None,
    type_id: Optional[UUID] = None,
    color: Optional[str] = None,
    color_code: Optional[str] = None,
    status: Optional[UnitStatus] = None,
    is_opened: Optional[bool] = None,
    include_depleted: bool = False,
) -> UnitFilter:
    return UnitFilter(
        brand_id=brand_id,
        type_id=type_id,
        color=color,
        color_code=color_code,
        status=status,
        is_opened=is_opened,
        include_depleted=include_depleted,
    )


@router.get("/", response_model=List[UnitRead])
async def list_units(
    filters: UnitFilter = Depends(unit_filter_params),
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    """
    List the caller's units.

    - all filters combine with AND; color and color_code are case-insensitive substring matches.
    - depleted units are hidden unless include_depleted=true or status=depleted.
    """
    return await unit_store.list_units(db, owner_id=owner_id, filters=filters)


@router.post("/", response_model=UnitRead, status_code=status.HTTP_201_CREATED)
async def create_unit(
    payload: UnitCreate,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await unit_store.create_unit(db, owner_id=owner_id, payload=payload)


@router.post("/bulk", response_model=BulkCreateRead, status_code=status.HTTP_201_CREATED)
async def create_units_bulk(
    payload: UnitBulkCreate,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    created = await unit_store.create_units_bulk(db, owner_id=owner_id, payload=payload)
    return BulkCreateRead(units=[UnitRead.model_validate(u) for u in created], count=len(created))


@router.get("/{unit_id}", response_model=UnitRead)
async def get_unit(
    unit_id: UUID,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await unit_store.get_unit(db, owner_id=owner_id, unit_id=unit_id)


@router.patch("/{unit_id}", response_model=UnitRead)
async def update_unit(
    unit_id: UUID,
    payload: UnitUpdate,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await unit_store.update_unit(db, owner_id=owner_id, unit_id=unit_id, payload=payload)


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_unit(
    unit_id: UUID,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    await unit_store.delete_unit(db, owner_id=owner_id, unit_id=unit_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{unit_id}/open", response_model=UnitRead)
async def open_unit(
    unit_id: UUID,
    payload: Optional[TransitionRequest] = Body(None),
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    at = payload.at if payload else None
    return await unit_store.open_unit(db, owner_id=owner_id, unit_id=unit_id, at=at)


@router.post("/{unit_id}/deplete", response_model=UnitRead)
async def deplete_unit(
    unit_id: UUID,
    payload: Optional[TransitionRequest] = Body(None),
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    at = payload.at if payload else None
    return await unit_store.deplete_unit(db, owner_id=owner_id, unit_id=unit_id, at=at)


@router.post("/{unit_id}/restore", response_model=UnitRead)
async def restore_unit(
    unit_id: UUID,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await unit_store.restore_unit(db, owner_id=owner_id, unit_id=unit_id)


@router.get("/{unit_id}/usage", response_model=List[UsageRead])
async def list_unit_usage(
    unit_id: UUID,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await usage_ledger.list_usage(db, owner_id=owner_id, unit_id=unit_id)


@router.post("/{unit_id}/usage", response_model=UsageResultRead, status_code=status.HTTP_201_CREATED)
async def record_unit_usage(
    unit_id: UUID,
    payload: UsageCreate,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    event, remaining, warning = await usage_ledger.record_usage(
        db, owner_id=owner_id, unit_id=unit_id, payload=payload
    )
    return UsageResultRead(record=UsageRead.model_validate(event), remaining_weight=remaining, warning=warning)
