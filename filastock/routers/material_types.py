from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from ..core.auth import current_owner_id
from ..db.database import get_async_session
from ..schemas.catalog import MaterialTypeCreate, MaterialTypeRead, MaterialTypeUpdate
from ..services import catalog

router = APIRouter()


@router.get("/", response_model=List[MaterialTypeRead])
async def list_material_types(
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await catalog.list_material_types(db, owner_id=owner_id)


@router.post("/", response_model=MaterialTypeRead, status_code=status.HTTP_201_CREATED)
async def create_material_type(
    payload: MaterialTypeCreate,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await catalog.create_material_type(db, owner_id=owner_id, payload=payload)


@router.get("/{type_id}", response_model=MaterialTypeRead)
async def get_material_type(
    type_id: UUID,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await catalog.get_material_type(db, owner_id=owner_id, type_id=type_id)


@router.patch("/{type_id}", response_model=MaterialTypeRead)
async def update_material_type(
    type_id: UUID,
    payload: MaterialTypeUpdate,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await catalog.update_material_type(db, owner_id=owner_id, type_id=type_id, payload=payload)


@router.delete("/{type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_material_type(
    type_id: UUID,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    await catalog.delete_material_type(db, owner_id=owner_id, type_id=type_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
