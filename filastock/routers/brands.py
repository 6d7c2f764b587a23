from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from ..core.auth import current_owner_id
from ..db.database import get_async_session
from ..schemas.catalog import BrandCreate, BrandRead, BrandUpdate, ColorCreate, ColorRead, ColorUpdate
from ..services import catalog

router = APIRouter()


@router.get("/", response_model=List[BrandRead])
async def list_brands(
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await catalog.list_brands(db, owner_id=owner_id)


@router.post("/", response_model=BrandRead, status_code=status.HTTP_201_CREATED)
async def create_brand(
    payload: BrandCreate,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await catalog.create_brand(db, owner_id=owner_id, payload=payload)


@router.get("/{brand_id}", response_model=BrandRead)
async def get_brand(
    brand_id: UUID,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await catalog.get_brand(db, owner_id=owner_id, brand_id=brand_id)


@router.patch("/{brand_id}", response_model=BrandRead)
async def update_brand(
    brand_id: UUID,
    payload: BrandUpdate,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await catalog.update_brand(db, owner_id=owner_id, brand_id=brand_id, payload=payload)


@router.delete("/{brand_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_brand(
    brand_id: UUID,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    await catalog.delete_brand(db, owner_id=owner_id, brand_id=brand_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{brand_id}/colors", response_model=List[ColorRead])
async def list_brand_colors(
    brand_id: UUID,
    name: Optional[str] = None,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    if name is not None:
        entry = await catalog.find_color(db, owner_id=owner_id, brand_id=brand_id, color_name=name)
        return [entry] if entry else []
    return await catalog.list_colors(db, owner_id=owner_id, brand_id=brand_id)


@router.post("/{brand_id}/colors", response_model=ColorRead, status_code=status.HTTP_201_CREATED)
async def create_brand_color(
    brand_id: UUID,
    payload: ColorCreate,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await catalog.create_color(db, owner_id=owner_id, brand_id=brand_id, payload=payload)


@router.patch("/{brand_id}/colors/{color_id}", response_model=ColorRead)
async def update_brand_color(
    brand_id: UUID,
    color_id: UUID,
    payload: ColorUpdate,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await catalog.update_color(db, owner_id=owner_id, brand_id=brand_id, color_id=color_id, payload=payload)


@router.delete("/{brand_id}/colors/{color_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_brand_color(
    brand_id: UUID,
    color_id: UUID,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    await catalog.delete_color(db, owner_id=owner_id, brand_id=brand_id, color_id=color_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
