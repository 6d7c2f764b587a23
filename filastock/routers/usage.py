from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from ..core.auth import current_owner_id
from ..db.database import get_async_session
from ..schemas.inventory import UsageRead
from ..services import usage as usage_ledger

router = APIRouter()


@router.get("/", response_model=List[UsageRead])
async def list_usage(
    unit_id: Optional[UUID] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    owner_id: str = Depends(current_owner_id),
    db: AsyncSession = Depends(get_async_session),
):
    return await usage_ledger.list_usage(db, owner_id=owner_id, unit_id=unit_id, start=start, end=end)
