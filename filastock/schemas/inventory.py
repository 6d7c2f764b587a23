from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from ..core.lifecycle import UnitStatus


class UnitCreate(BaseModel):
    brand_id: UUID
    type_id: UUID
    color_name: str
    color_code: Optional[str] = None
    total_weight: float
    unit_price: float = 0.0
    acquired_on: date
    notes: Optional[str] = None

    @field_validator("color_name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("color_code", "notes")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class UnitBulkCreate(UnitCreate):
    quantity: int
    opened: bool = False
    opened_at: Optional[datetime] = None


class UnitUpdate(BaseModel):
    """Only fields that are explicitly set are applied; an explicit null
    clears ``color_code``/``notes``."""

    brand_id: Optional[UUID] = None
    type_id: Optional[UUID] = None
    color_name: Optional[str] = None
    color_code: Optional[str] = None
    total_weight: Optional[float] = None
    remaining_weight: Optional[float] = None
    unit_price: Optional[float] = None
    acquired_on: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("color_name")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip()

    @field_validator("color_code", "notes")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class TransitionRequest(BaseModel):
    at: Optional[datetime] = None


class CatalogRef(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class UnitRead(BaseModel):
    id: UUID
    brand_id: UUID
    type_id: UUID
    color_name: str
    color_code: Optional[str] = None
    total_weight: float
    remaining_weight: float
    unit_price: float
    acquired_on: date
    status: UnitStatus
    is_opened: bool
    opened_at: Optional[datetime] = None
    depleted_at: Optional[datetime] = None
    opened_days: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    brand: Optional[CatalogRef] = None
    material_type: Optional[CatalogRef] = None

    class Config:
        from_attributes = True


class BulkCreateRead(BaseModel):
    units: List[UnitRead]
    count: int


class UsageCreate(BaseModel):
    amount: float
    used_at: Optional[datetime] = None
    project_name: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("project_name", "notes")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class UsageRead(BaseModel):
    id: UUID
    unit_id: UUID
    amount: float
    used_at: datetime
    project_name: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UsageResultRead(BaseModel):
    record: UsageRead
    remaining_weight: float
    warning: Optional[str] = None
