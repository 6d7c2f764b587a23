from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel


class GroupSummaryRead(BaseModel):
    key: str
    name: str
    unit_count: int
    total_weight: float
    total_remaining_weight: float
    color_code: Optional[str] = None

    class Config:
        from_attributes = True


class InventoryOverviewRead(BaseModel):
    by_brand: List[GroupSummaryRead]
    by_type: List[GroupSummaryRead]
    by_color: List[GroupSummaryRead]

    class Config:
        from_attributes = True


class LowStockRead(BaseModel):
    id: UUID
    color_name: str
    brand_name: str
    type_name: str
    remaining_weight: float
    total_weight: float
    percent_remaining: int

    class Config:
        from_attributes = True


class InventoryStatsRead(BaseModel):
    total_units: int
    total_weight: float
    total_remaining_weight: float
    total_spend: float
    opened_count: int
    unopened_count: int
    low_stock: List[LowStockRead]

    class Config:
        from_attributes = True


class PriceTrendRead(BaseModel):
    date: date
    price: float
    brand_name: str
    type_name: str
    color_name: str

    class Config:
        from_attributes = True


class PriceStatsRead(BaseModel):
    trend: List[PriceTrendRead]
    average_price: float
    min_price: float
    max_price: float
    total_count: int

    class Config:
        from_attributes = True
