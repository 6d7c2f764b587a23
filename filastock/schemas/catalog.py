from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator


def _strip(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    return v.strip()


class BrandCreate(BaseModel):
    name: str
    description: Optional[str] = None
    website: Optional[str] = None

    @field_validator("name", "description", "website")
    @classmethod
    def _strip_strings(cls, v: Optional[str]) -> Optional[str]:
        return _strip(v)


class BrandUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None

    @field_validator("name", "description", "website")
    @classmethod
    def _strip_strings(cls, v: Optional[str]) -> Optional[str]:
        return _strip(v)


class BrandRead(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    website: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class MaterialTypeCreate(BaseModel):
    name: str
    description: Optional[str] = None
    print_temp_min: Optional[int] = None
    print_temp_max: Optional[int] = None
    bed_temp_min: Optional[int] = None
    bed_temp_max: Optional[int] = None

    @field_validator("name", "description")
    @classmethod
    def _strip_strings(cls, v: Optional[str]) -> Optional[str]:
        return _strip(v)


class MaterialTypeUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    print_temp_min: Optional[int] = None
    print_temp_max: Optional[int] = None
    bed_temp_min: Optional[int] = None
    bed_temp_max: Optional[int] = None

    @field_validator("name", "description")
    @classmethod
    def _strip_strings(cls, v: Optional[str]) -> Optional[str]:
        return _strip(v)


class MaterialTypeRead(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    print_temp_min: Optional[int] = None
    print_temp_max: Optional[int] = None
    bed_temp_min: Optional[int] = None
    bed_temp_max: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ColorCreate(BaseModel):
    color_name: str
    color_code: Optional[str] = None

    @field_validator("color_name", "color_code")
    @classmethod
    def _strip_strings(cls, v: Optional[str]) -> Optional[str]:
        return _strip(v)


class ColorUpdate(BaseModel):
    color_name: Optional[str] = None
    color_code: Optional[str] = None

    @field_validator("color_name", "color_code")
    @classmethod
    def _strip_strings(cls, v: Optional[str]) -> Optional[str]:
        return _strip(v)


class ColorRead(BaseModel):
    id: UUID
    brand_id: UUID
    color_name: str
    color_code: str
    created_at: datetime

    class Config:
        from_attributes = True
