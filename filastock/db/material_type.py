import uuid
from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint, Uuid

from ..core.lifecycle import utcnow
from .database import Base


class MaterialType(Base):
    """Material family a spool is made of (PLA, PETG, ...)."""

    __tablename__ = "material_types"
    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_material_types_owner_name"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(String(64), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)

    print_temp_min = Column(Integer, nullable=True)
    print_temp_max = Column(Integer, nullable=True)
    bed_temp_min = Column(Integer, nullable=True)
    bed_temp_max = Column(Integer, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
