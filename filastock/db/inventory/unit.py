import uuid

from sqlalchemy import Column, Date, DateTime, Enum as SAEnum, Float, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship

from ...core.lifecycle import UnitStatus, age_in_days, is_opened, utcnow
from ..database import Base


class InventoryUnit(Base):
    __tablename__ = "inventory_units"
    __table_args__ = (
        Index("ix_inventory_units_owner_status", "owner_id", "status"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(String(64), nullable=False, index=True)

    # ON DELETE RESTRICT: catalog parents are only removed once unreferenced
    brand_id = Column(Uuid(as_uuid=True), ForeignKey("brands.id", ondelete="RESTRICT"), nullable=False, index=True)
    type_id = Column(Uuid(as_uuid=True), ForeignKey("material_types.id", ondelete="RESTRICT"), nullable=False, index=True)

    color_name = Column(String, nullable=False)
    color_code = Column(String(7), nullable=True)

    total_weight = Column(Float, nullable=False)
    remaining_weight = Column(Float, nullable=False)
    unit_price = Column(Float, nullable=False, default=0.0)
    acquired_on = Column(Date, nullable=False)

    status = Column(
        SAEnum(UnitStatus, name="inventory_unit_status_enum", native_enum=False),
        nullable=False,
        default=UnitStatus.UNOPENED,
    )
    opened_at = Column(DateTime, nullable=True)
    depleted_at = Column(DateTime, nullable=True)

    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    brand = relationship("Brand")
    material_type = relationship("MaterialType")
    usage_events = relationship(
        "UsageEvent",
        back_populates="unit",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_opened(self) -> bool:
        return is_opened(self)

    @property
    def opened_days(self):
        return age_in_days(self)
