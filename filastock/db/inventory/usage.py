import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from ...core.lifecycle import utcnow
from ..database import Base


class UsageEvent(Base):
    __tablename__ = "usage_events"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(String(64), nullable=False, index=True)
    unit_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("inventory_units.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    amount = Column(Float, nullable=False)
    used_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    project_name = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    unit = relationship("InventoryUnit", back_populates="usage_events")
