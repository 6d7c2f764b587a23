import uuid
from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..core.lifecycle import utcnow
from .database import Base


class Brand(Base):
    __tablename__ = "brands"
    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_brands_owner_name"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(String(64), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    website = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    colors = relationship("ColorEntry", back_populates="brand", cascade="all, delete-orphan", passive_deletes=True)
