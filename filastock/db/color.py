import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..core.config import settings
from ..core.lifecycle import utcnow
from .database import Base


class ColorEntry(Base):
    """Brand-scoped color swatch; unique per (brand, trimmed color name)."""

    __tablename__ = "brand_colors"
    __table_args__ = (
        UniqueConstraint("brand_id", "color_name", name="uq_brand_colors_brand_name"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(String(64), nullable=False, index=True)
    brand_id = Column(Uuid(as_uuid=True), ForeignKey("brands.id", ondelete="CASCADE"), nullable=False, index=True)

    color_name = Column(String, nullable=False)
    color_code = Column(String(7), nullable=False, default=settings.default_color_code)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    brand = relationship("Brand", back_populates="colors")
