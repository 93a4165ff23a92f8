import uuid
from sqlalchemy import Column, DateTime, String, Text, Uuid
from sqlalchemy.orm import relationship
from shared.core.database import Base
from .common import ImageMixin, utcnow


class Destination(ImageMixin, Base):
    __tablename__ = "destinations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    image_url = Column(Text, nullable=False)
    image_public_id = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    packages = relationship("Package", back_populates="destination")
