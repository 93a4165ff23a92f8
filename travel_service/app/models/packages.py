import uuid
from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from shared.core.database import Base
from .common import ImageMixin, utcnow


class Package(ImageMixin, Base):
    __tablename__ = "packages"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    destination_id = Column(Uuid(as_uuid=True), ForeignKey(
        "destinations.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    duration = Column(Integer, nullable=False)  # days
    included = Column(JSON, nullable=False, default=list)
    image_url = Column(Text, nullable=False)
    image_public_id = Column(String(255), nullable=False)
    group_size = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    destination = relationship("Destination", back_populates="packages")
