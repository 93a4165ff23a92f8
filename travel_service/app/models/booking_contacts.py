import uuid
from sqlalchemy import Column, DateTime, String, Uuid
from shared.core.database import Base
from .common import utcnow


class BookingContact(Base):
    __tablename__ = "booking_contacts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # users live in the auth database, no FK
    user_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False)
    phone = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
