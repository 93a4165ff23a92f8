import uuid
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship
from shared.core.database import Base
from ..enum.booking_enum import BookingStatus
from .common import utcnow


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    contact_id = Column(Uuid(as_uuid=True), ForeignKey(
        "booking_contacts.id"), nullable=False, index=True)
    package_id = Column(Uuid(as_uuid=True), ForeignKey(
        "packages.id"), nullable=False, index=True)
    number_of_people = Column(Integer, nullable=False)
    total_price = Column(Float, nullable=False)
    status = Column(String(16), nullable=False,
                    default=BookingStatus.pending.value, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    contact = relationship("BookingContact")
