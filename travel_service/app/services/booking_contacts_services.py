from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ..crud.booking_contacts_crud import BookingContactsRepository
from ..models.booking_contacts import BookingContact
from ..schemas.bookings_schemas import ContactInfo


class BookingContactsService:
    """Contacts are written only as part of a booking, never on their own."""

    def __init__(self, booking_contacts_repository: BookingContactsRepository):
        self.booking_contacts_repository = booking_contacts_repository

    def create(self, db: Session, contact: ContactInfo, user_id: Optional[UUID] = None) -> BookingContact:
        data = {
            "name": contact.name,
            "email": str(contact.email),
            "phone": contact.phone,
            "user_id": user_id,
        }
        return self.booking_contacts_repository.add(db, data)
