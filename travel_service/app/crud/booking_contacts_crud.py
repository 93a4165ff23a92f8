
from sqlalchemy.orm import Session

from ..models.booking_contacts import BookingContact


class BookingContactsRepository:

    def add(self, db: Session, data: dict) -> BookingContact:
        """Stage a contact in the current transaction; the caller commits."""
        contact = BookingContact(**data)
        db.add(contact)
        db.flush()
        return contact
