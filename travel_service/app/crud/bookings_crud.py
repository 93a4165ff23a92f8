from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, func
from sqlalchemy.orm import Session, joinedload

from shared.helpers.json_response_helper import calculate_skip
from ..models.bookings import Booking
from ..schemas.bookings_schemas import BookingRequest


def build_booking_filters(params: BookingRequest, owner_id: Optional[UUID] = None) -> list:
    """owner_id, when given, overrides any user_id in the query."""
    filters = []

    if params.contact_id:
        filters.append(Booking.contact_id == params.contact_id)
    if params.package_id:
        filters.append(Booking.package_id == params.package_id)
    if params.status:
        filters.append(Booking.status == params.status.value)

    user_id = owner_id or params.user_id
    if user_id:
        filters.append(Booking.user_id == user_id)

    return filters


class BookingsRepository:

    def add(self, db: Session, data: dict) -> Booking:
        booking = Booking(**data)
        db.add(booking)
        return booking

    def find_all(
        self,
        db: Session,
        filters: list,
        page: int,
        limit: int
    ) -> Tuple[List[Booking], int]:
        query = db.query(Booking).filter(*filters)

        total = query.with_entities(func.count(Booking.id)).scalar()
        bookings = (
            query
            .options(joinedload(Booking.contact))
            .order_by(desc(Booking.created_at))
            .offset(calculate_skip(page, limit))
            .limit(limit)
            .all()
        )
        return bookings, total

    def find_by_id(self, db: Session, booking_id: UUID) -> Optional[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.contact))
            .filter(Booking.id == booking_id)
            .first()
        )

    def update_by_id(self, db: Session, booking_id: UUID, data: dict) -> Optional[Booking]:
        booking = self.find_by_id(db, booking_id)
        if not booking:
            return None

        for key, value in data.items():
            setattr(booking, key, value)

        db.commit()
        db.refresh(booking)
        return booking

    def delete_by_id(self, db: Session, booking_id: UUID) -> bool:
        booking = db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            return False

        db.delete(booking)
        db.commit()
        return True
