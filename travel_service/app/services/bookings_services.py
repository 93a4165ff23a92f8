from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.auth import ensure_owner_or_admin
from shared.core.exceptions import (
    AppException, BadRequestError, InternalServerError, NotFoundError)
from shared.core.logger import AppLogger
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import calculate_meta
from ..crud.bookings_crud import BookingsRepository, build_booking_filters
from ..enum.booking_enum import BookingStatus
from ..schemas.bookings_schemas import (
    BookingCreate, BookingListItemOut, BookingOut, BookingRequest, BookingUpdate)
from .booking_contacts_services import BookingContactsService
from .packages_services import PackagesService


class BookingsService:
    def __init__(
        self,
        bookings_repository: BookingsRepository,
        booking_contacts_service: BookingContactsService,
        packages_service: PackagesService,
        logger: AppLogger
    ):
        self.bookings_repository = bookings_repository
        self.booking_contacts_service = booking_contacts_service
        self.packages_service = packages_service
        self.logger = logger

    def _ensure_package(self, db: Session, package_id: UUID):
        if not self.packages_service.exists(db, package_id):
            self.logger.warn("Package not found", {"packageId": package_id})
            raise NotFoundError("Package not found")

    def create(self, db: Session, dto: BookingCreate, current_user: UserToken) -> BookingOut:
        try:
            self.logger.info("Creating booking", {
                "packageId": dto.package_id, "actorId": current_user.id})

            self._ensure_package(db, dto.package_id)

            # contact and booking are committed together
            contact = self.booking_contacts_service.create(
                db, dto.contact, user_id=current_user.id)

            booking = self.bookings_repository.add(db, {
                "user_id": current_user.id,
                "contact_id": contact.id,
                "package_id": dto.package_id,
                "number_of_people": dto.number_of_people,
                "total_price": dto.total_price,
                "status": (dto.status or BookingStatus.pending).value,
            })
            db.commit()
            db.refresh(booking)

            self.logger.info("Booking created successfully", {"bookingId": booking.id})
            return BookingOut.model_validate(booking)
        except AppException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            self.logger.error("Failed to create booking", {
                "error": str(e), "packageId": dto.package_id})
            raise BadRequestError("Failed to create booking") from e

    def find_all(self, db: Session, params: BookingRequest, current_user: UserToken):
        try:
            self.logger.info("Fetching bookings", {
                "actorId": current_user.id, "page": params.page, "limit": params.limit})

            # non-admins only ever see their own bookings
            owner_id = None if current_user.is_admin else current_user.id
            filters = build_booking_filters(params, owner_id)

            bookings, total = self.bookings_repository.find_all(
                db, filters, params.page, params.limit)

            items = [BookingListItemOut.model_validate(b) for b in bookings]
            return items, calculate_meta(total, params.page, params.limit)
        except Exception as e:
            self.logger.error("Failed to fetch bookings", {"error": str(e)})
            raise InternalServerError("Failed to fetch bookings") from e

    def find_by_id(self, db: Session, booking_id: UUID, current_user: UserToken) -> BookingOut:
        try:
            booking = self.bookings_repository.find_by_id(db, booking_id)
            if not booking:
                self.logger.warn("Booking not found", {"bookingId": booking_id})
                raise NotFoundError("Booking not found")

            ensure_owner_or_admin(
                current_user, booking.user_id, "You are not allowed to view this booking")

            return BookingOut.model_validate(booking)
        except AppException:
            raise
        except Exception as e:
            self.logger.error("Failed to fetch booking", {"error": str(e), "bookingId": booking_id})
            raise InternalServerError("Failed to fetch booking") from e

    def update(
        self,
        db: Session,
        booking_id: UUID,
        dto: BookingUpdate,
        current_user: UserToken
    ) -> BookingOut:
        try:
            self.logger.info("Updating booking", {"bookingId": booking_id, "actorId": current_user.id})

            booking = self.bookings_repository.find_by_id(db, booking_id)
            if not booking:
                self.logger.warn("Booking not found for update", {"bookingId": booking_id})
                raise NotFoundError("Booking not found")

            ensure_owner_or_admin(
                current_user, booking.user_id, "You are not allowed to update this booking")

            update_data = dto.model_dump(exclude_unset=True, exclude_none=True)

            if "package_id" in update_data:
                self._ensure_package(db, update_data["package_id"])
            if "status" in update_data:
                update_data["status"] = BookingStatus(update_data["status"]).value

            updated = self.bookings_repository.update_by_id(db, booking_id, update_data)
            if not updated:
                raise NotFoundError("Booking not found")

            self.logger.info("Booking updated successfully", {"bookingId": booking_id})
            return BookingOut.model_validate(updated)
        except AppException:
            raise
        except Exception as e:
            db.rollback()
            self.logger.error("Failed to update booking", {"error": str(e), "bookingId": booking_id})
            raise BadRequestError("Failed to update booking") from e

    def delete(self, db: Session, booking_id: UUID, current_user: UserToken) -> dict:
        try:
            self.logger.info("Admin deleting booking", {"bookingId": booking_id, "actorId": current_user.id})

            if not self.bookings_repository.delete_by_id(db, booking_id):
                self.logger.warn("Booking not found for deletion", {"bookingId": booking_id})
                raise NotFoundError("Booking not found")

            self.logger.info("Booking deleted successfully", {"bookingId": booking_id})
            return {"message": "Booking deleted successfully"}
        except AppException:
            raise
        except Exception as e:
            db.rollback()
            self.logger.error("Failed to delete booking", {"error": str(e), "bookingId": booking_id})
            raise InternalServerError("Failed to delete booking") from e
