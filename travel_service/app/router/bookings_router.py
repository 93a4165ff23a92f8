from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin, validate_current_token
from shared.core.database import get_travel_db as get_db
from shared.core.schemas import JsonOutResult, MessageOut, PaginatedOutResult, UserToken
from shared.helpers.json_response_helper import paginated_response, success_response
from ..dependencies import get_bookings_service
from ..schemas.bookings_schemas import (
    BookingCreate, BookingListItemOut, BookingOut, BookingRequest, BookingUpdate, as_query)
from ..services.bookings_services import BookingsService

router = APIRouter(
    prefix="/bookings",
    tags=["Bookings"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=PaginatedOutResult[BookingListItemOut])
def get_bookings(
        params: BookingRequest = Depends(as_query),
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(validate_current_token),
        service: BookingsService = Depends(get_bookings_service)):
    items, meta = service.find_all(db, params, current_user)
    return paginated_response(items, meta)


@router.get("/{booking_id}", response_model=JsonOutResult[BookingOut])
def get_booking(
        booking_id: UUID,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(validate_current_token),
        service: BookingsService = Depends(get_bookings_service)):
    result = service.find_by_id(db, booking_id, current_user)
    return success_response(result, "Booking fetched successfully")


@router.post("", response_model=JsonOutResult[BookingOut], status_code=status.HTTP_201_CREATED)
def create_booking(
        dto: BookingCreate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(validate_current_token),
        service: BookingsService = Depends(get_bookings_service)):
    result = service.create(db, dto, current_user)
    return success_response(result, "Booking created successfully")


@router.patch("/{booking_id}", response_model=JsonOutResult[BookingOut])
def update_booking(
        booking_id: UUID,
        dto: BookingUpdate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(validate_current_token),
        service: BookingsService = Depends(get_bookings_service)):
    result = service.update(db, booking_id, dto, current_user)
    return success_response(result, "Booking updated successfully")


@router.delete("/{booking_id}", response_model=JsonOutResult[MessageOut])
def delete_booking(
        booking_id: UUID,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin),
        service: BookingsService = Depends(get_bookings_service)):
    result = service.delete(db, booking_id, current_user)
    return success_response(result, result["message"])
