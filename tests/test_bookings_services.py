import uuid

import pytest

from conftest import caller_for, make_upload
from shared.core.exceptions import ForbiddenError, NotFoundError
from travel_service.app.enum.booking_enum import BookingStatus
from travel_service.app.models import Booking, BookingContact
from travel_service.app.schemas.bookings_schemas import BookingCreate, BookingRequest, BookingUpdate
from travel_service.app.schemas.destinations_schemas import DestinationCreate
from travel_service.app.schemas.packages_schemas import PackageCreate


@pytest.fixture
def package(travel_db, destinations_service, packages_service, admin):
    caller = caller_for(admin)
    destination = destinations_service.create(
        travel_db, DestinationCreate(name="Kyoto", description="Temples and gardens"), caller, make_upload())
    return packages_service.create(travel_db, PackageCreate(
        destination_id=destination.id, name="Temple Trail", description="Guided temple walk",
        duration=3, included="Guide,Tea ceremony", group_size=8, price=300,
    ), caller, make_upload())


def booking_dto(package_id, **overrides):
    data = {
        "package_id": package_id,
        "contact": {"name": "Jane Doe", "email": "jane@example.com", "phone": "+100200300"},
        "number_of_people": 2,
        "total_price": 600,
    }
    data.update(overrides)
    return BookingCreate(**data)


def test_create_booking_defaults_to_pending_and_stamps_owner(travel_db, bookings_service, package, normal_user):
    booking = bookings_service.create(travel_db, booking_dto(package.id), caller_for(normal_user))

    assert booking.status == BookingStatus.pending
    assert booking.user_id == normal_user.id
    assert booking.package_id == package.id
    assert booking.contact.name == "Jane Doe"

    contact = travel_db.query(BookingContact).filter(BookingContact.id == booking.contact_id).one()
    assert contact.user_id == normal_user.id


def test_create_booking_ignores_client_user_id(travel_db, bookings_service, package, normal_user, other_user):
    booking = bookings_service.create(
        travel_db, booking_dto(package.id, userId=str(other_user.id)), caller_for(normal_user))

    assert booking.user_id == normal_user.id


def test_create_booking_unknown_package_writes_nothing(travel_db, bookings_service, normal_user):
    with pytest.raises(NotFoundError, match="Package not found"):
        bookings_service.create(travel_db, booking_dto(uuid.uuid4()), caller_for(normal_user))

    assert travel_db.query(BookingContact).count() == 0
    assert travel_db.query(Booking).count() == 0


def test_each_booking_gets_its_own_contact(travel_db, bookings_service, package, normal_user):
    caller = caller_for(normal_user)
    first = bookings_service.create(travel_db, booking_dto(package.id), caller)
    second = bookings_service.create(travel_db, booking_dto(package.id), caller)

    assert first.contact_id != second.contact_id
    assert travel_db.query(BookingContact).count() == 2


def test_owner_reads_booking_other_user_is_forbidden(travel_db, bookings_service, package, normal_user, other_user, admin):
    booking = bookings_service.create(travel_db, booking_dto(package.id), caller_for(normal_user))

    assert bookings_service.find_by_id(travel_db, booking.id, caller_for(normal_user)).id == booking.id
    assert bookings_service.find_by_id(travel_db, booking.id, caller_for(admin)).id == booking.id
    with pytest.raises(ForbiddenError, match="not allowed to view this booking"):
        bookings_service.find_by_id(travel_db, booking.id, caller_for(other_user))


def test_find_missing_booking_is_not_found(travel_db, bookings_service, admin):
    with pytest.raises(NotFoundError, match="Booking not found"):
        bookings_service.find_by_id(travel_db, uuid.uuid4(), caller_for(admin))


def test_non_admin_listing_only_returns_own_bookings(travel_db, bookings_service, package, normal_user, other_user, admin):
    bookings_service.create(travel_db, booking_dto(package.id), caller_for(normal_user))
    theirs = bookings_service.create(travel_db, booking_dto(package.id), caller_for(other_user))

    items, meta = bookings_service.find_all(travel_db, BookingRequest(), caller_for(normal_user))
    assert meta.total == 1
    assert all(item.user_id == normal_user.id for item in items)

    # asking for someone else's bookings does not widen the result
    items, meta = bookings_service.find_all(
        travel_db, BookingRequest(user_id=other_user.id, contact_id=theirs.contact_id), caller_for(normal_user))
    assert items == []
    assert meta.total == 0

    items, meta = bookings_service.find_all(travel_db, BookingRequest(), caller_for(admin))
    assert meta.total == 2

    items, meta = bookings_service.find_all(travel_db, BookingRequest(user_id=other_user.id), caller_for(admin))
    assert [item.id for item in items] == [theirs.id]


def test_listing_filters_by_status_and_paginates(travel_db, bookings_service, package, normal_user):
    caller = caller_for(normal_user)
    for _ in range(3):
        bookings_service.create(travel_db, booking_dto(package.id), caller)
    confirmed = bookings_service.create(
        travel_db, booking_dto(package.id, status=BookingStatus.confirmed), caller)

    items, meta = bookings_service.find_all(
        travel_db, BookingRequest(status=BookingStatus.confirmed), caller)
    assert [item.id for item in items] == [confirmed.id]

    items, meta = bookings_service.find_all(travel_db, BookingRequest(page=2, limit=3), caller)
    assert len(items) == 1
    assert meta.model_dump() == {"page": 2, "limit": 3, "total": 4, "total_pages": 2}


def test_update_booking_keeps_contact_and_allows_any_status(travel_db, bookings_service, package, normal_user):
    caller = caller_for(normal_user)
    booking = bookings_service.create(travel_db, booking_dto(package.id), caller)

    canceled = bookings_service.update(
        travel_db, booking.id, BookingUpdate(status=BookingStatus.canceled, number_of_people=3), caller)
    assert canceled.status == BookingStatus.canceled
    assert canceled.number_of_people == 3
    assert canceled.contact_id == booking.contact_id

    # contactId is not an update field and is dropped
    reopened = bookings_service.update(
        travel_db, booking.id, BookingUpdate(status=BookingStatus.pending, contactId=str(uuid.uuid4())), caller)
    assert reopened.status == BookingStatus.pending
    assert reopened.contact_id == booking.contact_id


def test_update_booking_checks_ownership_and_package(travel_db, bookings_service, package, normal_user, other_user):
    booking = bookings_service.create(travel_db, booking_dto(package.id), caller_for(normal_user))

    with pytest.raises(ForbiddenError, match="not allowed to update this booking"):
        bookings_service.update(travel_db, booking.id, BookingUpdate(number_of_people=5), caller_for(other_user))

    with pytest.raises(NotFoundError, match="Package not found"):
        bookings_service.update(
            travel_db, booking.id, BookingUpdate(package_id=uuid.uuid4()), caller_for(normal_user))

    with pytest.raises(NotFoundError, match="Booking not found"):
        bookings_service.update(travel_db, uuid.uuid4(), BookingUpdate(number_of_people=5), caller_for(normal_user))


def test_delete_booking_is_hard(travel_db, bookings_service, package, normal_user, admin):
    booking = bookings_service.create(travel_db, booking_dto(package.id), caller_for(normal_user))

    result = bookings_service.delete(travel_db, booking.id, caller_for(admin))

    assert result == {"message": "Booking deleted successfully"}
    assert travel_db.query(Booking).filter(Booking.id == booking.id).count() == 0
    with pytest.raises(NotFoundError):
        bookings_service.delete(travel_db, booking.id, caller_for(admin))
