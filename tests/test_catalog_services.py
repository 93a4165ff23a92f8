import uuid

import pytest

from conftest import FakeImageHost, caller_for, make_upload
from shared.core.exceptions import BadRequestError, InternalServerError, NotFoundError
from shared.core.logger import AppLogger
from shared.core.schemas import CommonQueryParams
from travel_service.app.crud.destinations_crud import DestinationsRepository
from travel_service.app.crud.packages_crud import PackagesRepository
from travel_service.app.models import Destination, Package
from travel_service.app.schemas.destinations_schemas import (
    DestinationCreate, DestinationRequest, DestinationUpdate)
from travel_service.app.schemas.packages_schemas import (
    PackageCreate, PackageRequest, PackageUpdate)
from travel_service.app.services.destinations_services import DestinationsService
from travel_service.app.services.packages_services import PackagesService


def create_destination(service, db, caller, name="Bali"):
    return service.create(
        db, DestinationCreate(name=name, description="Island of the gods"), caller, make_upload())


def create_package(service, db, caller, destination_id, name="Island Hopper", price=499.0):
    return service.create(db, PackageCreate(
        destination_id=destination_id,
        name=name,
        description="Five islands in five days",
        duration=5,
        included='["Hotel", "Breakfast"]',
        group_size=12,
        price=price,
    ), caller, make_upload())


def test_create_destination_uploads_image(travel_db, destinations_service, image_host, admin):
    destination = create_destination(destinations_service, travel_db, caller_for(admin))

    assert image_host.uploads[0][0] == "destinations"
    assert destination.image.url.startswith("https://images.test/destinations/")
    assert destination.packages_count == 0
    assert destination.min_price is None


def test_create_destination_without_image_is_bad_request(travel_db, destinations_service, admin):
    with pytest.raises(BadRequestError):
        destinations_service.create(
            travel_db, DestinationCreate(name="Bali", description="Island"), caller_for(admin), None)


def test_create_destination_upload_failure_is_bad_request(travel_db, packages_service, admin):
    service = DestinationsService(
        DestinationsRepository(), packages_service, FakeImageHost(fail_upload=True), AppLogger("test"))

    with pytest.raises(BadRequestError, match="Failed to create destination"):
        create_destination(service, travel_db, caller_for(admin))
    assert travel_db.query(Destination).count() == 0


def test_destination_stats_come_from_packages(travel_db, destinations_service, packages_service, admin):
    caller = caller_for(admin)
    bali = create_destination(destinations_service, travel_db, caller, "Bali")
    empty = create_destination(destinations_service, travel_db, caller, "Oslo")
    create_package(packages_service, travel_db, caller, bali.id, price=800)
    cheap = create_package(packages_service, travel_db, caller, bali.id, name="Budget", price=250)

    detail = destinations_service.find_by_id(travel_db, bali.id)
    assert detail.packages_count == 2
    assert detail.min_price == 250

    packages_service.delete(travel_db, cheap.id, caller)
    items, meta = destinations_service.find_all(travel_db, DestinationRequest())

    by_name = {item.name: item for item in items}
    assert meta.total == 2
    assert by_name["Bali"].packages_count == 1
    assert by_name["Bali"].min_price == 800
    assert by_name["Oslo"].packages_count == 0
    assert by_name["Oslo"].min_price is None
    assert packages_service.stats_by_destination_id(travel_db, empty.id) == {"count": 0, "min_price": None}


def test_destination_list_filters_by_name(travel_db, destinations_service, admin):
    caller = caller_for(admin)
    create_destination(destinations_service, travel_db, caller, "Bali")
    create_destination(destinations_service, travel_db, caller, "Oslo")

    items, meta = destinations_service.find_all(travel_db, DestinationRequest(name="bal"))

    assert [item.name for item in items] == ["Bali"]
    assert meta.total == 1


def test_update_destination_replaces_image(travel_db, destinations_service, image_host, admin):
    caller = caller_for(admin)
    destination = create_destination(destinations_service, travel_db, caller)
    old_public_id = destination.image.public_id

    updated = destinations_service.update(
        travel_db, destination.id, DestinationUpdate(name="Bali Island"), caller, make_upload())

    assert updated.name == "Bali Island"
    assert updated.description == "Island of the gods"
    assert image_host.deleted == [old_public_id]
    assert updated.image.public_id != old_public_id


def test_update_missing_destination_is_not_found(travel_db, destinations_service, admin):
    with pytest.raises(NotFoundError):
        destinations_service.update(travel_db, uuid.uuid4(), DestinationUpdate(name="x1"), caller_for(admin))


def test_soft_deleted_destination_disappears_but_row_stays(travel_db, destinations_service, admin):
    caller = caller_for(admin)
    destination = create_destination(destinations_service, travel_db, caller)

    result = destinations_service.delete(travel_db, destination.id, caller)

    assert result == {"message": "Destination deleted successfully"}
    with pytest.raises(NotFoundError):
        destinations_service.find_by_id(travel_db, destination.id)
    items, meta = destinations_service.find_all(travel_db, DestinationRequest())
    assert items == [] and meta.total == 0

    row = travel_db.query(Destination).filter(Destination.id == destination.id).one()
    travel_db.refresh(row)
    assert row.deleted_at is not None


def test_package_create_requires_existing_destination(travel_db, packages_service, admin):
    with pytest.raises(NotFoundError, match="Destination not found"):
        create_package(packages_service, travel_db, caller_for(admin), uuid.uuid4())


def test_package_create_without_image_fails(travel_db, destinations_service, packages_service, admin):
    caller = caller_for(admin)
    destination = create_destination(destinations_service, travel_db, caller)

    dto = PackageCreate(
        destination_id=destination.id, name="Trip", description="d",
        duration=1, group_size=1, price=0)
    with pytest.raises(InternalServerError, match="Failed to upload package image"):
        packages_service.create(travel_db, dto, caller, None)


def test_package_included_parsing():
    base = dict(destination_id=uuid.uuid4(), name="Trip", description="d", duration=1, group_size=1, price=0)

    assert PackageCreate(**base, included='["Hotel", "Guide"]').included == ["Hotel", "Guide"]
    assert PackageCreate(**base, included="Hotel, Guide ,Meals").included == ["Hotel", "Guide", "Meals"]
    assert PackageCreate(**base, included=["Hotel"]).included == ["Hotel"]
    assert PackageCreate(**base).included == []


def test_packages_list_by_destination(travel_db, destinations_service, packages_service, admin):
    caller = caller_for(admin)
    bali = create_destination(destinations_service, travel_db, caller, "Bali")
    oslo = create_destination(destinations_service, travel_db, caller, "Oslo")
    create_package(packages_service, travel_db, caller, bali.id)
    create_package(packages_service, travel_db, caller, oslo.id, name="Fjords")

    items, meta = packages_service.find_by_destination(
        travel_db, PackageRequest(destination_id=bali.id))
    assert [item.name for item in items] == ["Island Hopper"]
    assert meta.total == 1

    with pytest.raises(NotFoundError, match="Destination not found"):
        packages_service.find_by_destination(travel_db, PackageRequest(destination_id=uuid.uuid4()))

    all_items, all_meta = packages_service.find_all(travel_db, CommonQueryParams(), caller)
    assert all_meta.total == 2
    assert {item.destination_id for item in all_items} == {bali.id, oslo.id}


def test_package_update_validates_new_destination(travel_db, destinations_service, packages_service, admin):
    caller = caller_for(admin)
    bali = create_destination(destinations_service, travel_db, caller)
    package = create_package(packages_service, travel_db, caller, bali.id)

    with pytest.raises(NotFoundError, match="Destination not found"):
        packages_service.update(travel_db, package.id, PackageUpdate(destination_id=uuid.uuid4()), caller)

    updated = packages_service.update(travel_db, package.id, PackageUpdate(price=350, included="Hotel"), caller)
    assert updated.price == 350
    assert updated.included == ["Hotel"]
    assert updated.name == "Island Hopper"


def test_package_update_image_failure(travel_db, destinations_service, admin):
    caller = caller_for(admin)
    bali = create_destination(destinations_service, travel_db, caller)
    failing = PackagesService(
        PackagesRepository(), DestinationsRepository(), FakeImageHost(), AppLogger("test"))
    package = create_package(failing, travel_db, caller, bali.id)
    failing.image_host.fail_delete = True

    with pytest.raises(InternalServerError, match="Failed to update package image"):
        failing.update(travel_db, package.id, PackageUpdate(name="New name"), caller, make_upload())
    assert failing.find_by_id(travel_db, package.id).name == "Island Hopper"


def test_package_delete_survives_image_host_failure(travel_db, destinations_service, admin):
    caller = caller_for(admin)
    bali = create_destination(destinations_service, travel_db, caller)
    host = FakeImageHost()
    service = PackagesService(PackagesRepository(), DestinationsRepository(), host, AppLogger("test"))
    package = create_package(service, travel_db, caller, bali.id)
    host.fail_delete = True

    result = service.delete(travel_db, package.id, caller)

    assert result == {"message": "Package deleted successfully"}
    with pytest.raises(NotFoundError, match="Package not found"):
        service.find_by_id(travel_db, package.id)
    row = travel_db.query(Package).filter(Package.id == package.id).one()
    travel_db.refresh(row)
    assert row.deleted_at is not None


def test_destination_list_name_filter_escapes_wildcards(travel_db, destinations_service, admin):
    caller = caller_for(admin)
    create_destination(destinations_service, travel_db, caller, "Bali")
    create_destination(destinations_service, travel_db, caller, "Oslo_Fjords")

    items, _ = destinations_service.find_all(travel_db, DestinationRequest(name="_"))
    assert [item.name for item in items] == ["Oslo_Fjords"]

    items, meta = destinations_service.find_all(travel_db, DestinationRequest(name="%"))
    assert items == [] and meta.total == 0


def test_non_image_upload_is_rejected(travel_db, destinations_service, image_host, admin):
    upload = make_upload(b"MZ" + b"\x00" * 64, "tool.exe", content_type="application/octet-stream")

    with pytest.raises(BadRequestError, match="Only image files are allowed"):
        destinations_service.create(
            travel_db, DestinationCreate(name="Bali", description="Island"), caller_for(admin), upload)
    assert image_host.uploads == []
    assert travel_db.query(Destination).count() == 0


def test_oversize_image_is_rejected(travel_db, destinations_service, packages_service, image_host, admin):
    caller = caller_for(admin)
    too_big = make_upload(b"\x00" * (5 * 1024 * 1024 + 1), "huge.png")

    with pytest.raises(BadRequestError, match="5 MB"):
        destinations_service.create(
            travel_db, DestinationCreate(name="Bali", description="Island"), caller, too_big)

    destination = create_destination(destinations_service, travel_db, caller)
    with pytest.raises(BadRequestError, match="5 MB"):
        packages_service.create(travel_db, PackageCreate(
            destination_id=destination.id, name="Trip", description="d",
            duration=1, group_size=1, price=0,
        ), caller, make_upload(b"\x00" * (6 * 1024 * 1024), "huge.png"))
    assert len(image_host.uploads) == 1


def test_invalid_replacement_image_keeps_current_one(travel_db, destinations_service, packages_service, image_host, admin):
    caller = caller_for(admin)
    destination = create_destination(destinations_service, travel_db, caller)
    package = create_package(packages_service, travel_db, caller, destination.id)
    not_an_image = make_upload(b"plain text", "notes.txt", content_type="text/plain")

    with pytest.raises(BadRequestError):
        destinations_service.update(travel_db, destination.id, DestinationUpdate(), caller, not_an_image)
    with pytest.raises(BadRequestError):
        packages_service.update(travel_db, package.id, PackageUpdate(), caller, not_an_image)

    assert image_host.deleted == []
    assert destinations_service.find_by_id(travel_db, destination.id).image.public_id == destination.image.public_id
