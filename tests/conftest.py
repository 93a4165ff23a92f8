import io
import os
import uuid

# settings and engines are built at import time, so configure them first
os.environ["JWT_SECRET"] = "test-secret"
os.environ["AUTH_DATABASE_URL"] = "sqlite://"
os.environ["TRAVEL_DATABASE_URL"] = "sqlite://"
os.environ["CLOUDINARY_CLOUD_NAME"] = "test-cloud"
os.environ["CLOUDINARY_API_KEY"] = "test-key"
os.environ["CLOUDINARY_API_SECRET"] = "test-api-secret"

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from shared.core.auth import build_claims, create_access_token
from shared.core.database import (
    AuthBase, AuthSessionLocal, Base, TravelSessionLocal, auth_engine, travel_engine)
from shared.core.logger import AppLogger
from shared.core.schemas import UserToken
from shared.models.users import Users
from shared.utils.enums import UserRole
from travel_service.app import models  # noqa: F401
from travel_service.app.crud.booking_contacts_crud import BookingContactsRepository
from travel_service.app.crud.bookings_crud import BookingsRepository
from travel_service.app.crud.destinations_crud import DestinationsRepository
from travel_service.app.crud.packages_crud import PackagesRepository
from travel_service.app.services.booking_contacts_services import BookingContactsService
from travel_service.app.services.bookings_services import BookingsService
from travel_service.app.services.destinations_services import DestinationsService
from travel_service.app.services.packages_services import PackagesService


class FakeImageHost:
    """Records uploads and deletions instead of calling Cloudinary."""

    def __init__(self, fail_upload=False, fail_delete=False):
        self.fail_upload = fail_upload
        self.fail_delete = fail_delete
        self.uploads = []
        self.deleted = []

    def upload_image_from_buffer(self, buffer, folder, filename="upload"):
        if self.fail_upload:
            raise RuntimeError("upload failed")
        public_id = f"{folder}/{uuid.uuid4().hex}"
        self.uploads.append((folder, filename, buffer))
        return {"url": f"https://images.test/{public_id}.png", "public_id": public_id}

    def delete_image(self, public_id):
        if self.fail_delete:
            raise RuntimeError("delete failed")
        self.deleted.append(public_id)


def make_upload(content=b"fake-image", filename="photo.png", content_type="image/png"):
    return UploadFile(
        file=io.BytesIO(content), filename=filename, headers=Headers({"content-type": content_type}))


@pytest.fixture
def auth_db():
    AuthBase.metadata.create_all(bind=auth_engine)
    db = AuthSessionLocal()
    try:
        yield db
    finally:
        db.close()
        AuthBase.metadata.drop_all(bind=auth_engine)


@pytest.fixture
def travel_db():
    Base.metadata.create_all(bind=travel_engine)
    db = TravelSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=travel_engine)


@pytest.fixture
def image_host():
    return FakeImageHost()


@pytest.fixture
def packages_service(image_host):
    return PackagesService(
        PackagesRepository(), DestinationsRepository(), image_host, AppLogger("test.packages"))


@pytest.fixture
def destinations_service(packages_service, image_host):
    return DestinationsService(
        DestinationsRepository(), packages_service, image_host, AppLogger("test.destinations"))


@pytest.fixture
def bookings_service(packages_service):
    return BookingsService(
        BookingsRepository(),
        BookingContactsService(BookingContactsRepository()),
        packages_service,
        AppLogger("test.bookings"),
    )


@pytest.fixture
def make_user(auth_db):
    def _make_user(email=None, role=UserRole.NORMAL, password="password123", user_name="traveller"):
        user = Users(
            user_name=user_name,
            email=email or f"{uuid.uuid4().hex[:8]}@example.com",
            role=role.value,
        )
        user.set_password(password)
        auth_db.add(user)
        auth_db.commit()
        auth_db.refresh(user)
        return user

    return _make_user


def caller_for(user) -> UserToken:
    return UserToken(id=user.id, email=user.email, user_name=user.user_name, role=UserRole(user.role))


def bearer_for(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(build_claims(user))}"}


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", role=UserRole.ADMIN, user_name="admin")


@pytest.fixture
def normal_user(make_user):
    return make_user(email="jane@example.com", user_name="jane")


@pytest.fixture
def other_user(make_user):
    return make_user(email="john@example.com", user_name="john")
