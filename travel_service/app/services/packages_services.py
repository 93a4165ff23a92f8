from typing import Dict, Iterable, Optional
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.orm import Session

from shared.core.exceptions import AppException, BadRequestError, InternalServerError, NotFoundError
from shared.core.logger import AppLogger
from shared.core.schemas import CommonQueryParams, UserToken
from shared.helpers.json_response_helper import calculate_meta
from shared.utils.image_host import CloudinaryClient, read_upload
from ..crud.destinations_crud import DestinationsRepository
from ..crud.packages_crud import PackagesRepository
from ..schemas.packages_schemas import (
    PackageCreate, PackageListItemOut, PackageOut, PackageRequest, PackageUpdate)

IMAGE_FOLDER = "packages"


class PackagesService:
    def __init__(
        self,
        packages_repository: PackagesRepository,
        destinations_repository: DestinationsRepository,
        image_host: CloudinaryClient,
        logger: AppLogger
    ):
        self.packages_repository = packages_repository
        self.destinations_repository = destinations_repository
        self.image_host = image_host
        self.logger = logger

    def _ensure_destination(self, db: Session, destination_id: UUID):
        if not self.destinations_repository.exists(db, destination_id):
            self.logger.warn("Destination not found", {"destinationId": destination_id})
            raise NotFoundError("Destination not found")

    def exists(self, db: Session, package_id: UUID) -> bool:
        return self.packages_repository.exists(db, package_id)

    def stats_by_destination_id(self, db: Session, destination_id: UUID) -> dict:
        return self.packages_repository.stats_by_destination_ids(db, [destination_id])[destination_id]

    def stats_by_destination_ids(self, db: Session, destination_ids: Iterable[UUID]) -> Dict[UUID, dict]:
        return self.packages_repository.stats_by_destination_ids(db, destination_ids)

    def find_by_destination(self, db: Session, params: PackageRequest):
        try:
            self.logger.info("Fetching packages by destination", {
                "destinationId": params.destination_id,
                "page": params.page,
                "limit": params.limit,
            })

            self._ensure_destination(db, params.destination_id)

            packages, total = self.packages_repository.find_by_destination(
                db, params.destination_id, params.page, params.limit)

            items = [PackageListItemOut.model_validate(p) for p in packages]
            return items, calculate_meta(total, params.page, params.limit)
        except AppException:
            raise
        except Exception as e:
            self.logger.error("Failed to fetch packages by destination", {
                "error": str(e), "destinationId": params.destination_id})
            raise BadRequestError("Failed to fetch packages") from e

    def find_all(self, db: Session, params: CommonQueryParams, current_user: UserToken):
        try:
            self.logger.info("Admin fetching all packages", {
                "actorId": current_user.id, "page": params.page, "limit": params.limit})

            packages, total = self.packages_repository.find_all(db, params.page, params.limit)

            items = [PackageOut.model_validate(p) for p in packages]
            return items, calculate_meta(total, params.page, params.limit)
        except Exception as e:
            self.logger.error("Failed to fetch all packages", {"error": str(e)})
            raise BadRequestError("Failed to fetch packages") from e

    def find_by_id(self, db: Session, package_id: UUID) -> PackageOut:
        try:
            package = self.packages_repository.find_by_id(db, package_id)
            if not package:
                self.logger.warn("Package not found", {"packageId": package_id})
                raise NotFoundError("Package not found")

            return PackageOut.model_validate(package)
        except AppException:
            raise
        except Exception as e:
            self.logger.error("Failed to fetch package by ID", {"error": str(e), "packageId": package_id})
            raise BadRequestError("Failed to fetch package") from e

    def _upload(self, image: UploadFile, message: str) -> dict:
        buffer = read_upload(image)
        try:
            return self.image_host.upload_image_from_buffer(
                buffer, IMAGE_FOLDER, image.filename or "upload")
        except Exception as e:
            self.logger.error(message, {"error": str(e)})
            raise InternalServerError(message) from e

    def create(
        self,
        db: Session,
        dto: PackageCreate,
        current_user: UserToken,
        image: Optional[UploadFile]
    ) -> PackageOut:
        try:
            self.logger.info("Admin creating new package", {
                "name": dto.name, "destinationId": dto.destination_id, "actorId": current_user.id})

            self._ensure_destination(db, dto.destination_id)

            if image is None:
                self.logger.error("Package image not provided", {"name": dto.name})
                raise InternalServerError("Failed to upload package image")

            uploaded = self._upload(image, "Failed to upload package image")

            data = dto.model_dump()
            data["image_url"] = uploaded["url"]
            data["image_public_id"] = uploaded["public_id"]

            package = self.packages_repository.create(db, data)

            self.logger.info("Package created successfully", {"packageId": package.id})
            return PackageOut.model_validate(package)
        except AppException:
            raise
        except Exception as e:
            db.rollback()
            self.logger.error("Failed to create package", {"error": str(e), "name": dto.name})
            raise BadRequestError("Failed to create package") from e

    def update(
        self,
        db: Session,
        package_id: UUID,
        dto: PackageUpdate,
        current_user: UserToken,
        image: Optional[UploadFile] = None
    ) -> PackageOut:
        try:
            self.logger.info("Admin updating package", {
                "packageId": package_id, "actorId": current_user.id})

            existing = self.packages_repository.find_by_id(db, package_id)
            if not existing:
                self.logger.warn("Package not found for update", {"packageId": package_id})
                raise NotFoundError("Package not found")

            update_data = dto.model_dump(exclude_unset=True, exclude_none=True)

            if "destination_id" in update_data:
                self._ensure_destination(db, update_data["destination_id"])

            if image is not None:
                # validate the new file before the old asset is removed
                buffer = read_upload(image)
                try:
                    if existing.image_public_id:
                        self.image_host.delete_image(existing.image_public_id)
                    uploaded = self.image_host.upload_image_from_buffer(
                        buffer, IMAGE_FOLDER, image.filename or "upload")
                except Exception as e:
                    self.logger.error("Failed to update package image", {
                        "error": str(e), "packageId": package_id})
                    raise InternalServerError("Failed to update package image") from e

                update_data["image_url"] = uploaded["url"]
                update_data["image_public_id"] = uploaded["public_id"]

            package = self.packages_repository.update_by_id(db, package_id, update_data)
            if not package:
                raise NotFoundError("Package not found")

            self.logger.info("Package updated successfully", {"packageId": package_id})
            return PackageOut.model_validate(package)
        except AppException:
            raise
        except Exception as e:
            db.rollback()
            self.logger.error("Failed to update package", {"error": str(e), "packageId": package_id})
            raise InternalServerError("Failed to update package") from e

    def delete(self, db: Session, package_id: UUID, current_user: UserToken) -> dict:
        try:
            self.logger.info("Admin deleting package", {
                "packageId": package_id, "actorId": current_user.id})

            existing = self.packages_repository.find_by_id(db, package_id)
            if not existing:
                self.logger.warn("Package not found for deletion", {"packageId": package_id})
                raise NotFoundError("Package not found")

            if existing.image_public_id:
                try:
                    self.image_host.delete_image(existing.image_public_id)
                except Exception as e:
                    self.logger.error("Failed to delete package image", {
                        "error": str(e), "publicId": existing.image_public_id})

            self.packages_repository.delete_by_id(db, package_id)

            self.logger.info("Package deleted successfully", {"packageId": package_id})
            return {"message": "Package deleted successfully"}
        except AppException:
            raise
        except Exception as e:
            db.rollback()
            self.logger.error("Failed to delete package", {"error": str(e), "packageId": package_id})
            raise InternalServerError("Failed to delete package") from e
