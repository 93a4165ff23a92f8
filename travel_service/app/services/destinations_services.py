from typing import Optional
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.orm import Session

from shared.core.exceptions import AppException, BadRequestError, InternalServerError, NotFoundError
from shared.core.logger import AppLogger
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import calculate_meta
from shared.utils.image_host import CloudinaryClient, read_upload
from ..crud.destinations_crud import DestinationsRepository
from ..models.destinations import Destination
from ..schemas.destinations_schemas import (
    DestinationCreate, DestinationListItemOut, DestinationOut, DestinationRequest, DestinationUpdate)
from .packages_services import PackagesService

IMAGE_FOLDER = "destinations"


class DestinationsService:
    def __init__(
        self,
        destinations_repository: DestinationsRepository,
        packages_service: PackagesService,
        image_host: CloudinaryClient,
        logger: AppLogger
    ):
        self.destinations_repository = destinations_repository
        self.packages_service = packages_service
        self.image_host = image_host
        self.logger = logger

    def _to_detail(self, db: Session, destination: Destination) -> DestinationOut:
        stats = self.packages_service.stats_by_destination_id(db, destination.id)
        out = DestinationOut.model_validate(destination)
        out.packages_count = stats["count"]
        out.min_price = stats["min_price"]
        return out

    def find_all(self, db: Session, params: DestinationRequest):
        try:
            self.logger.info("Fetching destinations", {
                "page": params.page, "limit": params.limit, "name": params.name})

            destinations, total = self.destinations_repository.find_all(
                db, params.name, params.page, params.limit)

            stats = self.packages_service.stats_by_destination_ids(
                db, [d.id for d in destinations])

            items = []
            for destination in destinations:
                item = DestinationListItemOut.model_validate(destination)
                item.packages_count = stats[destination.id]["count"]
                item.min_price = stats[destination.id]["min_price"]
                items.append(item)

            return items, calculate_meta(total, params.page, params.limit)
        except Exception as e:
            self.logger.error("Failed to fetch destinations", {"error": str(e)})
            raise InternalServerError("Failed to fetch destinations") from e

    def find_by_id(self, db: Session, destination_id: UUID) -> DestinationOut:
        try:
            destination = self.destinations_repository.find_by_id(db, destination_id)
            if not destination:
                self.logger.warn("Destination not found", {"id": destination_id})
                raise NotFoundError("Destination not found")

            return self._to_detail(db, destination)
        except AppException:
            raise
        except Exception as e:
            self.logger.error("Failed to fetch destination", {"error": str(e), "id": destination_id})
            raise InternalServerError("Failed to fetch destination") from e

    def create(
        self,
        db: Session,
        dto: DestinationCreate,
        current_user: UserToken,
        image: Optional[UploadFile]
    ) -> DestinationOut:
        try:
            self.logger.info("Admin creating new destination", {
                "name": dto.name, "actorId": current_user.id})

            if image is None:
                raise BadRequestError("Destination image is required")

            uploaded = self.image_host.upload_image_from_buffer(
                read_upload(image), IMAGE_FOLDER, image.filename or "upload")

            data = dto.model_dump()
            data["image_url"] = uploaded["url"]
            data["image_public_id"] = uploaded["public_id"]

            destination = self.destinations_repository.create(db, data)

            self.logger.info("Destination created successfully", {"id": destination.id})
            return self._to_detail(db, destination)
        except AppException:
            raise
        except Exception as e:
            db.rollback()
            self.logger.error("Failed to create destination", {"error": str(e), "name": dto.name})
            raise BadRequestError("Failed to create destination") from e

    def update(
        self,
        db: Session,
        destination_id: UUID,
        dto: DestinationUpdate,
        current_user: UserToken,
        image: Optional[UploadFile] = None
    ) -> DestinationOut:
        try:
            self.logger.info("Admin updating destination", {
                "id": destination_id, "actorId": current_user.id})

            existing = self.destinations_repository.find_by_id(db, destination_id)
            if not existing:
                self.logger.warn("Destination not found for update", {"id": destination_id})
                raise NotFoundError("Destination not found")

            update_data = dto.model_dump(exclude_unset=True, exclude_none=True)

            if image is not None:
                # validate the new file before the old asset is removed
                buffer = read_upload(image)
                if existing.image_public_id:
                    self.image_host.delete_image(existing.image_public_id)

                uploaded = self.image_host.upload_image_from_buffer(
                    buffer, IMAGE_FOLDER, image.filename or "upload")
                update_data["image_url"] = uploaded["url"]
                update_data["image_public_id"] = uploaded["public_id"]

            destination = self.destinations_repository.update_by_id(db, destination_id, update_data)
            if not destination:
                raise NotFoundError("Destination not found")

            self.logger.info("Destination updated successfully", {"id": destination_id})
            return self._to_detail(db, destination)
        except AppException:
            raise
        except Exception as e:
            db.rollback()
            self.logger.error("Failed to update destination", {"error": str(e), "id": destination_id})
            raise BadRequestError("Failed to update destination") from e

    def delete(self, db: Session, destination_id: UUID, current_user: UserToken) -> dict:
        try:
            self.logger.info("Admin deleting destination", {
                "id": destination_id, "actorId": current_user.id})

            existing = self.destinations_repository.find_by_id(db, destination_id)
            if not existing:
                self.logger.warn("Destination not found for deletion", {"id": destination_id})
                raise NotFoundError("Destination not found")

            if existing.image_public_id:
                try:
                    self.image_host.delete_image(existing.image_public_id)
                except Exception as e:
                    # image cleanup failure does not block deletion
                    self.logger.error("Failed to delete destination image", {
                        "error": str(e), "publicId": existing.image_public_id})

            self.destinations_repository.delete_by_id(db, destination_id)

            self.logger.info("Destination deleted successfully", {"id": destination_id})
            return {"message": "Destination deleted successfully"}
        except AppException:
            raise
        except Exception as e:
            db.rollback()
            self.logger.error("Failed to delete destination", {"error": str(e), "id": destination_id})
            raise InternalServerError("Failed to delete destination") from e
