from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin
from shared.core.database import get_travel_db as get_db
from shared.core.schemas import JsonOutResult, MessageOut, PaginatedOutResult, UserToken
from shared.helpers.json_response_helper import paginated_response, success_response
from ..dependencies import get_destinations_service
from ..schemas.destinations_schemas import (
    DestinationCreate, DestinationListItemOut, DestinationOut, DestinationRequest,
    DestinationUpdate, as_query)
from ..services.destinations_services import DestinationsService

router = APIRouter(prefix="/destinations", tags=["Destinations"])


@router.get("", response_model=PaginatedOutResult[DestinationListItemOut])
def get_destinations(
        params: DestinationRequest = Depends(as_query),
        db: Session = Depends(get_db),
        service: DestinationsService = Depends(get_destinations_service)):
    items, meta = service.find_all(db, params)
    return paginated_response(items, meta)


@router.get("/{destination_id}", response_model=JsonOutResult[DestinationOut])
def get_destination(
        destination_id: UUID,
        db: Session = Depends(get_db),
        service: DestinationsService = Depends(get_destinations_service)):
    result = service.find_by_id(db, destination_id)
    return success_response(result, "Destination fetched successfully")


@router.post("", response_model=JsonOutResult[DestinationOut], status_code=status.HTTP_201_CREATED)
def create_destination(
        dto: DestinationCreate = Depends(DestinationCreate.as_form),
        image: Optional[UploadFile] = File(None),
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin),
        service: DestinationsService = Depends(get_destinations_service)):
    result = service.create(db, dto, current_user, image)
    return success_response(result, "Destination created successfully")


@router.patch("/{destination_id}", response_model=JsonOutResult[DestinationOut])
def update_destination(
        destination_id: UUID,
        dto: DestinationUpdate = Depends(DestinationUpdate.as_form),
        image: Optional[UploadFile] = File(None),
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin),
        service: DestinationsService = Depends(get_destinations_service)):
    result = service.update(db, destination_id, dto, current_user, image)
    return success_response(result, "Destination updated successfully")


@router.delete("/{destination_id}", response_model=JsonOutResult[MessageOut])
def delete_destination(
        destination_id: UUID,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin),
        service: DestinationsService = Depends(get_destinations_service)):
    result = service.delete(db, destination_id, current_user)
    return success_response(result, result["message"])
