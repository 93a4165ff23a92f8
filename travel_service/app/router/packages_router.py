from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin
from shared.core.database import get_travel_db as get_db
from shared.core.schemas import (
    CommonQueryParams, JsonOutResult, MessageOut, PaginatedOutResult, UserToken)
from shared.helpers.json_response_helper import paginated_response, success_response
from ..dependencies import get_packages_service
from ..schemas.packages_schemas import (
    PackageCreate, PackageListItemOut, PackageOut, PackageRequest, PackageUpdate, as_query)
from ..services.packages_services import PackagesService

router = APIRouter(prefix="/packages", tags=["Packages"])


@router.get("", response_model=PaginatedOutResult[PackageListItemOut])
def get_packages(
        params: PackageRequest = Depends(as_query),
        db: Session = Depends(get_db),
        service: PackagesService = Depends(get_packages_service)):
    items, meta = service.find_by_destination(db, params)
    return paginated_response(items, meta)


# declared before /{package_id} so "all" is not read as an id
@router.get("/all", response_model=PaginatedOutResult[PackageOut])
def get_all_packages(
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1),
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin),
        service: PackagesService = Depends(get_packages_service)):
    items, meta = service.find_all(db, CommonQueryParams(page=page, limit=limit), current_user)
    return paginated_response(items, meta)


@router.get("/{package_id}", response_model=JsonOutResult[PackageOut])
def get_package(
        package_id: UUID,
        db: Session = Depends(get_db),
        service: PackagesService = Depends(get_packages_service)):
    result = service.find_by_id(db, package_id)
    return success_response(result, "Package fetched successfully")


@router.post("", response_model=JsonOutResult[PackageOut], status_code=status.HTTP_201_CREATED)
def create_package(
        dto: PackageCreate = Depends(PackageCreate.as_form),
        image: Optional[UploadFile] = File(None),
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin),
        service: PackagesService = Depends(get_packages_service)):
    result = service.create(db, dto, current_user, image)
    return success_response(result, "Package created successfully")


@router.patch("/{package_id}", response_model=JsonOutResult[PackageOut])
def update_package(
        package_id: UUID,
        dto: PackageUpdate = Depends(PackageUpdate.as_form),
        image: Optional[UploadFile] = File(None),
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin),
        service: PackagesService = Depends(get_packages_service)):
    result = service.update(db, package_id, dto, current_user, image)
    return success_response(result, "Package updated successfully")


@router.delete("/{package_id}", response_model=JsonOutResult[MessageOut])
def delete_package(
        package_id: UUID,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin),
        service: PackagesService = Depends(get_packages_service)):
    result = service.delete(db, package_id, current_user)
    return success_response(result, result["message"])
