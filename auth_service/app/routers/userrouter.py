from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin, validate_current_token
from shared.core.database import get_auth_db as get_db
from shared.core.schemas import JsonOutResult, MessageOut, PaginatedOutResult, UserToken
from shared.helpers.json_response_helper import paginated_response, success_response
from ..dependencies import get_users_service
from ..schemas.userschema import UserCreate, UserOut, UserRequest, UserUpdate, as_query
from ..services.userservices import UsersService

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=PaginatedOutResult[UserOut])
def get_users(
        params: UserRequest = Depends(as_query),
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin),
        service: UsersService = Depends(get_users_service)):
    items, meta = service.find_all(db, params, current_user)
    return paginated_response(items, meta)


@router.get("/{user_id}", response_model=JsonOutResult[UserOut])
def get_user(
        user_id: UUID,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(validate_current_token),
        service: UsersService = Depends(get_users_service)):
    result = service.find_by_id(db, user_id, current_user)
    return success_response(result, "User fetched successfully")


@router.post("", response_model=JsonOutResult[UserOut], status_code=status.HTTP_201_CREATED)
def create_user(
        dto: UserCreate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_admin),
        service: UsersService = Depends(get_users_service)):
    result = service.create(db, dto, current_user)
    return success_response(result, "User created successfully")


@router.patch("/{user_id}", response_model=JsonOutResult[UserOut])
def update_user(
        user_id: UUID,
        dto: UserUpdate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(validate_current_token),
        service: UsersService = Depends(get_users_service)):
    result = service.update(db, user_id, dto, current_user)
    return success_response(result, "User updated successfully")


@router.delete("/{user_id}", response_model=JsonOutResult[MessageOut])
def delete_user(
        user_id: UUID,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(validate_current_token),
        service: UsersService = Depends(get_users_service)):
    result = service.delete(db, user_id, current_user)
    return success_response(result, result["message"])
