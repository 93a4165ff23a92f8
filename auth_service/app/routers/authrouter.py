from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.core.database import get_auth_db as get_db
from shared.core.schemas import JsonOutResult
from shared.helpers.json_response_helper import success_response
from ..dependencies import get_auth_service
from ..schemas.authschemas import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from ..services.authservices import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=JsonOutResult[RegisterResponse], status_code=status.HTTP_201_CREATED)
def register(
        dto: RegisterRequest,
        db: Session = Depends(get_db),
        service: AuthService = Depends(get_auth_service)):
    result = service.register(db, dto)
    return success_response(result, "User registered successfully")


@router.post("/login", response_model=JsonOutResult[LoginResponse])
def login(
        dto: LoginRequest,
        db: Session = Depends(get_db),
        service: AuthService = Depends(get_auth_service)):
    result = service.login(db, dto)
    return success_response(result, "Login successful")
