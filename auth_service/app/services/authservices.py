from sqlalchemy.orm import Session

from shared.core import auth
from shared.core.exceptions import AppException, InternalServerError, UnauthenticatedError
from shared.core.logger import AppLogger

from ..schemas.authschemas import (
    AuthUserOut, LoginRequest, LoginResponse, RegisterRequest, RegisterResponse)
from ..schemas.userschema import UserCreate
from .userservices import UsersService


class AuthService:
    """Registration, login and token issuing."""

    def __init__(self, users_service: UsersService, logger: AppLogger):
        self.users_service = users_service
        self.logger = logger

    def register(self, db: Session, dto: RegisterRequest) -> RegisterResponse:
        try:
            self.logger.info("Registering new user", {"email": dto.email})

            # conflict check happens inside UsersService.create
            user = self.users_service.create(db, UserCreate(
                user_name=dto.user_name,
                email=dto.email,
                password=dto.password,
            ))

            self.logger.info("User registered successfully", {"userId": user.id})
            return RegisterResponse(user=AuthUserOut.model_validate(user))
        except AppException:
            raise
        except Exception as e:
            self.logger.error("Registration failed", {"error": str(e), "email": dto.email})
            raise InternalServerError("Registration failed") from e

    def login(self, db: Session, dto: LoginRequest) -> LoginResponse:
        try:
            self.logger.info("User login attempt", {"email": dto.email})

            user = self.users_service.find_by_email_with_password(db, dto.email)
            if not user:
                self.logger.warn("Login failed: User not found", {"email": dto.email})
                raise UnauthenticatedError("Invalid credentials")

            if not user.verify_password(dto.password):
                self.logger.warn("Login failed: Invalid password", {"email": dto.email})
                raise UnauthenticatedError("Invalid credentials")

            token = auth.create_access_token(auth.build_claims(user))

            self.logger.info("User logged in successfully", {"userId": user.id})
            return LoginResponse(user=AuthUserOut.model_validate(user), token=token)
        except AppException:
            raise
        except Exception as e:
            self.logger.error("Login failed with error", {"error": str(e), "email": dto.email})
            raise InternalServerError("Login failed") from e
