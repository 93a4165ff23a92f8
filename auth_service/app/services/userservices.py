from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.auth import ensure_owner_or_admin
from shared.core.exceptions import (
    AppException, ConflictError, ForbiddenError, InternalServerError, NotFoundError)
from shared.core.logger import AppLogger
from shared.core.schemas import UserToken
from shared.crud.users_crud import UsersRepository
from shared.helpers.json_response_helper import calculate_meta
from shared.models.users import Users, bcrypt_context
from shared.utils.enums import UserRole

from ..schemas.userschema import UserCreate, UserOut, UserRequest, UserUpdate


class UsersService:
    def __init__(self, users_repository: UsersRepository, logger: AppLogger):
        self.users_repository = users_repository
        self.logger = logger

    @staticmethod
    def hash_password(password: str) -> str:
        return bcrypt_context.hash(password)

    def find_all(self, db: Session, params: UserRequest, current_user: UserToken):
        try:
            self.logger.info("Admin fetching users", {
                "actorId": current_user.id,
                "page": params.page,
                "limit": params.limit,
            })

            users, total = self.users_repository.find_all(
                db, params.user_name, params.email, params.page, params.limit)

            items = [UserOut.model_validate(user) for user in users]
            return items, calculate_meta(total, params.page, params.limit)
        except Exception as e:
            self.logger.error("Failed to fetch users", {"error": str(e)})
            raise InternalServerError("Failed to fetch users") from e

    def find_by_id(self, db: Session, user_id: UUID, current_user: UserToken) -> UserOut:
        try:
            self.logger.info("Fetching user by ID", {
                             "id": user_id, "actor": current_user.id})

            ensure_owner_or_admin(
                current_user, user_id, "You are not allowed to view this profile")

            user = self.users_repository.find_by_id(db, user_id)
            if not user:
                self.logger.warn("User not found", {"id": user_id})
                raise NotFoundError("User not found")

            return UserOut.model_validate(user)
        except AppException:
            raise
        except Exception as e:
            self.logger.error("Failed to fetch user", {"error": str(e), "id": user_id})
            raise InternalServerError("Failed to fetch user") from e

    def create(self, db: Session, dto: UserCreate, current_user: Optional[UserToken] = None) -> UserOut:
        try:
            self.logger.info(
                "Admin creating new user" if current_user else "Public self-registration",
                {"email": dto.email, "actorId": current_user.id if current_user else None}
            )

            if self.users_repository.email_exists(db, dto.email):
                self.logger.warn("Email already exists", {"email": dto.email})
                raise ConflictError("Email already exists")

            user_data = {
                "user_name": dto.user_name,
                "email": dto.email.lower(),
                "phone": dto.phone,
                "password": self.hash_password(dto.password),
                "role": (dto.role or UserRole.NORMAL).value,
            }

            try:
                created_user = self.users_repository.create(db, user_data)
            except IntegrityError as e:
                # a concurrent insert took the email after the check above
                db.rollback()
                self.logger.warn("Email already exists", {"email": dto.email})
                raise ConflictError("Email already exists") from e

            self.logger.info("User created successfully", {"id": created_user.id})
            return UserOut.model_validate(created_user)
        except AppException:
            raise
        except Exception as e:
            db.rollback()
            self.logger.error("Failed to create user", {"error": str(e), "email": dto.email})
            raise InternalServerError("Failed to create user") from e

    def find_by_email_with_password(self, db: Session, email: str) -> Optional[Users]:
        return self.users_repository.find_by_email(db, email)

    def update(self, db: Session, user_id: UUID, dto: UserUpdate, current_user: UserToken) -> UserOut:
        try:
            self.logger.info("Updating user", {"id": user_id, "actor": current_user.id})

            ensure_owner_or_admin(
                current_user, user_id, "You are not allowed to update this profile")

            update_data = dto.model_dump(exclude_unset=True, exclude_none=True)

            if "role" in update_data and not current_user.is_admin:
                raise ForbiddenError("You are not allowed to change the role")

            existing_user = self.users_repository.find_by_id(db, user_id)
            if not existing_user:
                self.logger.warn("User not found for update", {"id": user_id})
                raise NotFoundError("User not found")

            if "email" in update_data:
                update_data["email"] = update_data["email"].lower()
                if self.users_repository.email_exists(db, update_data["email"], exclude_id=user_id):
                    raise ConflictError("Email already exists")
            if "password" in update_data:
                update_data["password"] = self.hash_password(update_data["password"])
            if "role" in update_data:
                update_data["role"] = UserRole(update_data["role"]).value

            try:
                updated_user = self.users_repository.update_by_id(db, user_id, update_data)
            except IntegrityError as e:
                db.rollback()
                raise ConflictError("Email already exists") from e

            if not updated_user:
                raise NotFoundError("User not found")

            self.logger.info("User updated successfully", {"id": user_id})
            return UserOut.model_validate(updated_user)
        except AppException:
            raise
        except Exception as e:
            db.rollback()
            self.logger.error("Failed to update user", {"error": str(e), "id": user_id})
            raise InternalServerError("Failed to update user") from e

    def delete(self, db: Session, user_id: UUID, current_user: UserToken) -> dict:
        try:
            self.logger.info("Deleting user", {"id": user_id, "actor": current_user.id})

            ensure_owner_or_admin(
                current_user, user_id, "You are not allowed to delete this profile")

            deleted_user = self.users_repository.delete_by_id(db, user_id)
            if not deleted_user:
                self.logger.warn("User not found for deletion", {"id": user_id})
                raise NotFoundError("User not found")

            self.logger.info("User deleted successfully", {"id": user_id})
            return {"message": "User deleted successfully"}
        except AppException:
            raise
        except Exception as e:
            db.rollback()
            self.logger.error("Failed to delete user", {"error": str(e), "id": user_id})
            raise InternalServerError("Failed to delete user") from e
