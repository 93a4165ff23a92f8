from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import ValidationError
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import get_auth_db as get_db
from shared.core.exceptions import ForbiddenError, UnauthenticatedError
from shared.core.schemas import UserToken
from shared.crud.users_crud import UsersRepository
from shared.models.users import Users
from shared.utils.enums import UserRole

# auto_error=False so a missing header gets our own 401 envelope
security = HTTPBearer(auto_error=False)

users_repository = UsersRepository()


def build_claims(user: Users) -> dict:
    return {
        "id": str(user.id),
        "email": user.email,
        "userName": user.user_name,
        "role": user.role,
    }


def create_access_token(data: dict, expires_minutes: Optional[int] = None) -> str:
    payload = data.copy()
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.JWT_EXPIRE_MINUTES)
    payload["exp"] = expires

    return jwt.encode(payload, settings.JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> UserToken:
    """Verify signature and expiry of a JWT and return its claims."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        return UserToken(**payload)
    except (JWTError, ValidationError):
        raise UnauthenticatedError("Access denied, invalid token")


def resolve_caller(db: Session, claims: UserToken) -> Users:
    """Tokens may outlive their account, so re-check the user still exists."""
    user = users_repository.find_by_id(db, claims.id)
    if not user:
        raise UnauthenticatedError("Access denied, user not found")
    return user


def authorize_role(caller: UserToken, required_roles: Iterable[UserRole]):
    required_roles = list(required_roles)
    if required_roles and caller.role not in required_roles:
        raise ForbiddenError("Access denied, insufficient permissions")


def is_owner_or_admin(caller: UserToken, owner_id) -> bool:
    if caller.is_admin:
        return True
    return owner_id is not None and str(owner_id) == str(caller.id)


def ensure_owner_or_admin(caller: UserToken, owner_id, message: str = "Access denied"):
    if not is_owner_or_admin(caller, owner_id):
        raise ForbiddenError(message)


def validate_current_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> UserToken:
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Access denied, no token provided")

    claims = verify_token(credentials.credentials)
    user = resolve_caller(db, claims)

    # role on the record wins over the role baked into the token
    claims.role = UserRole(user.role)
    request.state.user_id = str(claims.id)
    return claims


def require_roles(*roles: UserRole):
    def checker(current_user: UserToken = Depends(validate_current_token)) -> UserToken:
        authorize_role(current_user, roles)
        return current_user

    return checker


allow_admin = require_roles(UserRole.ADMIN)
