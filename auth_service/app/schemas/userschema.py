from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import Query
from pydantic import EmailStr, Field

from shared.core.schemas import CommonQueryParams
from shared.utils.enums import UserRole
from shared.wrappers.api_model_wrapper import ApiModel


# Shared properties
class UserBase(ApiModel):
    user_name: str = Field(..., max_length=150)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)


class UserCreate(UserBase):
    raw_fields = frozenset({"password"})

    password: str = Field(..., min_length=8)
    role: Optional[UserRole] = None


class UserUpdate(ApiModel):
    raw_fields = frozenset({"password"})

    user_name: Optional[str] = Field(None, max_length=150)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    password: Optional[str] = Field(None, min_length=8)
    role: Optional[UserRole] = None


class UserRequest(CommonQueryParams):
    user_name: Optional[str] = None
    email: Optional[str] = None


# For reading a user (response model), password never leaves the service
class UserOut(ApiModel):
    id: UUID
    user_name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    is_account_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# dependency to convert query string → Pydantic model
def as_query(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    user_name: Optional[str] = Query(None, alias="userName"),
    email: Optional[str] = Query(None),
) -> UserRequest:
    return UserRequest(
        page=page,
        limit=limit,
        user_name=user_name,
        email=email,
    )
