from pydantic import Field
from typing import Any, Generic, List, Optional, TypeVar
from uuid import UUID

from shared.utils.enums import UserRole
from shared.wrappers.api_model_wrapper import ApiModel

# Shared properties
T = TypeVar("T")


class UserToken(ApiModel):
    """Claims carried by the bearer token."""
    id: UUID
    email: str
    user_name: str
    role: UserRole
    exp: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class CommonQueryParams(ApiModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)


class PageMeta(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ImageOut(ApiModel):
    url: str
    public_id: str


class JsonOutResult(ApiModel, Generic[T]):
    success: bool = True
    message: str
    data: Optional[T] = None


class PaginatedOutResult(ApiModel, Generic[T]):
    success: bool = True
    data: List[T]
    meta: PageMeta


class ErrorOutResult(ApiModel):
    success: bool = False
    message: str
    status_code: int
    errors: Optional[List[Any]] = None


class MessageOut(ApiModel):
    message: str
