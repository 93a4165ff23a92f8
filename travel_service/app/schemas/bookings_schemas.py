from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import Query
from pydantic import EmailStr, Field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.api_model_wrapper import ApiModel
from ..enum.booking_enum import BookingStatus


class ContactInfo(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20)


class BookingCreate(ApiModel):
    package_id: UUID
    contact: ContactInfo
    number_of_people: int = Field(..., ge=1)
    total_price: float = Field(..., ge=0)
    status: Optional[BookingStatus] = None


# contact is fixed at creation, so there is no contact field here
class BookingUpdate(ApiModel):
    package_id: Optional[UUID] = None
    number_of_people: Optional[int] = Field(None, ge=1)
    total_price: Optional[float] = Field(None, ge=0)
    status: Optional[BookingStatus] = None


class BookingRequest(CommonQueryParams):
    contact_id: Optional[UUID] = None
    package_id: Optional[UUID] = None
    status: Optional[BookingStatus] = None
    user_id: Optional[UUID] = None


class ContactOut(ApiModel):
    id: UUID
    name: str
    email: str
    phone: str


class BookingListItemOut(ApiModel):
    id: UUID
    user_id: UUID
    contact_id: UUID
    contact: Optional[ContactOut] = None
    package_id: UUID
    number_of_people: int
    total_price: float
    status: BookingStatus


class BookingOut(BookingListItemOut):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def as_query(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    contact_id: Optional[UUID] = Query(None, alias="contactId"),
    package_id: Optional[UUID] = Query(None, alias="packageId"),
    status: Optional[BookingStatus] = Query(None),
    user_id: Optional[UUID] = Query(None, alias="userId"),
) -> BookingRequest:
    return BookingRequest(
        page=page,
        limit=limit,
        contact_id=contact_id,
        package_id=package_id,
        status=status,
        user_id=user_id,
    )
