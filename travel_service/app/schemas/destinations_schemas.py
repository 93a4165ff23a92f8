from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import Form, Query
from pydantic import Field

from shared.core.schemas import CommonQueryParams, ImageOut
from shared.wrappers.api_model_wrapper import ApiModel


class DestinationBase(ApiModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=3)


class DestinationCreate(DestinationBase):

    @classmethod
    def as_form(
        cls,
        name: str = Form(...),
        description: str = Form(...),
    ):
        return cls.from_form(name=name, description=description)


class DestinationUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, min_length=3)

    @classmethod
    def as_form(
        cls,
        name: Optional[str] = Form(None),
        description: Optional[str] = Form(None),
    ):
        values = {"name": name, "description": description}
        # only the fields actually sent count as set
        return cls.from_form(**{k: v for k, v in values.items() if v is not None})


class DestinationRequest(CommonQueryParams):
    name: Optional[str] = None


class DestinationListItemOut(ApiModel):
    id: UUID
    name: str
    image: Optional[ImageOut] = None
    packages_count: int = 0
    min_price: Optional[float] = None


class DestinationOut(DestinationListItemOut):
    description: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def as_query(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    name: Optional[str] = Query(None),
) -> DestinationRequest:
    return DestinationRequest(page=page, limit=limit, name=name)
