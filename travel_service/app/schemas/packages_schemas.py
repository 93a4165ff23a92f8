import json
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import Form, Query
from pydantic import Field, field_validator

from shared.core.schemas import CommonQueryParams, ImageOut
from shared.wrappers.api_model_wrapper import ApiModel


def parse_included(value):
    """`included` arrives from multipart as a JSON array or a comma separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(parsed, list):
            return parsed
        return [str(parsed)]
    return value


class PackageBase(ApiModel):
    destination_id: UUID
    name: str = Field(..., min_length=2, max_length=100)
    description: str
    duration: int = Field(..., ge=1)
    included: List[str] = Field(default_factory=list)
    group_size: int = Field(..., ge=1)
    price: float = Field(..., ge=0)


class PackageCreate(PackageBase):

    @field_validator("included", mode="before")
    @classmethod
    def split_included(cls, v):
        return parse_included(v)

    @classmethod
    def as_form(
        cls,
        destination_id: UUID = Form(..., alias="destinationId"),
        name: str = Form(...),
        description: str = Form(...),
        duration: int = Form(...),
        included: Optional[str] = Form(None),
        group_size: int = Form(..., alias="groupSize"),
        price: float = Form(...),
    ):
        return cls.from_form(
            destination_id=destination_id,
            name=name,
            description=description,
            duration=duration,
            included=included,
            group_size=group_size,
            price=price,
        )


class PackageUpdate(ApiModel):
    destination_id: Optional[UUID] = None
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1)
    included: Optional[List[str]] = None
    group_size: Optional[int] = Field(None, ge=1)
    price: Optional[float] = Field(None, ge=0)

    @field_validator("included", mode="before")
    @classmethod
    def split_included(cls, v):
        if v is None:
            return None
        return parse_included(v)

    @classmethod
    def as_form(
        cls,
        destination_id: Optional[UUID] = Form(None, alias="destinationId"),
        name: Optional[str] = Form(None),
        description: Optional[str] = Form(None),
        duration: Optional[int] = Form(None),
        included: Optional[str] = Form(None),
        group_size: Optional[int] = Form(None, alias="groupSize"),
        price: Optional[float] = Form(None),
    ):
        values = {
            "destination_id": destination_id,
            "name": name,
            "description": description,
            "duration": duration,
            "included": included,
            "group_size": group_size,
            "price": price,
        }
        return cls.from_form(**{k: v for k, v in values.items() if v is not None})


class PackageRequest(CommonQueryParams):
    destination_id: UUID


class PackageListItemOut(ApiModel):
    id: UUID
    name: str
    description: str
    duration: int
    group_size: int
    price: float


class PackageOut(PackageListItemOut):
    destination_id: UUID
    included: List[str] = Field(default_factory=list)
    image: Optional[ImageOut] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def as_query(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    destination_id: UUID = Query(..., alias="destinationId"),
) -> PackageRequest:
    return PackageRequest(page=page, limit=limit, destination_id=destination_id)
