import re
from typing import Any, ClassVar, FrozenSet

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from pydantic.alias_generators import to_camel, to_snake

INVISIBLE_CHARS_PATTERN = re.compile(
    r"[\u200b-\u200f\u202a-\u202e\u2066-\u2069\ufeff]")


def deep_clean(value: Any):
    """Recursively strip strings and invisible chars, turning blank strings into None."""

    # Handle dictionaries
    if isinstance(value, dict):
        return {k: deep_clean(v) for k, v in value.items()}

    # Handle lists
    if isinstance(value, list):
        return [deep_clean(v) for v in value]

    # Handle strings
    if isinstance(value, str):
        cleaned = INVISIBLE_CHARS_PATTERN.sub("", value).strip()
        return None if cleaned == "" else cleaned

    return value


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in python; reads ORM rows directly."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    # fields passed through untouched, e.g. credentials
    raw_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def clean_input(cls, values):
        if isinstance(values, dict):
            return {
                k: v if to_snake(k) in cls.raw_fields else deep_clean(v)
                for k, v in values.items()
            }
        return values

    @classmethod
    def from_form(cls, **values):
        """Build from multipart fields; failures surface as request validation errors (422)."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise RequestValidationError(
                [{**err, "loc": ("body", *err["loc"])} for err in e.errors()]) from e
