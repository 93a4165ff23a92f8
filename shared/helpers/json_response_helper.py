# shared/helpers/json_response_helper.py
import math
from typing import Any, List, Optional

from shared.core.schemas import (
    ErrorOutResult, JsonOutResult, PageMeta, PaginatedOutResult)


def calculate_meta(total: int, page: int, limit: int) -> PageMeta:
    return PageMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit)
    )


def calculate_skip(page: int, limit: int) -> int:
    return (page - 1) * limit


def success_response(data: Any, message: Optional[str] = None):
    return JsonOutResult(
        success=True,
        message=message or "Operation completed successfully",
        data=data
    )


def paginated_response(items: List[Any], meta: PageMeta):
    return PaginatedOutResult(
        success=True,
        data=items,
        meta=meta
    )


def error_response(message: str, status_code: int = 400, errors: Optional[List[Any]] = None) -> dict:
    return ErrorOutResult(
        success=False,
        message=message,
        status_code=status_code,
        errors=errors
    ).model_dump(by_alias=True, exclude_none=True)
