from shared.helpers.json_response_helper import (
    calculate_meta, calculate_skip, error_response, paginated_response, success_response)
from shared.wrappers.api_model_wrapper import deep_clean


def test_calculate_meta_rounds_pages_up():
    meta = calculate_meta(total=15, page=1, limit=10)

    assert meta.model_dump(by_alias=True) == {
        "page": 1, "limit": 10, "total": 15, "totalPages": 2}


def test_calculate_meta_exact_and_empty():
    assert calculate_meta(total=20, page=2, limit=10).total_pages == 2
    assert calculate_meta(total=0, page=1, limit=10).total_pages == 0


def test_calculate_skip():
    assert calculate_skip(1, 10) == 0
    assert calculate_skip(3, 5) == 10


def test_success_envelope_default_message():
    body = success_response({"id": 1}).model_dump(by_alias=True)

    assert body == {
        "success": True,
        "message": "Operation completed successfully",
        "data": {"id": 1},
    }


def test_paginated_envelope():
    body = paginated_response([1, 2], calculate_meta(2, 1, 10)).model_dump(by_alias=True)

    assert body["success"] is True
    assert body["data"] == [1, 2]
    assert body["meta"]["totalPages"] == 1


def test_error_envelope_uses_camel_case_and_skips_missing_errors():
    assert error_response("Booking not found", 404) == {
        "success": False,
        "message": "Booking not found",
        "statusCode": 404,
    }


def test_deep_clean_strips_and_blanks():
    cleaned = deep_clean({
        "name": "  Bali\u200b ",
        "tags": ["  a ", "   "],
        "nested": {"note": ""},
        "count": 3,
    })

    assert cleaned == {"name": "Bali", "tags": ["a", None], "nested": {"note": None}, "count": 3}
