import pytest
from fastapi import HTTPException

from app.core.counts import embedded_count
from app.core.errors import raise_api_error
from app.core.pagination import build_pagination, page_bounds
from tests.conftest import api_error


@pytest.mark.parametrize("code, expected", [
    ("42501", 403),
    ("PGRST116", 404),
    ("23505", 400),
    ("P0001", 400),
    ("XX000", 500),
])
def test_api_error_status_mapping(code, expected):
    with pytest.raises(HTTPException) as exc_info:
        raise_api_error(api_error(code, "remote says no"), "Failed")
    assert exc_info.value.status_code == expected


def test_server_errors_hide_remote_message():
    with pytest.raises(HTTPException) as exc_info:
        raise_api_error(api_error("XX000", "stack trace"), "Failed to fetch")
    assert exc_info.value.detail == "Failed to fetch"


def test_remote_message_on_request():
    with pytest.raises(HTTPException) as exc_info:
        raise_api_error(api_error("XX000", "Group is full"), "Failed", use_remote_message=True)
    assert exc_info.value.detail == "Group is full"


def test_http_exception_passes_through():
    original = HTTPException(status_code=404, detail="Not here")
    with pytest.raises(HTTPException) as exc_info:
        raise_api_error(original, "Failed")
    assert exc_info.value is original


def test_plain_exception_is_500():
    with pytest.raises(HTTPException) as exc_info:
        raise_api_error(RuntimeError("boom"), "Failed")
    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Failed"


def test_page_bounds():
    assert page_bounds(1, 20) == (0, 19)
    assert page_bounds(3, 10) == (20, 29)


def test_has_more_only_on_full_page():
    assert build_pagination(1, 20, 20).hasMore is True
    assert build_pagination(1, 20, 7).hasMore is False


def test_embedded_count_shapes():
    assert embedded_count([{"count": 4}]) == 4
    assert embedded_count([]) == 0
    assert embedded_count({"count": 2}) == 2
    assert embedded_count(None) == 0
