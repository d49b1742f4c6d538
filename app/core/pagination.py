from pydantic import BaseModel
from typing import Tuple


class Pagination(BaseModel):
    page: int
    limit: int
    hasMore: bool


def page_bounds(page: int, limit: int) -> Tuple[int, int]:
    """Inclusive range bounds for a 1-based page"""
    offset = (page - 1) * limit
    return offset, offset + limit - 1


def build_pagination(page: int, limit: int, returned: int) -> Pagination:
    # A full page means there may be more rows
    return Pagination(page=page, limit=limit, hasMore=returned == limit)
