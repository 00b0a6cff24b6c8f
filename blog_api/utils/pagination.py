"""
Pagination utilities
"""
from fastapi import Depends, Query
from sqlalchemy.orm import Query as SAQuery
from typing import Tuple, List, Any, Optional

from blog_api.core.config import Settings
from blog_api.core.dependencies import get_settings


def paginate(
    query: SAQuery,
    page: int = 1,
    per_page: Optional[int] = None
) -> Tuple[List[Any], int]:
    """
    Slice a query into one page

    Args:
        query: SQLAlchemy query object
        page: Page number (1-indexed)
        per_page: Items per page, None returns every row

    Returns:
        Tuple of (items, total_count)
    """
    total = query.count()
    if per_page is None:
        return query.all(), total

    offset = (max(1, page) - 1) * per_page
    items = query.limit(per_page).offset(offset).all()

    return items, total


def get_pagination_params(
    page: int,
    per_page: Optional[int],
    settings: Settings
) -> Tuple[int, int]:
    """
    Clamp requested page and size to the configured limits

    A missing per_page falls back to DEFAULT_PAGE_SIZE; anything above
    MAX_PAGE_SIZE is cut down to it.
    """
    if per_page is None:
        per_page = settings.DEFAULT_PAGE_SIZE

    page = max(1, page)
    per_page = min(max(1, per_page), settings.MAX_PAGE_SIZE)

    return page, per_page


def pagination_params(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    settings: Settings = Depends(get_settings)
) -> Tuple[int, int]:
    """Route dependency resolving ?page=&per_page= against the app settings"""
    return get_pagination_params(page, per_page, settings)
