"""
Utility functions for API responses
"""
from typing import Any, Optional, List, Dict
from fastapi import status
from fastapi.responses import JSONResponse
from blog_api.schemas.common import PaginationMeta


def error_response(
    error: str,
    detail: Optional[Any] = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """
    Create error response

    Args:
        error: Error message
        detail: Optional error details (field name or validation errors)
        status_code: HTTP status code
        headers: Extra response headers

    Returns:
        JSONResponse object
    """
    response = {
        "ok": False,
        "error": error
    }

    if detail is not None:
        response["detail"] = detail

    return JSONResponse(content=response, status_code=status_code, headers=headers)


def paginated_response(
    data: List[Any],
    page: int,
    per_page: int,
    total: int
) -> Dict:
    """
    Create paginated response

    Args:
        data: List of items
        page: Current page number
        per_page: Items per page
        total: Total number of items

    Returns:
        Dict with data and pagination meta
    """
    total_pages = (total + per_page - 1) // per_page  # Ceiling division

    meta = PaginationMeta(
        current_page=page,
        per_page=per_page,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1
    )

    return {
        "ok": True,
        "data": data,
        "meta": meta.model_dump()
    }
