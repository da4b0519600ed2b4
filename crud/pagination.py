# crud/pagination.py
import math

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def page_window(page: int, limit: int):
    """(offset, limit) for a 1-based page."""
    page = max(page or DEFAULT_PAGE, 1)
    limit = min(max(limit or DEFAULT_LIMIT, 1), MAX_LIMIT)
    return (page - 1) * limit, limit


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }
