# sitebuilder/normalizers/pagination.py
from typing import Any, Callable, Dict, List, Optional

from sitebuilder.utils.pagination import CursorMeta


def normalize_pagination(
    items: List[Any],
    normalize_fn: Callable[[Any], Dict[str, Any]],
    *,
    key: str = "items",
    cursor: Optional[CursorMeta] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    total: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Paginated list response: {<key>: [...], "pagination": {...}}.

    Audit rows use cursor pagination; the project catalogue uses page
    numbers. Pass one or the other.
    """
    response: Dict[str, Any] = {
        key: [normalize_fn(item) for item in items],
    }

    if cursor is not None:
        response["pagination"] = dict(cursor)
        return response

    if page is not None and per_page is not None:
        response["pagination"] = {
            "page": page,
            "per_page": per_page,
        }

        if total is not None:
            response["pagination"]["total"] = total
            response["pagination"]["total_pages"] = (
                (total + per_page - 1) // per_page
            )

    return response
