# sitebuilder/utils/pagination.py
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Type, TypedDict

from sqlalchemy.orm import Query
from sqlalchemy.sql import and_, or_

from sitebuilder.domain.errors import ValidationError

MAX_PAGE_SIZE = 100


class CursorMeta(TypedDict):
    has_more: bool
    next_cursor: Optional[str]
    prev_cursor: Optional[str]


def _positive_int(args: Mapping[str, Any], name: str, default: int) -> int:
    raw = args.get(name, default)
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name} must be an integer") from exc
    if value <= 0:
        raise ValidationError(f"{name} must be greater than zero")
    return value


def parse_offset_args(args: Mapping[str, Any], *, default_per_page: int = 20) -> Tuple[int, int]:
    """(page, per_page) from query args; per_page is capped at MAX_PAGE_SIZE."""
    page = _positive_int(args, "page", 1)
    per_page = min(_positive_int(args, "per_page", default_per_page), MAX_PAGE_SIZE)
    return page, per_page


def parse_limit(args: Mapping[str, Any], *, default: int = 20) -> int:
    return min(_positive_int(args, "limit", default), MAX_PAGE_SIZE)


def paginate_sequence(items: Sequence[Any], *, page: int, per_page: int) -> List[Any]:
    """Slice of an already ordered sequence for a 1-based page number."""
    start = (page - 1) * per_page
    return list(items[start:start + per_page])


def encode_cursor(created_at: datetime, row_id: Any) -> str:
    """
    Format: ISO8601|<id>

    Human-readable so a cursor can be inspected in logs.
    """
    if not isinstance(created_at, datetime) or row_id is None:
        raise ValueError("created_at and row_id are required to encode cursor")

    return f"{created_at.isoformat()}|{row_id}"


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    if not cursor or "|" not in cursor:
        raise ValidationError("Invalid cursor format")

    ts_str, row_id = cursor.split("|", 1)
    try:
        return datetime.fromisoformat(ts_str), row_id
    except ValueError as exc:
        raise ValidationError("Invalid cursor format") from exc


def paginate_cursor(
    query: Query,
    *,
    model: Type[Any],
    cursor: Optional[str],
    limit: int,
) -> tuple[list[Any], CursorMeta]:
    """
    Newest-first cursor pagination over ``model``.

    Ordering is always created_at DESC, id DESC; the cursor names the last
    row of the previous page. One extra row is fetched to detect whether
    another page exists.
    """
    if limit <= 0:
        raise ValidationError("Limit must be greater than zero")

    if cursor:
        cursor_ts, cursor_id = decode_cursor(cursor)
        query = query.filter(
            or_(
                model.created_at < cursor_ts,
                and_(
                    model.created_at == cursor_ts,
                    model.id < cursor_id,
                ),
            )
        )

    rows = (
        query.order_by(model.created_at.desc(), model.id.desc())
        .limit(limit + 1)
        .all()
    )

    has_more = len(rows) > limit
    items = rows[:limit]

    next_cursor: Optional[str] = None
    if has_more:
        last = items[-1]
        next_cursor = encode_cursor(last.created_at, last.id)

    return items, {
        "has_more": has_more,
        "next_cursor": next_cursor,
        "prev_cursor": cursor,
    }
