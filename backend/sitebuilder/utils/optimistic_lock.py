from datetime import datetime, timezone
from typing import Optional
from dateutil.parser import parse
from flask import request
from sitebuilder.domain.errors import ValidationError


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def is_modified_since(server_ts: datetime, client_ts: datetime) -> bool:
    """
    HTTP dates carry whole seconds, so the stored timestamp is truncated
    before comparing; a client echoing Last-Modified never conflicts with
    the write it read.
    """
    server_ts = normalize_ts(server_ts).replace(microsecond=0)
    client_ts = normalize_ts(client_ts).replace(microsecond=0)
    return server_ts > client_ts


def if_unmodified_since() -> Optional[datetime]:
    """
    Reads the If-Unmodified-Since header of the current request.
    Returns None when no optimistic lock was requested.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts:
        return None  # No optimistic lock requested

    try:
        return normalize_ts(parse(client_ts))
    except (ValueError, OverflowError) as exc:
        raise ValidationError("Invalid If-Unmodified-Since header") from exc
