"""Creation and update timestamp bookkeeping.

Both helpers return a new mapping and leave the input untouched. Timestamps are
ISO-8601 UTC strings with millisecond precision, e.g. ``2024-05-01T12:00:00.000Z``.
Within one process every issued timestamp is strictly later than the previous one.
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

from recstore_ddb.schema import CREATED_AT, UPDATED_AT

_last_issued: Optional[datetime] = None
_issue_lock = threading.Lock()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def current_timestamp() -> str:
    """Return the current millisecond, or 1 ms past the last one issued if the clock has not moved on."""
    global _last_issued
    now = utc_now()
    now = now.replace(microsecond=now.microsecond - now.microsecond % 1000)
    with _issue_lock:
        if _last_issued is not None and now <= _last_issued:
            now = _last_issued + timedelta(milliseconds=1)
        _last_issued = now
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_missing(value: Any) -> bool:
    return value is None or value == ""


def with_timestamps_if_missing(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Fill ``createdAt``/``updatedAt`` independently, keeping caller-supplied values.

    A single instant is taken per call so fields generated together are equal.
    """
    timestamp = current_timestamp()
    stamped = dict(record)
    for field in (CREATED_AT, UPDATED_AT):
        if is_missing(stamped.get(field)):
            stamped[field] = timestamp
    return stamped


def with_refreshed_timestamp(record: Mapping[str, Any]) -> Dict[str, Any]:
    return {**record, UPDATED_AT: current_timestamp()}
