"""Flexible date parsing shared by request models."""

from datetime import date, datetime
from typing import Any, Optional

from dateutil import parser


def parse_flexible_date(v: Any) -> Optional[date]:
    """Parse a date from an ISO 8601 string or a Unix timestamp (milliseconds)."""
    if v is None:
        return None

    if isinstance(v, datetime):
        return v.date()

    if isinstance(v, date):
        return v

    if isinstance(v, str):
        # Try ISO 8601 formats first
        try:
            return parser.isoparse(v).date()
        except (ValueError, TypeError):
            pass

        # Numeric string, timestamp in milliseconds
        try:
            ms = int(v)
            return datetime.fromtimestamp(ms / 1000.0).date()
        except (ValueError, TypeError, OverflowError, OSError):
            pass

        raise ValueError(f"Unable to parse date string: {v}")

    if isinstance(v, bool):
        raise ValueError(f"Unsupported date type: {type(v)}")

    if isinstance(v, (int, float)):
        try:
            return datetime.fromtimestamp(int(v) / 1000.0).date()
        except (ValueError, OverflowError, OSError):
            raise ValueError(f"Timestamp out of range: {v}")

    raise ValueError(f"Unsupported date type: {type(v)}")
