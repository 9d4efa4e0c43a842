from datetime import datetime, timezone
from typing import Any

from dateutil import parser as date_parser


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a datetime or date string into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        try:
            dt = date_parser.parse(value)
        except (ValueError, OverflowError, TypeError):
            return None
    else:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def print_summary(title: str, counts: dict[str, int]) -> None:
    """Print processing summary."""
    print(f"\n{'=' * 60}")
    print(f"[{datetime.now()}] {title}")
    print(f"{'=' * 60}")
    for label, count in counts.items():
        print(f"{label + ':':<18}{count}")
    print(f"{'=' * 60}\n")
