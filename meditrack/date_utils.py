"""Date/time formatting helpers shared by the console and the reports."""

from __future__ import annotations

from datetime import datetime, time
from typing import Optional

TIME_FORMAT = "%H:%M"
DATE_TIME_FORMAT = "%Y-%m-%d %H:%M"
DISPLAY_DATE_TIME_FORMAT = "%b %d, %Y %H:%M"
FILE_STAMP_FORMAT = "%Y%m%d_%H%M%S"


def format_time(value: Optional[time]) -> str:
    return value.strftime(TIME_FORMAT) if value else ""


def format_datetime(value: Optional[datetime]) -> str:
    return value.strftime(DATE_TIME_FORMAT) if value else ""


def parse_time(value: str) -> time:
    return datetime.strptime(value.strip(), TIME_FORMAT).time()


def parse_datetime(value: str) -> datetime:
    """Accepts 'YYYY-MM-DD HH:MM' and the ISO 'YYYY-MM-DDTHH:MM' form."""
    return datetime.strptime(value.strip().replace("T", " ", 1), DATE_TIME_FORMAT)

