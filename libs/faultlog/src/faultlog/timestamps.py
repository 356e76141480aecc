"""Millisecond timestamp keys in the fixed ``yyyyMMddHHmmssSSS`` pattern."""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import datetime, timedelta

from faultlog.errors import MalformedIdError

TIMESTAMP_PATTERN = "yyyyMMddHHmmssSSS"
TIMESTAMP_WIDTH = len(TIMESTAMP_PATTERN)

_RECORD_NAME_RE = re.compile(rf"\d{{{TIMESTAMP_WIDTH}}}")

Clock = Callable[[], datetime]

ONE_MILLISECOND = timedelta(milliseconds=1)


def system_clock() -> datetime:
    """Return the current local time."""
    return datetime.now()


def format_timestamp(moment: datetime) -> str:
    """Render *moment* as a 17-digit ``yyyyMMddHHmmssSSS`` string.

    >>> format_timestamp(datetime(2026, 10, 17, 9, 30, 15, 123456))
    '20261017093015123'
    """
    return moment.strftime("%Y%m%d%H%M%S") + f"{moment.microsecond // 1000:03d}"


def parse_timestamp(value: str | int) -> datetime:
    """Parse a ``yyyyMMddHHmmssSSS`` key back into a naive local datetime.

    Raises:
        MalformedIdError: If *value* is not exactly 17 digits or does not
            denote a real calendar time.
    """
    text = str(value)
    if not is_record_name(text):
        raise MalformedIdError(f"'{text}' does not match the {TIMESTAMP_PATTERN} pattern")
    # Slice fixed-width fields; strptime accepts single-digit months here.
    try:
        return datetime(
            int(text[0:4]),
            int(text[4:6]),
            int(text[6:8]),
            int(text[8:10]),
            int(text[10:12]),
            int(text[12:14]),
            int(text[14:17]) * 1000,
        )
    except ValueError as exc:
        raise MalformedIdError(f"'{text}' is not a valid {TIMESTAMP_PATTERN} timestamp") from exc


def is_record_name(name: str) -> bool:
    """Return True if *name* has the shape of a record file name."""
    return _RECORD_NAME_RE.fullmatch(name) is not None
