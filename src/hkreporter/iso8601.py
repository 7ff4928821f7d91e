from __future__ import annotations

import re

from datetime import datetime, timedelta, timezone
from typing import Self

from hkreporter.settings import get_settings


ISO8601_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>Z|[+-]\d{2}:?\d{2})$",
    re.ASCII,
)


class Iso8601DateFormatter:
    """Bidirectional ISO-8601 internet date-time formatter.

    Encode: datetime → String
        Always rendered in UTC with a literal `Z`, e.g. `2023-07-22T08:26:40Z`.
        Naive datetimes are taken to already be in UTC.
    Decode: String → datetime
        Only the extended format is accepted, with `Z` or a `+HH:MM` / `+HHMM`
        offset. The result is a timezone-aware datetime in UTC.

    Parameters:
        fractional_seconds (bool): Emit milliseconds when encoding and accept a
            fractional part when decoding. When disabled, encoding truncates to
            whole seconds and decoding rejects any fractional part.
    """

    def __init__(self, fractional_seconds: bool = False):
        self.fractional_seconds = fractional_seconds

    @classmethod
    def from_settings(cls) -> Self:
        """Create a formatter configured from the current settings."""
        return cls(fractional_seconds=get_settings().date.fractional_seconds)

    def encode(self, value: datetime) -> str:
        """Encode a datetime into ISO-8601 text."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)

        text = (
            f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
            f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        )
        if self.fractional_seconds:
            text += f".{value.microsecond // 1000:03d}"
        return text + "Z"

    def decode(self, text: str) -> datetime:
        """Decode ISO-8601 text into an aware datetime, raising ValueError on malformed input."""
        match = ISO8601_PATTERN.fullmatch(text)
        if match is None:
            raise ValueError(f"Invalid ISO8601 date string: {text}")

        fraction = match["fraction"]
        if fraction is not None and not self.fractional_seconds:
            raise ValueError(f"Invalid ISO8601 date string: {text} (fractional seconds are not enabled)")

        microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0

        try:
            value = datetime(
                int(match["year"]), int(match["month"]), int(match["day"]),
                int(match["hour"]), int(match["minute"]), int(match["second"]),
                microsecond,
                tzinfo=self._parse_offset(match["offset"]),
            ).astimezone(timezone.utc)
        except (ValueError, OverflowError) as exc:
            raise ValueError(f"Invalid ISO8601 date string: {text} ({exc})") from exc

        return value

    def _parse_offset(self, offset: str) -> timezone:
        if offset == "Z":
            return timezone.utc

        sign = -1 if offset[0] == "-" else 1
        digits = offset[1:].replace(":", "")
        hours, minutes = int(digits[:2]), int(digits[2:])
        if hours > 23 or minutes > 59:
            raise ValueError(f"Invalid UTC offset: {offset}")
        return timezone(sign * timedelta(hours=hours, minutes=minutes))
