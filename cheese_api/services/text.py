"""Text helpers for listing descriptions and timestamps."""

import re
from datetime import UTC, datetime

# Longest alternatives first so "\r\n" is treated as a single line break
_LINE_BREAK = re.compile(r"(\r\n|\n\r|\n|\r)")

SHORT_DESCRIPTION_LENGTH = 40

_UNITS = [
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
]


def nl2br(text: str) -> str:
    """Insert an HTML line break before every newline in text."""
    return _LINE_BREAK.sub(r"<br />\1", text)


def truncate(text: str | None, length: int = SHORT_DESCRIPTION_LENGTH) -> str | None:
    """Return text unchanged if shorter than length, else its head plus an ellipsis."""
    if text is None or len(text) < length:
        return text
    return text[:length] + "..."


def diff_for_humans(moment: datetime, now: datetime | None = None) -> str:
    """Describe moment relative to now, e.g. "3 hours ago" or "2 days from now".

    Naive datetimes are treated as UTC (SQLite drops tzinfo on reload).
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    delta = (now - moment).total_seconds()
    suffix = "ago" if delta >= 0 else "from now"
    seconds = abs(int(delta))

    for unit, size in _UNITS:
        if seconds >= size:
            count = seconds // size
            break
    else:
        unit, count = "second", 0

    plural = "" if count == 1 else "s"
    return f"{count} {unit}{plural} {suffix}"
