"""Utility functions for Sakuin."""

import math
import os
import posixpath
from bisect import bisect_right
from datetime import datetime
from urllib.parse import quote, unquote_to_bytes

BYTE_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB")

SECOND = 1
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
MONTH = 30 * DAY
YEAR = 12 * MONTH
LONG_TIME = 37 * YEAR

# (upper bound in seconds, format, divisor); the first bound above the
# elapsed time wins.
TIME_MAGNITUDES = (
    (SECOND, "now", 1),
    (2 * SECOND, "1 second {label}", 1),
    (MINUTE, "{count} seconds {label}", SECOND),
    (2 * MINUTE, "1 minute {label}", 1),
    (HOUR, "{count} minutes {label}", MINUTE),
    (2 * HOUR, "1 hour {label}", 1),
    (DAY, "{count} hours {label}", HOUR),
    (2 * DAY, "1 day {label}", 1),
    (WEEK, "{count} days {label}", DAY),
    (2 * WEEK, "1 week {label}", 1),
    (MONTH, "{count} weeks {label}", WEEK),
    (2 * MONTH, "1 month {label}", 1),
    (YEAR, "{count} months {label}", MONTH),
    (18 * MONTH, "1 year {label}", 1),
    (2 * YEAR, "2 years {label}", 1),
    (LONG_TIME, "{count} years {label}", YEAR),
    (math.inf, "a long while {label}", 1),
)
_TIME_BOUNDS = [bound for bound, _, _ in TIME_MAGNITUDES]


def clean_request_path(path: str) -> str:
    """Normalize an untrusted URL path into an absolute, dot-free path.

    Leading slashes are collapsed before normalizing so that ``..``
    segments can never climb above ``/``.
    """
    return posixpath.normpath("/" + path.lstrip("/"))


def display_name(name: str) -> str:
    """Make an on-disk name printable, replacing bytes that are not UTF-8."""
    return os.fsencode(name).decode("utf-8", "replace")


def url_path(path: str) -> str:
    """Percent-encode a filesystem path for a link, byte for byte."""
    return quote(os.fsencode(path))


def path_from_url(raw_path: bytes) -> str:
    """Decode a raw URL path back into a filesystem path.

    Inverse of ``url_path``: percent-escapes that are not UTF-8 come back
    as the same on-disk bytes.
    """
    return os.fsdecode(unquote_to_bytes(raw_path))


def relative_to_root(root: str, path: str) -> str:
    """Get the display path of ``path`` relative to ``root``.

    Returns ``""`` for the root itself and ``/a/b`` for anything below it.
    """
    rel = os.path.relpath(path, root)
    if rel == os.curdir:
        return ""
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        raise ValueError(f"{path!r} is outside of {root!r}")
    return "/" + rel.replace(os.sep, "/")


def human_bytes(size: int) -> str:
    """Format a byte count with base-1024 units (e.g. ``1.5 KiB``)."""
    if size < 10:
        return f"{size} B"

    value = float(size)
    for unit in BYTE_UNITS[:-1]:
        if value < 1024:
            break
        value /= 1024
    else:
        unit = BYTE_UNITS[-1]

    value = math.floor(value * 10 + 0.5) / 10
    if value < 10:
        return f"{value:.1f} {unit}"
    return f"{value:.0f} {unit}"


def human_time(then: datetime, now: datetime | None = None) -> str:
    """Format a timestamp relative to now (e.g. ``3 days ago``)."""
    if now is None:
        now = datetime.now(then.tzinfo)

    elapsed = (now - then).total_seconds()
    label = "ago"
    if elapsed < 0:
        label = "from now"
        elapsed = -elapsed

    index = min(bisect_right(_TIME_BOUNDS, elapsed), len(TIME_MAGNITUDES) - 1)
    _, fmt, divisor = TIME_MAGNITUDES[index]
    return fmt.format(count=int(elapsed // divisor), label=label)
