"""Entry naming - pure functions, no I/O beyond reading the clock."""

from datetime import datetime, timezone
from typing import Collection

NAME_FORMAT = "%Y%m%d-%H%M%S"


def entry_name(now: datetime | None = None) -> str:
    """Name for an entry created at `now` (UTC, second resolution)."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime(NAME_FORMAT)


def unique_entry_name(existing: Collection[str], now: datetime | None = None) -> str:
    """
    Name for a new entry that does not clash with `existing`.

    Two entries created within the same second get "-002", "-003", ...
    appended to the second one onwards, so a name is never silently
    overwritten. The suffix is zero-padded so names keep sorting in creation
    order.
    """
    base = entry_name(now)
    if base not in existing:
        return base

    n = 2
    while f"{base}-{n:03d}" in existing:
        n += 1
    return f"{base}-{n:03d}"


def is_entry_name(name: str) -> bool:
    """Whether a repository file name refers to an entry (not metadata)."""
    if not name or name.startswith("."):
        return False
    return "/" not in name and "\\" not in name
