"""Shared utilities used across the booking client."""

import re
from datetime import date, datetime, timezone
from typing import Optional


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("98200 12345")
        '9820012345'
        >>> normalize_phone("+91 (982) 001-2345")
        '+919820012345'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def compute_age(dob: str, today: Optional[date] = None) -> int:
    """Whole years between ``dob`` (YYYY-MM-DD) and ``today``.

    The year difference is reduced by one when the birthday has not
    come around yet in the current year.

    Raises:
        ValueError: If ``dob`` is not a valid YYYY-MM-DD date.
    """
    birth = datetime.strptime(dob.strip(), "%Y-%m-%d").date()
    today = today or date.today()
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def split_resource_path(path: str) -> tuple[str, Optional[str]]:
    """Split ``/collection/id`` into (``/collection``, ``id``).

    Paths without an id segment return ``None`` for the id.

    Examples:
        >>> split_resource_path("/bookings/17")
        ('/bookings', '17')
        >>> split_resource_path("/settings")
        ('/settings', None)
    """
    parts = [p for p in path.split("/") if p]
    if not parts:
        return "/", None
    base = "/" + parts[0]
    if len(parts) == 1:
        return base, None
    return base, parts[-1]
