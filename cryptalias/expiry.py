"""Expiry enforcement for resolved addresses.

A resolved address is only valid while its `expires` instant is strictly in
the future. There is no clock-skew allowance: a payload expiring exactly
now is rejected.
"""

import re
from datetime import datetime, timezone
from typing import Any, Optional

from .exceptions import ExpiredError, InvalidExpiryError, MissingExpiryError

# Fractional seconds of any precision (Go emits nanoseconds)
_FRACTION_RE = re.compile(r"\.(\d+)")


def _parse_rfc3339(timestamp: str) -> Optional[datetime]:
    """Parse an RFC3339 timestamp to an aware datetime, or None if invalid."""
    ts = timestamp.strip()
    if ts[-1:] in ("Z", "z"):
        ts = ts[:-1] + "+00:00"
    # fromisoformat only understands up to microseconds
    ts = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), ts, count=1)
    try:
        parsed = datetime.fromisoformat(ts)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_expires(value: Any) -> datetime:
    """Parse an `expires` payload value.

    Raises:
        MissingExpiryError: Value absent or blank.
        InvalidExpiryError: Value is not an ISO-8601/RFC-3339 timestamp.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingExpiryError()
    if not isinstance(value, str):
        raise InvalidExpiryError(repr(value))

    parsed = _parse_rfc3339(value)
    if parsed is None:
        raise InvalidExpiryError(value)
    return parsed


def enforce_expiry(value: Any, now: Optional[datetime] = None) -> datetime:
    """Reject a payload whose expiry is not strictly after `now`.

    Args:
        value: The payload's `expires` field.
        now: Current instant (defaults to datetime.now(timezone.utc)).
            A naive value is taken as UTC.

    Returns:
        The parsed expiry instant.

    Raises:
        MissingExpiryError, InvalidExpiryError, ExpiredError
    """
    expires = parse_expires(value)

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if not expires > now:
        raise ExpiredError(
            f"resolved address has expired: expires={expires.isoformat()}, "
            f"now={now.isoformat()}"
        )
    return expires
