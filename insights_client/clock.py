"""Clock used to timestamp connector logs."""

from __future__ import annotations

import datetime as dt
import typing as typ

Clock: typ.TypeAlias = typ.Callable[[], dt.datetime]


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp."""
    return dt.datetime.now(dt.UTC)


def as_utc(value: dt.datetime) -> dt.datetime:
    """Return ``value`` as an aware UTC timestamp.

    Naive values are taken to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.UTC)
    return value.astimezone(dt.UTC)
