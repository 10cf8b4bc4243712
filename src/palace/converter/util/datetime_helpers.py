import datetime
from typing import overload

import pytz


def utc_now() -> datetime.datetime:
    """Get the current time in UTC.

    :return: datetime object
    """
    return datetime.datetime.now(tz=pytz.UTC)


@overload
def to_utc(dt: datetime.datetime) -> datetime.datetime: ...


@overload
def to_utc(dt: datetime.datetime | None) -> datetime.datetime | None: ...


def to_utc(dt: datetime.datetime | None) -> datetime.datetime | None:
    """This converts a naive datetime object that represents UTC into
    an aware datetime object.

    :return: datetime object, or None if `dt` was None.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=pytz.UTC)
    if dt.tzinfo == pytz.UTC:
        # Already UTC.
        return dt
    return dt.astimezone(pytz.UTC)


def parse_datetime(value: str | None) -> datetime.datetime | None:
    """Parse an RFC 3339 / ISO 8601 timestamp into an aware UTC datetime.

    Atom feeds in the wild use a trailing 'Z' and sometimes leave the time
    zone off completely, a missing zone is taken to be UTC.

    :raise ValueError: If the value is not an ISO 8601 timestamp.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if value[-1] in ("z", "Z"):
        value = value[:-1] + "+00:00"
    return to_utc(datetime.datetime.fromisoformat(value))
