from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator
from pydantic_core import PydanticCustomError

from palace.converter.util.datetime_helpers import parse_datetime, to_utc


def _iso8601_datetime_before_validator(value: Any) -> Any:
    """Only ISO 8601 strings (or datetimes) are accepted.

    Pydantic would otherwise happily read a number as a unix timestamp.
    """
    if isinstance(value, datetime):
        return value

    if isinstance(value, str):
        try:
            parsed = parse_datetime(value)
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed

    raise PydanticCustomError(
        "invalid_iso8601_datetime",
        "Input should be an ISO 8601 date time string",
    )


Iso8601Datetime = Annotated[
    datetime,
    BeforeValidator(_iso8601_datetime_before_validator),
    AfterValidator(to_utc),
]
"""
A datetime given as an ISO 8601 string. Naive values are taken to be UTC.
"""
