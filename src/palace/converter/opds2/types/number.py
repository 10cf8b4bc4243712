import math
from typing import Annotated, Any

from pydantic import BeforeValidator
from pydantic_core import PydanticCustomError


def _as_number(value: Any) -> int | float:
    # bool is a subclass of int, but a JSON true is not a number.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError("invalid_number", "Input should be a valid number")
    if not math.isfinite(value):
        raise PydanticCustomError("invalid_number", "Input should be a finite number")
    return value


def _truncate_count(value: Any) -> int:
    """
    JSON doesn't distinguish between integers and floats, so every number on
    the wire is read as a number and count-like values are truncated towards
    zero. 3.9 becomes 3, -3.9 becomes -3.
    """
    return int(_as_number(value))


Count = Annotated[int, BeforeValidator(_truncate_count)]
"""
An integer count (width, height, bitrate, number of items...). Any JSON
number is accepted and truncated towards zero.
"""

Number = Annotated[float, BeforeValidator(_as_number)]
"""
A JSON number (price, position, duration). Strings and booleans are rejected.
"""
