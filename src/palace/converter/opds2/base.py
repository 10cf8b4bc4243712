from __future__ import annotations

from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    SerializerFunctionWrapHandler,
    model_serializer,
)


def is_empty(value: Any) -> bool:
    """
    Is this a serialized value that should be left out of an OPDS 2 document?

    Empty strings, lists and objects, None, False and zero are all treated
    as "not set".
    """
    if value is None or value is False:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return False


class BaseOpdsModel(BaseModel):
    """Base class for OPDS 2 models."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
    )

    always_present: ClassVar[frozenset[str]] = frozenset()
    """
    Serialized field names that are written out even when their value is empty.
    Every other field is omitted from the output when it is empty.
    """

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: SerializerFunctionWrapHandler) -> Any:
        data = handler(self)
        if not isinstance(data, dict):
            return data
        return {
            key: value
            for key, value in data.items()
            if key in self.always_present or not is_empty(value)
        }
