from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import PydanticCustomError, core_schema


class LocalizedName:
    """
    A name given either as a single string, or as a map from language code
    to the name in that language.

    This implements the multilingual strings of the Readium Web Publication
    Manifest. Only one of the two forms is ever populated, and the value is
    serialized back in the same form it was created with.
    https://github.com/readium/webpub-manifest/blob/master/schema/language-map.schema.json
    """

    __slots__ = ("_single_string", "_multi_string")

    def __init__(self, value: str | Mapping[str, str] = "") -> None:
        """
        :param value: Either a string or a mapping with language codes as keys
            and translations as values.
        """
        self._single_string: str = ""
        self._multi_string: dict[str, str] = {}

        if isinstance(value, str):
            self._single_string = value
        else:
            self._multi_string = dict(value)

    @property
    def single_string(self) -> str:
        return self._single_string

    @property
    def multi_string(self) -> Mapping[str, str]:
        return self._multi_string

    @property
    def is_multi(self) -> bool:
        return len(self._multi_string) > 0

    def get(self, language: str | None = None) -> str | None:
        """
        Return the name in the given language.

        With no language, the plain string is returned, or the first
        translation if the name was given as a map.
        """
        if language is None:
            return str(self)
        return self._multi_string.get(language)

    def _serialize(self) -> str | dict[str, str]:
        if self.is_multi:
            return dict(self._multi_string)
        return self._single_string

    @classmethod
    def _validate(cls, value: Any) -> LocalizedName:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, Mapping):
            for language, translation in value.items():
                if not isinstance(language, str) or not isinstance(translation, str):
                    raise PydanticCustomError(
                        "invalid_localized_name_translation",
                        "Translation for '{language}' should be a valid string",
                        {"language": str(language)},
                    )
            return cls(value)
        raise PydanticCustomError(
            "invalid_localized_name",
            "Input should be a valid string or a map of language codes to strings",
        )

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: type[Any], handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        Validate the value as 'str | dict[str, str]', inspecting the kind of
        the value before deciding which form to populate.
        """
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                cls._serialize, when_used="json"
            ),
        )

    def __str__(self) -> str:
        if self.is_multi:
            return next(iter(self._multi_string.values()))
        return self._single_string

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {json.dumps(self._serialize())}>"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, LocalizedName):
            return (
                self._single_string == other._single_string
                and self._multi_string == other._multi_string
            )
        if isinstance(other, str):
            return not self.is_multi and self._single_string == other
        if isinstance(other, Mapping):
            return self.is_multi and self._multi_string == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._single_string, frozenset(self._multi_string.items())))
