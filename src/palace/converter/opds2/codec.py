"""
Reading and writing OPDS 2 JSON documents.

Several OPDS 2 fields can take more than one shape on the wire (a relation
can be a string or a list of strings, a name can be a string or a map of
translations, a series can be a string, an object or a list...). The models in
`palace.converter.opds2.model` describe every accepted shape, the functions here
turn the pydantic validation result into the converter's own error types and
produce the canonical JSON encoding.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any, TypeVar

from pydantic import ValidationError

from palace.converter.exceptions import (
    DecodeShapeMismatch,
    MalformedJSON,
    SourceUnavailable,
)
from palace.converter.opds2.base import BaseOpdsModel
from palace.converter.opds2.model import Feed
from palace.converter.opds2.util import UNION_TAGS
from palace.converter.util.http import HTTP
from palace.converter.util.json import json_serializer, unescape_html_characters


def load_json(buff: bytes | str) -> Any:
    """
    Parse the raw JSON document, before any field level decoding is done.

    :raise MalformedJSON: If the document is not UTF-8 encoded, well-formed JSON.
    """
    if isinstance(buff, (bytes, bytearray)):
        try:
            buff = bytes(buff).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedJSON(
                f"Document is not valid UTF-8: {e.reason}", position=e.start
            ) from e

    try:
        return json.loads(buff)
    except json.JSONDecodeError as e:
        raise MalformedJSON(
            f"Document is not valid JSON: {e.msg} (line {e.lineno} column {e.colno})",
            position=e.pos,
        ) from e


def _error_path(location: Sequence[int | str]) -> str:
    return ".".join(str(part) for part in location if part not in UNION_TAGS)


ModelT = TypeVar("ModelT", bound=BaseOpdsModel)


def decode(model: type[ModelT], data: Any) -> ModelT:
    """
    Decode an already parsed JSON value into the given OPDS 2 model.

    :raise DecodeShapeMismatch: If any value in the document doesn't have one of
        the shapes accepted for its field.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodeShapeMismatch(
            [(_error_path(error["loc"]), error["msg"]) for error in e.errors()]
        ) from e


def parse_buffer(buff: bytes | str) -> Feed:
    """Parse an OPDS 2 feed from a buffer, usually read from a file or a URL."""
    return decode(Feed, load_json(buff))


def parse_file(file_path: str | Path) -> Feed:
    """Parse an OPDS 2 feed from a file on the filesystem."""
    try:
        buff = Path(file_path).read_bytes()
    except OSError as e:
        raise SourceUnavailable(str(file_path), str(e)) from e
    return parse_buffer(buff)


def parse_url(url: str, **kwargs: Any) -> Feed:
    """
    Fetch and parse an OPDS 2 feed.

    :param kwargs: Passed on to `HTTP.get_with_timeout`.
    """
    response = HTTP.get_with_timeout(url, **kwargs)
    return parse_buffer(response.content)


def serialize(model: BaseOpdsModel, *, indent: int | None = None) -> bytes:
    """
    Encode an OPDS 2 model as UTF-8 JSON.

    Empty optional fields are left out of the document, a single relation is
    written as a bare string and localized names are written as a plain string
    unless translations are present. The '<', '>' and '&' characters are always
    written as literal characters, never as unicode escapes.

    :param indent: Pretty print the document with this indent. The most compact
        encoding is used when this is None.
    """
    data = model.model_dump(mode="json", by_alias=True, warnings=False)
    separators = (",", ":") if indent is None else (",", ": ")
    encoded = json_serializer(
        data, ensure_ascii=False, indent=indent, separators=separators
    )
    return unescape_html_characters(encoded).encode("utf-8")


def serialize_feed(feed: Feed, *, indent: int | None = None) -> bytes:
    return serialize(feed, indent=indent)
