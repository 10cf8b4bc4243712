from __future__ import annotations

import json
import re
from typing import Any, TypedDict, Unpack

from pydantic_core import to_jsonable_python


def json_encoder(obj: Any) -> Any:
    # Pass everything json doesn't know about off to the Pydantic JSON encoder.
    return to_jsonable_python(obj)


class _JsonDumpsKwargs(TypedDict, total=False):
    skipkeys: bool
    ensure_ascii: bool
    check_circular: bool
    allow_nan: bool
    indent: None | int | str
    separators: tuple[str, str] | None
    sort_keys: bool


def json_serializer(obj: Any, **kwargs: Unpack[_JsonDumpsKwargs]) -> str:
    return json.dumps(obj, default=json_encoder, **kwargs)


# Matches a <, > or & escape sequence, as long as the backslash
# that starts it isn't itself escaped (preceded by an odd number of backslashes).
_HTML_ESCAPE_RE = re.compile(r"(?<!\\)((?:\\\\)*)\\u00(3[cCeE]|26)")
_HTML_ESCAPES = {"3c": "<", "3e": ">", "26": "&"}


def unescape_html_characters(encoded: str) -> str:
    """
    Replace the unicode escapes for '<', '>' and '&' in an encoded JSON document
    with the literal characters.

    Some JSON encoders escape these characters so the output can be embedded in
    HTML. OPDS documents are served as JSON, and consumers expect the literal
    characters, so we undo that escaping.
    """
    return _HTML_ESCAPE_RE.sub(
        lambda m: m.group(1) + _HTML_ESCAPES[m.group(2).lower()], encoded
    )
