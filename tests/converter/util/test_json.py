import json
from datetime import datetime, timezone

import pytest

from palace.converter.util.json import json_serializer, unescape_html_characters


@pytest.mark.parametrize(
    "encoded, expected",
    [
        pytest.param(r'"<p>"', '"<p>"', id="angle brackets"),
        pytest.param(r'"<p>"', '"<p>"', id="upper case escapes"),
        pytest.param(r'"Tom & Jerry"', '"Tom & Jerry"', id="ampersand"),
        pytest.param(r'"\\u003c"', r'"\\u003c"', id="escaped backslash"),
        pytest.param(r'"\\<"', r'"\\<"', id="escaped backslash then escape"),
        pytest.param(r'"é"', r'"é"', id="other escapes untouched"),
        pytest.param('"<already>"', '"<already>"', id="nothing to do"),
    ],
)
def test_unescape_html_characters(encoded: str, expected: str):
    assert unescape_html_characters(encoded) == expected
    # The result is still the same JSON value.
    assert json.loads(unescape_html_characters(encoded)) == json.loads(encoded)


def test_json_serializer():
    value = {"when": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)}
    assert json_serializer(value) == '{"when": "2024-01-02T03:04:05Z"}'
    assert json_serializer([1, 2], separators=(",", ":")) == "[1,2]"
