import json

import pytest
from pydantic import TypeAdapter, ValidationError

from palace.converter.opds2.types.language import LocalizedName


class TestLocalizedName:
    def test_single_string(self):
        name = LocalizedName("Moby-Dick")
        assert not name.is_multi
        assert name.single_string == "Moby-Dick"
        assert name.multi_string == {}
        assert str(name) == "Moby-Dick"
        assert name.get() == "Moby-Dick"
        assert name.get("en") is None
        assert name == "Moby-Dick"
        assert name != {"en": "Moby-Dick"}

    def test_multi_string(self):
        name = LocalizedName({"en": "Moby-Dick", "fr": "Moby Dick"})
        assert name.is_multi
        assert name.single_string == ""
        assert name.multi_string == {"en": "Moby-Dick", "fr": "Moby Dick"}
        assert str(name) == "Moby-Dick"
        assert name.get("fr") == "Moby Dick"
        assert name.get("de") is None
        assert name == {"en": "Moby-Dick", "fr": "Moby Dick"}
        assert name != "Moby-Dick"

    def test_equality_and_hash(self):
        assert LocalizedName("a") == LocalizedName("a")
        assert LocalizedName("a") != LocalizedName({"en": "a"})
        assert hash(LocalizedName({"en": "a", "fr": "b"})) == hash(
            LocalizedName({"fr": "b", "en": "a"})
        )
        assert LocalizedName() == ""

    def test_repr(self):
        assert repr(LocalizedName("a")) == '<LocalizedName: "a">'
        assert repr(LocalizedName({"en": "a"})) == '<LocalizedName: {"en": "a"}>'

    @pytest.mark.parametrize(
        "value",
        [
            pytest.param("Moby-Dick", id="string"),
            pytest.param({"en": "Moby-Dick", "fr": "Moby Dick"}, id="map"),
            pytest.param("", id="empty string"),
        ],
    )
    def test_round_trip(self, value: str | dict[str, str]):
        ta = TypeAdapter(LocalizedName)
        name = ta.validate_python(value)
        assert json.loads(ta.dump_json(name)) == value

    def test_forms_do_not_mix(self):
        ta = TypeAdapter(list[LocalizedName])
        names = ta.validate_python(["Plain", {"en": "English", "es": "Inglés"}])
        assert json.loads(ta.dump_json(names)) == [
            "Plain",
            {"en": "English", "es": "Inglés"},
        ]
        assert names[0].multi_string == {}
        assert names[1].single_string == ""

    @pytest.mark.parametrize(
        "value, message",
        [
            pytest.param(
                1,
                "Input should be a valid string or a map of language codes to strings",
                id="number",
            ),
            pytest.param(
                ["a", "b"],
                "Input should be a valid string or a map of language codes to strings",
                id="list",
            ),
            pytest.param(
                {"en": "a", "fr": 2},
                "Translation for 'fr' should be a valid string",
                id="bad translation",
            ),
        ],
    )
    def test_invalid(self, value: object, message: str):
        ta = TypeAdapter(LocalizedName)
        with pytest.raises(ValidationError) as exc_info:
            ta.validate_python(value)
        errors = exc_info.value.errors()
        assert len(errors) == 1
        assert errors[0]["msg"] == message
