import pytest
from pydantic import ValidationError

from palace.converter.opds2.base import is_empty
from palace.converter.opds2.model import (
    BelongsTo,
    Contributor,
    Feed,
    Group,
    Link,
    LinkRelations,
    Publication,
    PublicationMetadata,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        pytest.param(None, True, id="none"),
        pytest.param(False, True, id="false"),
        pytest.param("", True, id="empty string"),
        pytest.param([], True, id="empty list"),
        pytest.param({}, True, id="empty dict"),
        pytest.param(0, True, id="zero"),
        pytest.param(0.0, True, id="zero float"),
        pytest.param(True, False, id="true"),
        pytest.param("a", False, id="string"),
        pytest.param([0], False, id="list"),
        pytest.param({"a": None}, False, id="dict"),
        pytest.param(0.1, False, id="float"),
    ],
)
def test_is_empty(value: object, expected: bool):
    assert is_empty(value) is expected


class TestLink:
    def test_rels(self):
        assert Link(href="a").rels == ()
        assert Link(href="a", rel="self").rels == ("self",)
        assert Link(href="a", rel=["self", "alternate"]).rels == ("self", "alternate")

    def test_href_templated(self):
        link = Link(href="http://example.org/search{?query}", templated=True)
        assert (
            link.href_templated({"query": "moby dick"})
            == "http://example.org/search?query=moby%20dick"
        )

        # Links that aren't templated are returned as they are.
        link = Link(href="http://example.org/search{?query}")
        assert link.href_templated({"query": "x"}) == "http://example.org/search{?query}"

    def test_validate_assignment(self):
        link = Link(href="a")
        link.rel = ["next"]
        assert link.rels == ("next",)

        with pytest.raises(ValidationError):
            link.rel = 5  # type: ignore[assignment]

        with pytest.raises(ValidationError):
            link.height = True  # type: ignore[assignment]


class TestPublicationMetadata:
    def test_contributors(self):
        metadata = PublicationMetadata(
            author="Author",
            narrator=["Narrator 1", {"name": "Narrator 2", "role": ["voice", "cast"]}],
        )
        assert [str(author.name) for author in metadata.authors] == ["Author"]
        narrators = metadata.contributors_for("narrator")
        assert [str(narrator.name) for narrator in narrators] == [
            "Narrator 1",
            "Narrator 2",
        ]
        assert narrators[0].roles == ()
        assert narrators[1].roles == ("voice", "cast")
        assert metadata.publishers == ()

        with pytest.raises(ValueError, match="Unknown contributor role 'dancer'"):
            metadata.contributors_for("dancer")

    def test_languages_and_subjects(self):
        metadata = PublicationMetadata(language="en", subject=["Fiction"])
        assert metadata.languages == ("en",)
        assert [str(subject.name) for subject in metadata.subjects] == ["Fiction"]

        assert PublicationMetadata().languages == ()
        assert PublicationMetadata().subjects == ()


class TestBelongsTo:
    def test_series_and_collections(self):
        belongs_to = BelongsTo(series="Series", collection=[{"name": "A"}, "B"])
        assert [str(series.name) for series in belongs_to.series] == ["Series"]
        assert [str(collection.name) for collection in belongs_to.collections] == [
            "A",
            "B",
        ]

        assert BelongsTo().series == ()
        assert BelongsTo().collections == ()


class TestGroup:
    def test_self_link(self):
        assert Group().self_link is None

        group = Group(
            links=[
                Link(href="http://example.org/alternate", rel="alternate"),
                Link(href="http://example.org/group", rel=["collection", "self"]),
            ]
        )
        assert group.self_link is not None
        assert group.self_link.href == "http://example.org/group"


def test_content_types():
    assert Feed.content_type() == "application/opds+json"
    assert Publication.content_type() == "application/opds-publication+json"


def test_contributor_name_required_in_output():
    assert Contributor().model_dump(mode="json", by_alias=True) == {"name": ""}
    assert LinkRelations.self == "self"
