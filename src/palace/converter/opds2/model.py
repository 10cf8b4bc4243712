from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum, auto
from typing import ClassVar, TypeVar

from pydantic import AliasChoices, Field, StrictBool, field_serializer
from uritemplate import URITemplate, variable

from palace.converter.opds2.base import BaseOpdsModel
from palace.converter.opds2.types.date import Iso8601Datetime
from palace.converter.opds2.types.language import LocalizedName
from palace.converter.opds2.types.number import Count, Number
from palace.converter.opds2.util import (
    ModelOrList,
    StrModelOrTuple,
    StrOrTuple,
    obj_or_tuple_to_tuple,
)


class LinkRelations(StrEnum):
    """
    https://readium.org/webpub-manifest/relationships.html
    """

    alternate = auto()
    collection = auto()
    cover = auto()
    first = auto()
    last = auto()
    next = auto()
    previous = auto()
    search = auto()
    self = auto()


class Price(BaseOpdsModel):
    """
    https://drafts.opds.io/opds-2.0#53-acquisition-links
    """

    always_present: ClassVar[frozenset[str]] = frozenset({"currency", "value"})

    currency: str
    value: Number


class AcquisitionObject(BaseOpdsModel):
    """
    Describes how a publication is ultimately obtained when the acquisition link
    doesn't lead straight to it, e.g. a borrow link that returns an ACSM file
    which in turn leads to an EPUB. Each object can nest further objects.

    https://drafts.opds.io/schema/acquisition-object.schema.json
    """

    always_present: ClassVar[frozenset[str]] = frozenset({"type"})

    type: str
    child: ModelOrList[AcquisitionObject] = Field(default_factory=list)


class LinkProperties(BaseOpdsModel):
    """
    https://drafts.opds.io/schema/properties.schema.json
    """

    number_of_items: Count | None = Field(None, alias="numberOfItems")
    price: Price | None = None
    indirect_acquisition: ModelOrList[AcquisitionObject] = Field(
        default_factory=list, alias="indirectAcquisition"
    )


class Link(BaseOpdsModel):
    """
    Link to another resource.

    https://readium.org/webpub-manifest/schema/link.schema.json
    """

    always_present: ClassVar[frozenset[str]] = frozenset({"href"})

    href: str = ""
    type: str | None = None
    rel: StrOrTuple[str] | None = None
    height: Count | None = None
    width: Count | None = None
    title: str | None = None
    properties: LinkProperties = Field(default_factory=LinkProperties)
    duration: Number | None = None
    templated: StrictBool = False
    children: ModelOrList[Link] = Field(default_factory=list)
    bitrate: Count | None = None

    @property
    def rels(self) -> Sequence[str]:
        return obj_or_tuple_to_tuple(self.rel)

    @field_serializer("rel")
    def _serialize_rel(self, rel: str | tuple[str, ...] | None) -> str | list[str]:
        # A single relation is always written as a bare string.
        rels = obj_or_tuple_to_tuple(rel)
        if len(rels) == 1:
            return rels[0]
        return list(rels)

    def href_templated(self, var_dict: variable.VariableValueDict | None = None) -> str:
        """
        Return the URL with template variables expanded, if necessary.
        """
        if not self.templated:
            return self.href
        template = URITemplate(self.href)
        return template.expand(var_dict)


class Named(BaseOpdsModel):
    """
    An object with a translatable name.
    """

    always_present: ClassVar[frozenset[str]] = frozenset({"name"})

    name: LocalizedName = Field(default_factory=LocalizedName)


class Contributor(Named):
    """
    https://github.com/readium/webpub-manifest/blob/master/schema/contributor-object.schema.json
    """

    sort_as: str | None = Field(
        None,
        validation_alias=AliasChoices("sortAs", "sort_as"),
        serialization_alias="sortAs",
    )
    identifier: str | None = None
    role: StrOrTuple[str] | None = None
    links: ModelOrList[Link] = Field(default_factory=list)

    @property
    def roles(self) -> Sequence[str]:
        return obj_or_tuple_to_tuple(self.role)


class Collection(Named):
    """
    A series or collection the publication belongs to.

    https://github.com/readium/webpub-manifest/tree/master/contexts/default#collections--series
    """

    sort_as: str | None = Field(
        None,
        validation_alias=AliasChoices("sortAs", "sort_as"),
        serialization_alias="sortAs",
    )
    identifier: str | None = None
    position: Number | None = None
    links: ModelOrList[Link] = Field(default_factory=list)


class Subject(Named):
    """
    https://github.com/readium/webpub-manifest/blob/master/schema/subject-object.schema.json
    """

    sort_as: str | None = Field(
        None,
        validation_alias=AliasChoices("sortAs", "sort_as"),
        serialization_alias="sortAs",
    )
    scheme: str | None = None
    code: str | None = None
    links: ModelOrList[Link] = Field(default_factory=list)


NamedT = TypeVar("NamedT", bound=Named)


def _named_or_sequence_to_sequence(
    value: str | NamedT | tuple[str | NamedT, ...] | None, cls: type[NamedT]
) -> Sequence[NamedT]:
    return tuple(
        cls(name=item) if isinstance(item, str) else item  # type: ignore[call-arg]
        for item in obj_or_tuple_to_tuple(value)
    )


class BelongsTo(BaseOpdsModel):
    """
    https://github.com/readium/webpub-manifest/tree/master/contexts/default#collections--series
    """

    series_data: StrModelOrTuple[Collection] | None = Field(None, alias="series")

    @property
    def series(self) -> Sequence[Collection]:
        return _named_or_sequence_to_sequence(self.series_data, Collection)

    collection: StrModelOrTuple[Collection] | None = None

    @property
    def collections(self) -> Sequence[Collection]:
        return _named_or_sequence_to_sequence(self.collection, Collection)


class FeedMetadata(BaseOpdsModel):
    """
    https://github.com/opds-community/drafts/blob/main/schema/feed-metadata.schema.json
    """

    always_present: ClassVar[frozenset[str]] = frozenset({"title"})

    type: str | None = Field(
        None,
        validation_alias=AliasChoices("@type", "type"),
        serialization_alias="@type",
    )
    title: str = ""
    number_of_items: Count | None = Field(None, alias="numberOfItems")
    items_per_page: Count | None = Field(None, alias="itemsPerPage")
    current_page: Count | None = Field(None, alias="currentPage")
    modified: Iso8601Datetime | None = None


class PublicationMetadata(BaseOpdsModel):
    """
    Metadata associated with a publication.

    https://github.com/readium/webpub-manifest/blob/master/schema/metadata.schema.json
    """

    always_present: ClassVar[frozenset[str]] = frozenset({"title", "identifier"})

    type: str | None = Field(
        None,
        validation_alias=AliasChoices("@type", "type"),
        serialization_alias="@type",
    )
    title: LocalizedName = Field(default_factory=LocalizedName)
    identifier: str = ""

    author: StrModelOrTuple[Contributor] | None = None
    translator: StrModelOrTuple[Contributor] | None = None
    editor: StrModelOrTuple[Contributor] | None = None
    artist: StrModelOrTuple[Contributor] | None = None
    illustrator: StrModelOrTuple[Contributor] | None = None
    letterer: StrModelOrTuple[Contributor] | None = None
    penciler: StrModelOrTuple[Contributor] | None = None
    colorist: StrModelOrTuple[Contributor] | None = None
    inker: StrModelOrTuple[Contributor] | None = None
    narrator: StrModelOrTuple[Contributor] | None = None
    contributor: StrModelOrTuple[Contributor] | None = None
    publisher: StrModelOrTuple[Contributor] | None = None
    imprint: StrModelOrTuple[Contributor] | None = None

    language: StrOrTuple[str] | None = None
    modified: Iso8601Datetime | None = None
    published: Iso8601Datetime | None = None
    description: str | None = None
    source: str | None = None
    rights: str | None = None
    subject: StrModelOrTuple[Subject] | None = None
    belongs_to: BelongsTo = Field(
        default_factory=BelongsTo,
        validation_alias=AliasChoices("belongsTo", "belongs_to"),
        serialization_alias="belongsTo",
    )
    duration: Count | None = None

    CONTRIBUTOR_ROLES: ClassVar[tuple[str, ...]] = (
        "author",
        "translator",
        "editor",
        "artist",
        "illustrator",
        "letterer",
        "penciler",
        "colorist",
        "inker",
        "narrator",
        "contributor",
        "publisher",
        "imprint",
    )

    def contributors_for(self, role: str) -> Sequence[Contributor]:
        """
        Return the contributors for one of the CONTRIBUTOR_ROLES, whatever
        shape they were given in.
        """
        if role not in self.CONTRIBUTOR_ROLES:
            raise ValueError(f"Unknown contributor role '{role}'")
        return _named_or_sequence_to_sequence(getattr(self, role), Contributor)

    @property
    def authors(self) -> Sequence[Contributor]:
        return self.contributors_for("author")

    @property
    def publishers(self) -> Sequence[Contributor]:
        return self.contributors_for("publisher")

    @property
    def languages(self) -> Sequence[str]:
        return obj_or_tuple_to_tuple(self.language)

    @property
    def subjects(self) -> Sequence[Subject]:
        return _named_or_sequence_to_sequence(self.subject, Subject)


class Publication(BaseOpdsModel):
    """
    https://drafts.opds.io/opds-2.0#51-opds-publication
    """

    always_present: ClassVar[frozenset[str]] = frozenset(
        {"metadata", "links", "images"}
    )

    @classmethod
    def content_type(cls) -> str:
        return "application/opds-publication+json"

    metadata: PublicationMetadata = Field(default_factory=PublicationMetadata)
    links: list[Link] = Field(default_factory=list)
    images: list[Link] = Field(default_factory=list)


class Facet(BaseOpdsModel):
    """
    A named group of alternative filter or sort links.

    https://drafts.opds.io/opds-2.0#24-facets
    """

    always_present: ClassVar[frozenset[str]] = frozenset({"metadata", "links"})

    metadata: FeedMetadata = Field(default_factory=FeedMetadata)
    links: list[Link] = Field(default_factory=list)


class Group(BaseOpdsModel):
    """
    A feed group, holding publications and / or navigation links. A group
    is identified by the href of its self link.

    https://drafts.opds.io/opds-2.0#25-groups
    """

    always_present: ClassVar[frozenset[str]] = frozenset({"metadata"})

    metadata: FeedMetadata = Field(default_factory=FeedMetadata)
    links: list[Link] = Field(default_factory=list)
    publications: list[Publication] = Field(default_factory=list)
    navigation: list[Link] = Field(default_factory=list)

    @property
    def self_link(self) -> Link | None:
        return next(
            (link for link in self.links if LinkRelations.self in link.rels), None
        )


class Feed(BaseOpdsModel):
    """
    OPDS 2 feed.

    https://drafts.opds.io/opds-2.0#2-collections
    https://github.com/opds-community/drafts/blob/main/schema/feed.schema.json
    """

    always_present: ClassVar[frozenset[str]] = frozenset({"metadata", "links"})

    @classmethod
    def content_type(cls) -> str:
        return "application/opds+json"

    context: StrOrTuple[str] | None = Field(None, alias="@context")
    metadata: FeedMetadata = Field(default_factory=FeedMetadata)
    links: list[Link] = Field(default_factory=list)
    facets: list[Facet] = Field(default_factory=list)
    groups: list[Group] = Field(default_factory=list)
    publications: list[Publication] = Field(default_factory=list)
    navigation: list[Link] = Field(default_factory=list)
