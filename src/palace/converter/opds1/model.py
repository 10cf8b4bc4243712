"""
In memory representation of an OPDS 1.x (Atom) catalog feed.

https://specs.opds.io/opds-1.2
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class LinkRelations(StrEnum):
    """
    The link relations that matter when converting a feed.

    https://specs.opds.io/opds-1.2#23-acquisition-feeds
    """

    acquisition = "http://opds-spec.org/acquisition"
    facet = "http://opds-spec.org/facet"
    group = "http://opds-spec.org/group"
    collection = "collection"
    image = "http://opds-spec.org/image"
    thumbnail = "http://opds-spec.org/image/thumbnail"


class BaseOpds1Model(BaseModel):
    """Base class for OPDS 1 models. They are never changed once parsed."""

    model_config = ConfigDict(frozen=True)


class Price(BaseOpds1Model):
    currency_code: str = ""
    value: float = 0


class IndirectAcquisition(BaseOpds1Model):
    type: str = ""
    indirect_acquisition: list[IndirectAcquisition] = Field(default_factory=list)


class Link(BaseOpds1Model):
    rel: str = ""
    href: str = ""
    type: str = ""
    title: str = ""
    facet_group: str = ""
    count: int = 0
    price: Price = Field(default_factory=Price)
    indirect_acquisition: list[IndirectAcquisition] = Field(default_factory=list)

    @property
    def is_group(self) -> bool:
        return self.rel in (LinkRelations.collection, LinkRelations.group)

    @property
    def is_image(self) -> bool:
        return self.rel in (LinkRelations.image, LinkRelations.thumbnail)

    @property
    def is_acquisition(self) -> bool:
        # Matches every acquisition relation: open-access, borrow, buy, sample...
        return LinkRelations.acquisition in self.rel

    @property
    def is_facet(self) -> bool:
        return self.rel == LinkRelations.facet


class Author(BaseOpds1Model):
    name: str = ""
    uri: str = ""


class Content(BaseOpds1Model):
    """The text of a summary or content element, with its type (text, html...)."""

    content: str = ""
    content_type: str = ""


class Category(BaseOpds1Model):
    scheme: str = ""
    term: str = ""
    label: str = ""


class Serie(BaseOpds1Model):
    """schema.org series information."""

    name: str = ""
    url: str = ""
    position: float = 0


class Entry(BaseOpds1Model):
    title: str = ""
    id: str = ""
    identifier: str = ""
    updated: datetime | None = None
    rights: str = ""
    publisher: str = ""
    author: list[Author] = Field(default_factory=list)
    language: str = ""
    issued: str = ""
    published: datetime | None = None
    category: list[Category] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)
    summary: Content = Field(default_factory=Content)
    content: Content = Field(default_factory=Content)
    series: list[Serie] = Field(default_factory=list)


class Feed(BaseOpds1Model):
    """
    The root element of an acquisition or navigation feed.
    """

    id: str = ""
    title: str = ""
    updated: datetime | None = None
    entries: list[Entry] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)
    total_results: int = 0
    items_per_page: int = 0
