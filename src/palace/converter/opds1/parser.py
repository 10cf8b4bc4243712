from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from lxml import etree

from palace.converter.exceptions import SourceUnavailable
from palace.converter.opds1.model import (
    Author,
    Category,
    Content,
    Entry,
    Feed,
    IndirectAcquisition,
    Link,
    Price,
    Serie,
)
from palace.converter.util.datetime_helpers import parse_datetime
from palace.converter.util.http import HTTP
from palace.converter.util.log import LoggerMixin
from palace.converter.util.xmlparser import XMLParser

if TYPE_CHECKING:
    from lxml.etree import _Element


T = TypeVar("T", int, float)


class OPDS1Parser(XMLParser, LoggerMixin):
    """
    Read an OPDS 1.x Atom feed into a `Feed`.

    Elements and attributes are matched by local name, so the various
    namespaces used for the same data (dc:identifier and dcterms:identifier,
    opensearch:totalResults, opds:price, schema:Series...) are all found.
    Missing elements leave the matching field empty.
    """

    def parse(self, xml: str | bytes, source: str = "<buffer>") -> Feed:
        """
        :param xml: The feed document.
        :param source: Where the document came from, used in error messages.

        :raise SourceUnavailable: If the document is not an Atom feed.
        """
        try:
            tree = self._load_xml(xml)
        except etree.XMLSyntaxError as e:
            raise SourceUnavailable(source, f"Unable to parse XML: {e}") from e

        root = tree.getroot()
        if root is None:
            raise SourceUnavailable(source, "Document does not contain any XML")
        if self.local_name(root) != "feed":
            raise SourceUnavailable(
                source,
                f"Expected an Atom <feed> document, got <{self.local_name(root)}>",
            )
        return self._feed(root, source)

    def _feed(self, tag: _Element, source: str) -> Feed:
        return Feed(
            id=self.text_of_optional_child(tag, "id"),
            title=self.text_of_optional_child(tag, "title"),
            updated=self._datetime(tag, "updated", source),
            entries=[self._entry(e, source) for e in self.children(tag, "entry")],
            links=[self._link(link) for link in self.children(tag, "link")],
            total_results=self._number(
                int, self.text_of_optional_child(tag, "totalResults"), "totalResults"
            ),
            items_per_page=self._number(
                int, self.text_of_optional_child(tag, "itemsPerPage"), "itemsPerPage"
            ),
        )

    def _entry(self, tag: _Element, source: str) -> Entry:
        return Entry(
            title=self.text_of_optional_child(tag, "title"),
            id=self.text_of_optional_child(tag, "id"),
            identifier=self.text_of_optional_child(tag, "identifier"),
            updated=self._datetime(tag, "updated", source),
            rights=self.text_of_optional_child(tag, "rights"),
            publisher=self.text_of_optional_child(tag, "publisher"),
            author=[
                Author(
                    name=self.text_of_optional_child(author, "name"),
                    uri=self.text_of_optional_child(author, "uri"),
                )
                for author in self.children(tag, "author")
            ],
            language=self.text_of_optional_child(tag, "language"),
            issued=self.text_of_optional_child(tag, "issued"),
            published=self._datetime(tag, "published", source),
            category=[
                Category(
                    scheme=self.attribute(category, "scheme"),
                    term=self.attribute(category, "term"),
                    label=self.attribute(category, "label"),
                )
                for category in self.children(tag, "category")
            ],
            links=[self._link(link) for link in self.children(tag, "link")],
            summary=self._content(self.child(tag, "summary")),
            content=self._content(self.child(tag, "content")),
            series=[
                Serie(
                    name=self.attribute(serie, "name"),
                    url=self.attribute(serie, "url"),
                    position=self._number(
                        float, self.attribute(serie, "position"), "position"
                    ),
                )
                for serie in self.children(tag, "Series")
            ],
        )

    def _content(self, tag: _Element | None) -> Content:
        if tag is None:
            return Content()
        return Content(
            content=self.character_data(tag),
            content_type=self.attribute(tag, "type"),
        )

    def _link(self, tag: _Element) -> Link:
        price_tag = self.child(tag, "price")
        price = (
            Price(
                currency_code=self.attribute(price_tag, "currencycode"),
                value=self._number(
                    float, self.character_data(price_tag), "price"
                ),
            )
            if price_tag is not None
            else Price()
        )
        return Link(
            rel=self.attribute(tag, "rel"),
            href=self.attribute(tag, "href"),
            type=self.attribute(tag, "type"),
            title=self.attribute(tag, "title"),
            facet_group=self.attribute(tag, "facetGroup"),
            count=self._number(int, self.attribute(tag, "count"), "count"),
            price=price,
            indirect_acquisition=self._indirect_acquisitions(tag),
        )

    def _indirect_acquisitions(self, tag: _Element) -> list[IndirectAcquisition]:
        return [
            IndirectAcquisition(
                type=self.attribute(child, "type"),
                indirect_acquisition=self._indirect_acquisitions(child),
            )
            for child in self.children(tag, "indirectAcquisition")
        ]

    def _datetime(self, tag: _Element, name: str, source: str) -> datetime | None:
        value = self.text_of_optional_child(tag, name)
        try:
            return parse_datetime(value)
        except ValueError:
            self.log.warning(f"Ignoring invalid <{name}> date '{value}' in {source}")
            return None

    def _number(self, cls: type[T], value: str, name: str) -> T:
        value = value.strip()
        if not value:
            return cls(0)
        try:
            return cls(value)
        except ValueError:
            self.log.warning(f"Ignoring invalid {name} value '{value}'")
            return cls(0)


def parse_buffer(buff: str | bytes, source: str = "<buffer>") -> Feed:
    """Parse an OPDS 1 feed from an in memory document."""
    return OPDS1Parser().parse(buff, source)


def parse_file(file_path: str | Path) -> Feed:
    """Parse an OPDS 1 feed from a file on the filesystem."""
    try:
        buff = Path(file_path).read_bytes()
    except OSError as e:
        raise SourceUnavailable(str(file_path), str(e)) from e
    return parse_buffer(buff, str(file_path))


def parse_url(url: str, **kwargs: Any) -> Feed:
    """
    Fetch and parse an OPDS 1 feed.

    :param kwargs: Passed on to `HTTP.get_with_timeout`.
    :raise SourceUnavailable: If the feed can't be fetched or isn't an Atom feed.
    """
    response = HTTP.get_with_timeout(url, **kwargs)
    return parse_buffer(response.content, url)
