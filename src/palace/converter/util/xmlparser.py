from __future__ import annotations

from io import BytesIO
from typing import TYPE_CHECKING

from lxml import etree

if TYPE_CHECKING:
    from lxml.etree import _Element, _ElementTree


class XMLParser:
    """Helper functions to process XML data.

    Feeds in the wild disagree about which namespace an element lives in
    (dc: vs dcterms:, for example), so elements and attributes can be looked
    up by their local name, ignoring the namespace.
    """

    @staticmethod
    def local_name(tag: _Element) -> str:
        return etree.QName(tag).localname

    @classmethod
    def children(cls, tag: _Element, name: str) -> list[_Element]:
        """All the child elements with the given local name, in document order."""
        return [
            child
            for child in tag
            if isinstance(child.tag, str) and cls.local_name(child) == name
        ]

    @classmethod
    def child(cls, tag: _Element, name: str) -> _Element | None:
        """The first child element with the given local name."""
        return next(iter(cls.children(tag, name)), None)

    @staticmethod
    def character_data(tag: _Element | None) -> str:
        """
        All the character data directly inside the element, including CDATA
        sections but not the text of any child elements.
        """
        if tag is None:
            return ""
        return "".join(tag.xpath("text()"))

    @classmethod
    def text_of_optional_child(cls, tag: _Element, name: str) -> str:
        return cls.character_data(cls.child(tag, name))

    @staticmethod
    def attribute(tag: _Element, name: str) -> str:
        """The value of the attribute with the given local name, or an empty string."""
        for key, value in tag.attrib.items():
            if etree.QName(key).localname == name:
                return str(value)
        return ""

    @staticmethod
    def _load_xml(
        xml: str | bytes | _ElementTree,
    ) -> _ElementTree:
        """
        Load an XML document from string or bytes and handle the case where
        the document has already been parsed.
        """
        if isinstance(xml, str):
            xml = xml.encode("utf8")

        if isinstance(xml, bytes):
            # XMLParser can handle most characters and entities that are
            # invalid in XML but it will stop processing a document if it
            # encounters the null character. Remove that character
            # immediately and XMLParser will handle the rest.
            xml = xml.replace(b"\x00", b"")
            parser = etree.XMLParser(recover=True)
            return etree.parse(BytesIO(xml), parser)

        else:
            return xml
