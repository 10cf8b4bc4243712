"""
Convert an OPDS 1.x (Atom) feed into an OPDS 2 feed.
"""

from __future__ import annotations

from palace.converter.opds1 import model as opds1
from palace.converter.opds2 import model as opds2
from palace.converter.opds2.builder import (
    add_facet,
    add_navigation_in_group,
    add_publication_in_group,
)
from palace.converter.util.log import LoggerMixin, elapsed_time_logging, pluralize


class OPDS1ToOPDS2Converter(LoggerMixin):
    """
    Maps the entries of an OPDS 1 feed onto OPDS 2 publications and
    navigation links, grouping them and collecting the facets the same way
    an OPDS 2 server would lay them out.

    The conversion is deterministic, the same OPDS 1 feed always produces the
    same OPDS 2 feed. A converter holds no state, a single instance can be
    shared, but each feed being converted belongs to one conversion only.
    """

    def convert(self, feed: opds1.Feed, url: str) -> opds2.Feed:
        """
        :param feed: The parsed OPDS 1 feed.
        :param url: Where the feed came from. Only used for logging.
        """
        with elapsed_time_logging(
            log_method=self.log.info, message_prefix=f"Converting {url}"
        ):
            opds2_feed = opds2.Feed(metadata=self.feed_metadata(feed))

            for entry in feed.entries:
                self.add_entry(opds2_feed, entry)

            for link in feed.links:
                opds2_link = self.feed_link(link)
                if link.is_facet:
                    add_facet(opds2_feed, opds2_link, link.facet_group)
                else:
                    opds2_feed.links.append(opds2_link)

            # Publications and navigation placed in groups are counted too.
            publications = len(opds2_feed.publications) + sum(
                len(group.publications) for group in opds2_feed.groups
            )
            navigation = len(opds2_feed.navigation) + sum(
                len(group.navigation) for group in opds2_feed.groups
            )
            self.log.info(
                f"Converted {url}: "
                f"{pluralize(publications, 'publication')}, "
                f"{pluralize(navigation, 'navigation link')}, "
                f"{pluralize(len(opds2_feed.groups), 'group')}, "
                f"{pluralize(len(opds2_feed.facets), 'facet')}"
            )
        return opds2_feed

    @staticmethod
    def feed_metadata(feed: opds1.Feed) -> opds2.FeedMetadata:
        # A zero count in the OPDS 1 feed means it wasn't given.
        return opds2.FeedMetadata(
            title=feed.title,
            modified=feed.updated,
            number_of_items=feed.total_results or None,
            items_per_page=feed.items_per_page or None,
        )

    @staticmethod
    def is_publication(entry: opds1.Entry) -> bool:
        """An entry with any acquisition link is a publication, anything else is navigation."""
        return any(link.is_acquisition for link in entry.links)

    @staticmethod
    def group_link(entry: opds1.Entry) -> opds2.Link | None:
        """
        The link to the group (collection) the entry belongs to, if any. When
        there are several, the last one wins.
        """
        group_link = None
        for link in entry.links:
            if link.is_group:
                group_link = opds2.Link(
                    href=link.href,
                    rel=opds2.LinkRelations.collection,
                    title=link.title or None,
                )
        return group_link

    def add_entry(self, feed: opds2.Feed, entry: opds1.Entry) -> None:
        """Convert one entry and place it in the feed, or in its group."""
        group_link = self.group_link(entry)
        if group_link is not None and not group_link.href:
            group_link = None

        if self.is_publication(entry):
            self.log.debug(f"Entry '{entry.id}' is a publication")
            publication = self.publication(entry)
            if group_link is not None:
                add_publication_in_group(feed, publication, group_link)
            else:
                feed.publications.append(publication)
            return

        self.log.debug(f"Entry '{entry.id}' is a navigation link")
        navigation = self.navigation_link(entry)
        if navigation is None:
            self.log.warning(
                f"Skipping navigation entry '{entry.id}' ({entry.title}), it has no links"
            )
        elif group_link is not None:
            add_navigation_in_group(feed, navigation, group_link)
        else:
            feed.navigation.append(navigation)

    @staticmethod
    def navigation_link(entry: opds1.Entry) -> opds2.Link | None:
        """
        A navigation entry becomes a single link, built from the entry title
        and its first link. Any other links on the entry are dropped.
        """
        if not entry.links:
            return None
        first = entry.links[0]
        return opds2.Link(
            href=first.href,
            rel=first.rel or None,
            type=first.type or None,
            title=entry.title or None,
        )

    def publication(self, entry: opds1.Entry) -> opds2.Publication:
        links: list[opds2.Link] = []
        images: list[opds2.Link] = []
        for link in entry.links:
            if link.is_group:
                # Only used to place the publication in its group.
                continue
            elif link.is_image:
                images.append(self.publication_link(link))
            else:
                links.append(self.publication_link(link))

        return opds2.Publication(
            metadata=self.publication_metadata(entry), links=links, images=images
        )

    @staticmethod
    def publication_metadata(entry: opds1.Entry) -> opds2.PublicationMetadata:
        authors = [
            opds2.Contributor(name=author.name, identifier=author.uri or None)
            for author in entry.author
        ]
        publishers = (
            [opds2.Contributor(name=entry.publisher)] if entry.publisher else []
        )
        subjects = [
            opds2.Subject(
                name=category.label,
                code=category.term or None,
                scheme=category.scheme or None,
            )
            for category in entry.category
        ]
        series = [
            opds2.Collection(
                name=serie.name,
                position=serie.position or None,
                links=[opds2.Link(href=serie.url)] if serie.url else [],
            )
            for serie in entry.series
        ]

        return opds2.PublicationMetadata(
            title=entry.title,
            identifier=entry.identifier or entry.id,
            author=tuple(authors) or None,
            publisher=tuple(publishers) or None,
            language=(entry.language,) if entry.language else None,
            modified=entry.updated,
            published=entry.published,
            description=entry.content.content or entry.summary.content or None,
            rights=entry.rights or None,
            subject=tuple(subjects) or None,
            belongs_to=opds2.BelongsTo(series=tuple(series) or None),
        )

    def publication_link(self, link: opds1.Link) -> opds2.Link:
        return opds2.Link(
            href=link.href,
            type=link.type or None,
            rel=(link.rel,) if link.rel else None,
            title=link.title or None,
            properties=self.link_properties(link),
        )

    def link_properties(self, link: opds1.Link) -> opds2.LinkProperties:
        price = None
        if link.price.currency_code:
            price = opds2.Price(
                currency=link.price.currency_code, value=link.price.value
            )
        return opds2.LinkProperties(
            price=price,
            indirect_acquisition=[
                self.acquisition_object(indirect)
                for indirect in link.indirect_acquisition
            ],
        )

    @staticmethod
    def acquisition_object(
        indirect: opds1.IndirectAcquisition,
    ) -> opds2.AcquisitionObject:
        """
        Only the immediate children of an indirect acquisition are carried
        over. Anything nested deeper than that is dropped.
        """
        return opds2.AcquisitionObject(
            type=indirect.type,
            child=[
                opds2.AcquisitionObject(type=child.type)
                for child in indirect.indirect_acquisition
            ],
        )

    @staticmethod
    def feed_link(link: opds1.Link) -> opds2.Link:
        properties = opds2.LinkProperties(
            number_of_items=(link.count or None) if link.is_facet else None
        )
        return opds2.Link(
            href=link.href,
            rel=link.rel or None,
            type=link.type or None,
            title=link.title or None,
            properties=properties,
        )


def convert(feed: opds1.Feed, url: str) -> opds2.Feed:
    """Convert a parsed OPDS 1 feed into an OPDS 2 feed."""
    return OPDS1ToOPDS2Converter().convert(feed, url)
