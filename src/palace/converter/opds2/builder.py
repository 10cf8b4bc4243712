"""
Helpers for building up an OPDS 2 feed incrementally.

The group and facet helpers find an existing group or facet by its identity
(the href of a group's self link, the title of a facet) and add to it, or
create it the first time it is referenced. Groups and facets keep the order in
which they were first referenced.

None of these helpers are safe to call concurrently on the same feed.
"""

from __future__ import annotations

from palace.converter.opds2.model import (
    BelongsTo,
    Collection,
    Contributor,
    Facet,
    Feed,
    FeedMetadata,
    Group,
    Link,
    LinkRelations,
    Publication,
)
from palace.converter.util.datetime_helpers import utc_now

OPDS2_MEDIA_TYPE = Feed.content_type()


def new_feed(title: str) -> Feed:
    """Create an empty feed, last modified now."""
    return Feed(metadata=FeedMetadata(title=title, modified=utc_now()))


def _find_group(feed: Feed, group_link: Link) -> Group | None:
    for group in feed.groups:
        self_link = group.self_link
        if self_link is not None and self_link.href == group_link.href:
            return group
    return None


def _new_group(group_link: Link) -> Group:
    title = group_link.title or ""
    return Group(
        metadata=FeedMetadata(title=title),
        links=[
            Link(href=group_link.href, rel=LinkRelations.self, title=group_link.title)
        ],
    )


def find_or_create_group(feed: Feed, group_link: Link) -> Group:
    """
    Return the group whose self link has the same href as `group_link`,
    adding a new group titled after `group_link` to the end of the feed's
    groups if there isn't one yet.
    """
    group = _find_group(feed, group_link)
    if group is None:
        group = _new_group(group_link)
        feed.groups.append(group)
    return group


def add_publication_in_group(
    feed: Feed, publication: Publication, group_link: Link
) -> None:
    find_or_create_group(feed, group_link).publications.append(publication)


def add_navigation_in_group(feed: Feed, link: Link, group_link: Link) -> None:
    find_or_create_group(feed, group_link).navigation.append(link)


def add_facet(feed: Feed, link: Link, group_name: str) -> None:
    """
    Add a link to the facet titled `group_name`, creating the facet
    if this is the first link in that facet group.
    """
    for facet in feed.facets:
        if facet.metadata.title == group_name:
            facet.links.append(link)
            return

    feed.facets.append(Facet(metadata=FeedMetadata(title=group_name), links=[link]))


def add_link(
    feed: Feed, href: str, rel: str, type: str | None, templated: bool = False
) -> None:
    """Add a link to the feed, at the very least the self link."""
    feed.links.append(Link(href=href, rel=rel, type=type, templated=templated))


def add_navigation(
    feed: Feed, title: str, href: str, rel: str, type: str | None
) -> None:
    feed.navigation.append(Link(href=href, rel=rel, type=type, title=title or None))


def add_pagination(
    feed: Feed,
    number_of_items: int,
    items_per_page: int,
    current_page: int,
    next_link: str | None = None,
    previous_link: str | None = None,
    first_link: str | None = None,
    last_link: str | None = None,
) -> None:
    """Set the paging metadata of the feed and add whichever paging links are given."""
    feed.metadata.number_of_items = number_of_items
    feed.metadata.items_per_page = items_per_page
    feed.metadata.current_page = current_page

    for href, rel in (
        (next_link, LinkRelations.next),
        (previous_link, LinkRelations.previous),
        (first_link, LinkRelations.first),
        (last_link, LinkRelations.last),
    ):
        if href:
            add_link(feed, href, rel, OPDS2_MEDIA_TYPE)


def add_image(
    publication: Publication,
    href: str,
    type: str | None,
    height: int | None = None,
    width: int | None = None,
) -> None:
    publication.images.append(
        Link(
            href=href,
            type=type,
            height=height if height and height > 0 else None,
            width=width if width and width > 0 else None,
        )
    )


def add_publication_link(
    publication: Publication,
    href: str,
    type: str | None,
    rel: str | None = None,
    title: str | None = None,
) -> None:
    publication.links.append(
        Link(href=href, type=type, rel=rel or None, title=title or None)
    )


def _contributor_links(href: str | None, type: str | None) -> list[Link]:
    if not href:
        return []
    return [Link(href=href, type=type or None)]


def add_author(
    publication: Publication,
    name: str,
    identifier: str | None = None,
    sort_as: str | None = None,
    href: str | None = None,
    type: str | None = None,
) -> None:
    """Add an author, linking to the author's page if `href` is given."""
    author = Contributor(
        name=name,
        identifier=identifier or None,
        sort_as=sort_as or None,
        links=_contributor_links(href, type),
    )
    metadata = publication.metadata
    metadata.author = (*metadata.authors, author)


def add_publisher(
    publication: Publication,
    name: str,
    href: str | None = None,
    type: str | None = None,
) -> None:
    publisher = Contributor(name=name, links=_contributor_links(href, type))
    metadata = publication.metadata
    metadata.publisher = (*metadata.publishers, publisher)


def add_serie(
    publication: Publication,
    name: str,
    position: float | None = None,
    href: str | None = None,
    type: str | None = None,
) -> None:
    """Record that the publication is part of the series `name`."""
    serie = Collection(
        name=name, position=position or None, links=_contributor_links(href, type)
    )
    belongs_to = publication.metadata.belongs_to
    publication.metadata.belongs_to = BelongsTo(
        series=(*belongs_to.series, serie), collection=belongs_to.collection
    )
