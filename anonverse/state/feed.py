"""
Feed aggregation.

A refresh issues two queries:

1. poems joined to their author profile and to aggregate like/comment
   counts, newest first;
2. when a viewer is present, the viewer's likes restricted to the fetched
   poem ids, which sets ``viewer_has_liked``.

The second query carries per-viewer state, so it is kept out of the
aggregate query and never reused across identities. Its result is applied
only if the viewer is still the same principal when it arrives. Refreshes
are numbered; a refresh that completes after a newer one has already been
applied is discarded. A newer refresh that fails does not cancel an older
one.

Any data error aborts the refresh and leaves the previously rendered items
in place.
"""

import logging
from collections.abc import Mapping
from typing import Callable, Dict, List, Optional
from uuid import UUID

from anonverse.models import EngagementView, FeedItem, Identity, Poem
from anonverse.services.data_service import DataService

logger = logging.getLogger(__name__)

COUNT_KEY = "count"
FEED_JOINS = ("profiles", "likes_count", "comments_count")


def _is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def normalize_count(descriptor, field: str = "count") -> int:
    """
    Unwrap an aggregate count descriptor.

    Accepts a bare non-negative integer, a mapping with a ``count`` key, or a
    one-element list/tuple holding either. Missing descriptors and empty
    lists count as zero; anything else is logged and counted as zero.
    """
    if descriptor is None:
        return 0
    if isinstance(descriptor, (list, tuple)):
        if not descriptor:
            return 0
        if len(descriptor) == 1:
            descriptor = descriptor[0]
    if isinstance(descriptor, Mapping):
        descriptor = descriptor.get(COUNT_KEY)
    if _is_count(descriptor):
        return descriptor
    logger.warning("Malformed %s descriptor %r, using 0", field, descriptor)
    return 0


def build_item(row: dict) -> FeedItem:
    """Turn one joined poem row into a feed item (viewer_has_liked unset)."""
    author = row.get("profiles")
    return FeedItem(
        poem=Poem.model_validate(row),
        author=Identity.model_validate(author) if isinstance(author, Mapping) else None,
        engagement=EngagementView(
            like_count=normalize_count(row.get("likes_count"), "likes_count"),
            comment_count=normalize_count(row.get("comments_count"), "comments_count"),
        ),
    )


class FeedAggregator:
    """
    Builds and holds the feed view model.

    Parameters
    ----------
    data : DataService
        Data store.
    viewer_source : Callable[[], Identity | None]
        Returns the current viewer; consulted when the like-membership result
        arrives to detect a viewer change mid-refresh.
    """

    def __init__(self, data: DataService, viewer_source: Callable[[], Optional[Identity]]):
        self._data = data
        self._viewer_source = viewer_source
        self._generation = 0
        self._applied = 0
        self.items: List[FeedItem] = []
        self._index: Dict[UUID, FeedItem] = {}

    def item(self, poem_id: UUID) -> Optional[FeedItem]:
        return self._index.get(poem_id)

    def engagement(self, poem_id: UUID) -> Optional[EngagementView]:
        item = self._index.get(poem_id)
        return item.engagement if item is not None else None

    async def refresh(self) -> List[FeedItem]:
        """Refresh for whoever the viewer is right now."""
        return await self.fetch_feed(self._viewer_source())

    async def fetch_feed(self, viewer: Optional[Identity]) -> List[FeedItem]:
        """
        Fetch the feed for `viewer` (None for guest/anonymous callers).

        Returns
        -------
        list[FeedItem]
            Newest first. If a newer refresh was applied meanwhile, the
            current items are returned unchanged.

        Raises
        ------
        FetchError
            Transport or query failure; `items` keeps its previous value.
        """
        self._generation += 1
        generation = self._generation

        rows = await self._data.select(
            "poems", joins=FEED_JOINS, order_by="created_at", descending=True
        )
        items = [build_item(row) for row in rows]

        if viewer is not None and items:
            liked_rows = await self._data.select(
                "likes",
                filters={"user_id": viewer.id, "poem_id": [item.poem.id for item in items]},
            )
            if viewer.same_principal(self._viewer_source()):
                liked = {row["poem_id"] for row in liked_rows}
                for item in items:
                    item.engagement.viewer_has_liked = item.poem.id in liked
            else:
                logger.info("Viewer changed during refresh; discarding like membership")

        if generation < self._applied:
            logger.info("Discarding superseded feed refresh %d", generation)
            return self.items

        self._applied = generation
        self.items = items
        self._index = {item.poem.id: item for item in items}
        return items
