"""
Optimistic mutations.

Likes, comments and new poems are written through the data service and
reflected locally as soon as the write succeeds, without waiting for a feed
refresh. Local changes are never rolled back; the next successful refresh
replaces them with authoritative values.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import UUID

from anonverse.errors import UniqueViolation, ValidationError
from anonverse.models import Comment, CommentPosted, CommentThread, EngagementView, Identity, Poem
from anonverse.services.data_service import DataService
from anonverse.state.access import Action, authorize
from anonverse.state.device_state import LocalDeviceState
from anonverse.state.feed import FeedAggregator

logger = logging.getLogger(__name__)


def _comment_from_row(row: dict) -> Comment:
    comment = Comment.model_validate(row)
    author = row.get("profiles")
    if isinstance(author, dict):
        comment.author = Identity.model_validate(author)
    return comment


class OptimisticMutationEngine:
    """
    Local-first like/unlike, comment threads and poem creation.

    Parameters
    ----------
    data : DataService
        Data store writes go to.
    feed : FeedAggregator
        Holder of the engagement views updated in place.
    device : LocalDeviceState
        Device flags used for tier resolution.
    """

    def __init__(self, data: DataService, feed: FeedAggregator, device: LocalDeviceState):
        self._data = data
        self._feed = feed
        self._device = device
        self.threads: Dict[UUID, CommentThread] = {}

    async def like(self, poem_id: UUID, viewer: Optional[Identity]) -> Optional[EngagementView]:
        """
        Like a poem.

        A uniqueness conflict means the like already exists and counts as
        success. Returns the updated engagement view, or None when the poem
        is not in the current feed.

        Raises
        ------
        Forbidden
            No viewer, or the caller is a guest. Nothing is written.
        """
        authorize(viewer, self._device, Action.LIKE)
        try:
            await self._data.insert("likes", {"poem_id": poem_id, "user_id": viewer.id})
        except UniqueViolation:
            logger.debug("Poem %s already liked by %s", poem_id, viewer.id)
        view = self._feed.engagement(poem_id)
        if view is not None:
            view.record_like()
        return view

    async def unlike(self, poem_id: UUID, viewer: Optional[Identity]) -> Optional[EngagementView]:
        """Remove the viewer's like. The local count never drops below zero."""
        authorize(viewer, self._device, Action.UNLIKE)
        await self._data.delete("likes", {"poem_id": poem_id, "user_id": viewer.id})
        view = self._feed.engagement(poem_id)
        if view is not None:
            view.record_unlike()
        return view

    def thread(self, poem_id: UUID) -> CommentThread:
        return self.threads.setdefault(poem_id, CommentThread())

    async def load_comments(self, poem_id: UUID) -> List[Comment]:
        """Fetch the comment list of a poem (oldest first) into the cache."""
        rows = await self._data.select(
            "comments",
            filters={"poem_id": poem_id},
            joins=("profiles",),
            order_by="created_at",
        )
        thread = self.thread(poem_id)
        thread.comments = [_comment_from_row(row) for row in rows]
        thread.loaded = True
        thread.stale = False
        return thread.comments

    async def toggle_comments(self, poem_id: UUID) -> CommentThread:
        """
        Expand or collapse a thread. The first expand (or the first one after
        a new comment was posted) fetches; later ones reuse the cache.
        """
        thread = self.thread(poem_id)
        if not thread.expanded:
            if not thread.loaded or thread.stale:
                await self.load_comments(poem_id)
            else:
                logger.debug("Reusing cached comments for poem %s", poem_id)
        thread.expanded = not thread.expanded
        return thread

    async def post_comment(self, poem_id: UUID, viewer: Optional[Identity], text: str) -> CommentPosted:
        """
        Post a comment.

        The comment is appended to the cached thread and the thread is marked
        for refetch. Comment counts elsewhere in the feed are left to the next
        refresh, which the result suggests.

        Raises
        ------
        Forbidden
            The caller may not comment.
        ValidationError
            `text` is blank.
        """
        authorize(viewer, self._device, Action.COMMENT)
        content = (text or "").strip()
        if not content:
            raise ValidationError("Comment text is required")
        row = await self._data.insert(
            "comments", {"poem_id": poem_id, "author_id": viewer.id, "content": content}
        )
        comment = Comment.model_validate(row)
        comment.author = viewer
        thread = self.thread(poem_id)
        thread.comments.append(comment)
        thread.stale = True
        return CommentPosted(comment=comment)

    async def create_poem(self, viewer: Optional[Identity], title: str, content: str) -> Poem:
        """
        Publish a poem.

        Raises
        ------
        Forbidden
            The caller may not publish.
        ValidationError
            Title or content is blank.
        """
        authorize(viewer, self._device, Action.CREATE_POEM)
        title, content = (title or "").strip(), (content or "").strip()
        if not title or not content:
            raise ValidationError("A poem needs a title and content")
        now = datetime.now(timezone.utc)
        row = await self._data.insert(
            "poems",
            {"title": title, "content": content, "author_id": viewer.id, "created_at": now, "updated_at": now},
        )
        return Poem.model_validate(row)
