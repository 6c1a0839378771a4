"""
Pydantic models used as the data contracts of the client core.

Rows coming back from the data service are validated into these models at
the component boundaries; unknown keys (embedded joins, count descriptors)
are ignored.
"""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """
    Read-through copy of a principal's profile.
    """
    model_config = ConfigDict(extra="ignore")

    id: UUID = Field(..., description="Opaque principal id, shared with the account.")
    pen_name: Optional[str] = Field(None, description="Display pen name.")
    bio: Optional[str] = Field(None, description="Optional biography.")
    avatar_url: Optional[str] = Field(None, description="Optional avatar location.")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def same_principal(self, other: Optional["Identity"]) -> bool:
        """True when `other` denotes the same principal (compared by id)."""
        return other is not None and other.id == self.id


class AuthUser(BaseModel):
    """
    The principal attached to a session, as reported by the identity provider.
    """
    id: UUID
    """Principal id."""
    email: str
    """Email the principal signs in with."""
    pen_name: Optional[str] = None
    """Pen name supplied at sign-up, if known."""

    def to_identity(self) -> Identity:
        return Identity(id=self.id, pen_name=self.pen_name)


class AuthSession(BaseModel):
    """
    A live authenticated session.
    """
    access_token: str
    """Signed session token."""
    user: AuthUser
    """Principal the session belongs to."""
    expires_at: datetime
    """UTC expiry of the token."""


class Poem(BaseModel):
    """
    A published poem. Immutable once created.
    """
    model_config = ConfigDict(extra="ignore")

    id: UUID
    title: str
    content: str
    author_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Comment(BaseModel):
    """
    A comment on a poem, optionally carrying its author's profile.
    """
    model_config = ConfigDict(extra="ignore")

    id: UUID
    poem_id: UUID
    author_id: UUID
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author: Optional[Identity] = None


class EngagementView(BaseModel):
    """
    Per-poem engagement aggregate. Derived on every feed fetch, never persisted,
    and mutated in place by optimistic like/unlike.
    """
    like_count: int = Field(0, ge=0, description="Number of likes, never negative.")
    comment_count: int = Field(0, ge=0, description="Number of comments, never negative.")
    viewer_has_liked: bool = Field(False, description="Whether the current viewer liked the poem.")

    def record_like(self) -> None:
        self.like_count += 1
        self.viewer_has_liked = True

    def record_unlike(self) -> None:
        self.like_count = max(0, self.like_count - 1)
        self.viewer_has_liked = False


class FeedItem(BaseModel):
    """
    One entry of the feed view model: the poem, its author and its engagement.
    """
    poem: Poem
    author: Optional[Identity] = None
    engagement: EngagementView = Field(default_factory=EngagementView)


class FollowState(BaseModel):
    """
    Follow relationship summary for one profile, as seen by the viewer.
    """
    follower_count: int = Field(0, ge=0)
    """Profiles following the target."""
    following_count: int = Field(0, ge=0)
    """Profiles the target follows."""
    viewer_is_following: bool = False
    """Whether the viewer follows the target. Always False for self-profiles."""
    can_follow: bool = False
    """Whether a follow affordance applies (viewer present and not the target)."""

    def record_follow(self) -> None:
        self.follower_count += 1
        self.viewer_is_following = True

    def record_unfollow(self) -> None:
        self.follower_count = max(0, self.follower_count - 1)
        self.viewer_is_following = False


class CommentThread(BaseModel):
    """
    Lazily loaded comment list of one poem.
    """
    comments: List[Comment] = Field(default_factory=list)
    expanded: bool = False
    loaded: bool = False
    stale: bool = False
    """Set when a new comment was posted; the next expand refetches."""


class CommentPosted(BaseModel):
    """
    Result of posting a comment.
    """
    comment: Comment
    refresh_suggested: bool = True
    """Aggregate comment counts elsewhere in the feed only converge on refresh."""


class ActionOutcome(BaseModel):
    """
    Result of a UI-initiated action after the error propagation policy ran.
    """
    ok: bool
    """Whether the action completed."""
    message: str = ""
    """User-visible message for failures; empty for silent no-ops."""
    error: Optional[str] = None
    """Name of the error class that stopped the action, if any."""
    value: Any = None
    """Return value of the action on success."""
