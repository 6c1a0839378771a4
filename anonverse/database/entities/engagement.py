"""
Like and Comment ORM Models
===========================

Engagement records attached to a poem. Their per-poem counts are aggregated
by the data layer and never stored.

Key features
~~~~~~~~~~~~
- ``likes``: one row per (poem, user); the unique constraint makes a repeated
  like surface as a uniqueness violation, which callers treat as success.
- ``comments``: append-only text attached to a poem and an author profile.
"""

from anonverse.database.config.connection_engine import declarativeBase
from sqlalchemy import ForeignKey, DateTime, TEXT, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid
from datetime import datetime, timezone


class Like(declarativeBase):
    """
    ORM model for the `likes` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    poem_id : UUID
        Foreign key to `poems.id`.
    user_id : UUID
        Foreign key to `profiles.id` (the viewer who liked).
    created_at : datetime
        UTC timestamp.
    """

    __tablename__ = "likes"
    __table_args__ = (UniqueConstraint("poem_id", "user_id", name="likes_poem_user_key"),)

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    poem_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("poems.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )


class Comment(declarativeBase):
    """
    ORM model for the `comments` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    poem_id : UUID
        Foreign key to `poems.id`.
    author_id : UUID
        Foreign key to `profiles.id`.
    content : str
        Comment text (trimmed, non-empty).
    created_at, updated_at : datetime
        UTC timestamps. Threads are read oldest first.
    """

    __tablename__ = "comments"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    poem_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("poems.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False
    )
    content: Mapped[str] = mapped_column(TEXT, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    def __str__(self) -> str:
        return f"Comment: poem:{self.poem_id}, author: {self.author_id}, content: {self.content}"
