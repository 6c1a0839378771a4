"""
Poem ORM Model
==============

A poem published by a profile. Poems are immutable once created; the feed
reads them newest first together with their like and comment counts.
"""

from anonverse.database.config.connection_engine import declarativeBase
from sqlalchemy import ForeignKey, DateTime, TEXT, VARCHAR, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid
from datetime import datetime, timezone


class Poem(declarativeBase):
    """
    ORM model for the `poems` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    title : str
        Poem title.
    content : str
        Poem body.
    author_id : UUID
        Foreign key to `profiles.id`.
    created_at, updated_at : datetime
        UTC timestamps. `created_at` orders the feed.
    """

    __tablename__ = "poems"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)
    content: Mapped[str] = mapped_column(TEXT, nullable=False)
    author_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    def __str__(self) -> str:
        return f"Poem: id:{self.id}, title: {self.title}, author: {self.author_id}"
