"""
Follower ORM Model
==================

A directed follow edge between two profiles, stored in ``followers``.
Follower and following counts are derived from these rows on demand.
"""

from anonverse.database.config.connection_engine import declarativeBase
from sqlalchemy import ForeignKey, DateTime, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid
from datetime import datetime, timezone


class Follower(declarativeBase):
    """
    ORM model for the `followers` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    follower_id : UUID
        Profile that follows.
    following_id : UUID
        Profile being followed.
    created_at : datetime
        UTC timestamp.
    """

    __tablename__ = "followers"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="followers_pair_key"),
        CheckConstraint("follower_id <> following_id", name="followers_no_self_follow"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    follower_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True
    )
    following_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
