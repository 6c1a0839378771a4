"""
Profile ORM Model
=================

Public identity of a principal, stored in ``profiles``. Rows are provisioned
when an account is created and edited by their owner only.
"""

from anonverse.database.config.connection_engine import declarativeBase
from sqlalchemy import VARCHAR, TEXT, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
from typing import Optional
from datetime import datetime, timezone


class Profile(declarativeBase):
    """
    ORM model for the `profiles` table.

    Attributes
    ----------
    id : UUID
        Primary key, equal to the owning account id.
    pen_name : str
        Display name shown next to poems and comments.
    bio : str | None
        Optional free-text biography.
    avatar_url : str | None
        Optional avatar location.
    created_at, updated_at : datetime
        UTC timestamps.
    """

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    pen_name: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)
    bio: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    def __str__(self) -> str:
        return f"Profile: id:{self.id}, pen_name: {self.pen_name}"
