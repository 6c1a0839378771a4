"""
Account ORM Model
=================

The ``Account`` ORM model stores the credentials of an authenticated principal.
It maps to the ``account`` table and is only touched by the local auth
adapter; the public side of the principal lives in ``profiles``.

Key features
~~~~~~~~~~~~
- UUID primary key (``id``), shared with the ``profiles`` row
- Unique email and bcrypt password hash
- Email confirmation with codes and timestamps
- Last issued session token
"""

from anonverse.database.config.connection_engine import declarativeBase
from sqlalchemy import VARCHAR, Boolean, TEXT, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
from typing import Optional
import uuid
from datetime import datetime, timezone


class Account(declarativeBase):
    """
    ORM model for the `account` table.

    Attributes
    ----------
    id : UUID
        Primary key. Also the id of the principal's profile.
    email : str
        Unique email address used to sign in.
    password : str
        Bcrypt hash of the password.
    pen_name : str
        Pen name chosen at sign-up, copied into the profile.
    verified : bool
        Whether the email address has been confirmed.
    verification_code : str
        Last confirmation code sent to the user.
    code_created_on : datetime
        Timestamp when the confirmation code was generated.
    session_id : str | None
        Last access token issued for the account.
    """

    __tablename__ = "account"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    """Primary key. UUID of the principal."""

    email: Mapped[str] = mapped_column(VARCHAR(255), nullable=False, unique=True)
    """Email address of the user (max length 255)."""

    password: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Bcrypt hash of the password."""

    pen_name: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)
    """Pen name provided at sign-up."""

    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    """Boolean flag indicating if the email has been confirmed."""

    verification_code: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Confirmation code emailed to the user."""

    code_created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    """Datetime when the confirmation code was created."""

    session_id: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    """Last session token issued to the account."""

    def __init__(
        self,
        email: str,
        password: str,
        pen_name: str,
        verification_code: str,
        code_created_on,
    ):
        """
        Initialize a new, unconfirmed Account.

        Parameters
        ----------
        email : str
            Email address of the user.
        password : str
            Bcrypt hash of the password.
        pen_name : str
            Pen name chosen at sign-up.
        verification_code : str
            Confirmation code assigned to the account.
        code_created_on : datetime | str
            Creation timestamp of the code. Can be a datetime or ISO8601 string.
        """
        self.id = uuid.uuid4()
        self.email = email
        self.password = password
        self.pen_name = pen_name
        self.verified = False
        self.verification_code = verification_code
        self.session_id = None
        if isinstance(code_created_on, str):
            self.code_created_on = datetime.fromisoformat(code_created_on)
        else:
            self.code_created_on = code_created_on

    def __str__(self) -> str:
        return f"Account: id:{self.id}, email: {self.email}, verified: {self.verified}"
