"""
Connection Engine (SQLAlchemy)

Purpose
-------
Centralizes database initialization for the SQL-backed adapters:
- Creates the Engine (connection pool + SQL execution entry point) from
  `settings.DB_URL`.
- Defines shared MetaData for table and schema objects.
- Exposes a Declarative Base class for ORM models.

Notes
-----
- SQLite URLs get `check_same_thread=False` because the async adapters run
  every transaction in a worker thread. In-memory SQLite additionally uses a
  `StaticPool` so all sessions see the same database.
- All ORM models must inherit from `declarativeBase`.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from sqlalchemy.schema import MetaData
from anonverse.database.config.config import settings


def create_connection_engine(url: str) -> Engine:
    """
    Build an Engine for the given SQLAlchemy URL.

    Parameters
    ----------
    url : str
        SQLAlchemy database URL (e.g. ``postgresql://...`` or ``sqlite://``).

    Returns
    -------
    Engine
        Engine configured for use from worker threads.
    """
    parsed = make_url(url)
    kwargs = {}
    if parsed.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


# --------------------------------------------------------------------
# Engine object: core interface to the database.
# --------------------------------------------------------------------
connection_engine = create_connection_engine(settings.DB_URL)
"""Default engine built from `settings.DB_URL`."""

# --------------------------------------------------------------------
# Metadata object: schema-level information shared across all models.
# --------------------------------------------------------------------
metadata = MetaData()
"""Metadata object shared by every entity."""

declarativeBase = declarative_base(metadata=metadata)
"""Declarative Base: root class for ORM models."""
