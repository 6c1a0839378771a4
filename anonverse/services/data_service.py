"""
Data store capability.

Table-scoped access to the persistence layer. Rows are plain dicts.

Filters map column names to values; list/tuple/set values match by
membership. Named joins embed related rows (``profiles``) or attach
aggregate count descriptors (``likes_count``, ``comments_count``); a
descriptor is normally ``[{"count": n}]`` but consumers must tolerate a bare
integer or a malformed value.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional


class DataService(ABC):
    """
    Persistence provider.

    Failure contract
    ----------------
    - reads: `FetchError`
    - `insert`: `UniqueViolation`, `ValidationError`, `FetchError`
    - `update`/`delete`: `ValidationError`, `FetchError`
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        joins: Iterable[str] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list:
        """Return matching rows, with named joins embedded."""

    @abstractmethod
    async def count(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Return the number of matching rows."""

    @abstractmethod
    async def insert(self, table: str, record: Mapping[str, Any]) -> dict:
        """Insert one row and return it as stored."""

    @abstractmethod
    async def update(self, table: str, filters: Mapping[str, Any], patch: Mapping[str, Any]) -> list:
        """Patch matching rows and return them."""

    @abstractmethod
    async def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        """Delete matching rows and return how many were removed."""
