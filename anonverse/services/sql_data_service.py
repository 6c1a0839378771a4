"""
`DataService` backed by the SQLAlchemy DAOs.

Each call runs one `@transactional` operation from
`anonverse.database.core.funcs` in a worker thread, so the event loop is never
blocked by database I/O. Driver errors are translated at this boundary:
anything SQLAlchemy raises that was not already mapped becomes `FetchError`.
"""

import asyncio
import logging
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from anonverse.database.core import funcs
from anonverse.errors import FetchError
from anonverse.services.data_service import DataService

logger = logging.getLogger(__name__)


class SqlDataService(DataService):
    """Data service over the configured SQL database."""

    async def _run(self, operation, **kwargs):
        try:
            return await asyncio.to_thread(operation, **kwargs)
        except SQLAlchemyError as e:
            logger.error("%s on %s failed: %s", operation.__name__, kwargs.get("table"), e)
            raise FetchError(f"{operation.__name__} on {kwargs.get('table')} failed") from e

    async def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        joins: Iterable[str] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list:
        return await self._run(
            funcs.select_rows,
            table=table,
            filters=filters,
            joins=tuple(joins),
            order_by=order_by,
            descending=descending,
            limit=limit,
        )

    async def count(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        return await self._run(funcs.count_rows, table=table, filters=filters)

    async def insert(self, table: str, record: Mapping[str, Any]) -> dict:
        return await self._run(funcs.insert_row, table=table, record=record)

    async def update(self, table: str, filters: Mapping[str, Any], patch: Mapping[str, Any]) -> list:
        return await self._run(funcs.update_rows, table=table, filters=filters, patch=patch)

    async def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        return await self._run(funcs.delete_rows, table=table, filters=filters)
