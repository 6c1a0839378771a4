"""
Table DAO

Purpose
-------
Entity-agnostic data access used to serve table-scoped requests
(`select`, `count`, `insert`, `update`, `delete`) for any ORM entity.

Filters
-------
A filter is a mapping of column name to value:
- a scalar value matches with equality;
- a list, tuple, set or frozenset matches with ``IN``. An empty collection
  matches nothing.

Unknown column names raise `ValidationError` instead of being ignored.

Usage
-----
.. code-block:: python

    dao = TableDao(Like)
    rows = dao.fetchRows(session, {"user_id": viewer_id, "poem_id": [p1, p2]})
    counts = dao.countGroupedBy(session, "poem_id", [p1, p2])
"""

import logging
from typing import Any, Iterable, Mapping, Optional
from sqlalchemy import func, inspect
from sqlalchemy.orm import Session
from anonverse.errors import ValidationError

logger = logging.getLogger(__name__)

_COLLECTIONS = (list, tuple, set, frozenset)


class TableDao:
    """
    Data Access Object over a single ORM entity.

    Parameters
    ----------
    entity : type
        Declarative ORM class served by this DAO.
    """

    def __init__(self, entity):
        self.entity = entity
        self.columns = {attr.key for attr in inspect(entity).mapper.column_attrs}

    def column(self, name: str):
        if name not in self.columns:
            raise ValidationError(f"Unknown column '{name}' on {self.entity.__tablename__}")
        return getattr(self.entity, name)

    def rowToDict(self, row) -> dict:
        """Convert an entity instance into a plain column -> value dict."""
        return {name: getattr(row, name) for name in self.columns}

    def _filtered(self, session: Session, filters: Optional[Mapping[str, Any]]):
        query = session.query(self.entity)
        for name, value in (filters or {}).items():
            column = self.column(name)
            if isinstance(value, _COLLECTIONS):
                query = query.filter(column.in_(list(value)))
            else:
                query = query.filter(column == value)
        return query

    def fetchRows(
        self,
        session: Session,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list:
        """
        Fetch entity instances matching `filters`.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        filters : Mapping[str, Any] | None
            Column filters (see module docstring).
        order_by : str | None
            Column to order by.
        descending : bool
            Reverse the ordering.
        limit : int | None
            Maximum number of rows.

        Returns
        -------
        list
            Matching entity instances.
        """
        try:
            query = self._filtered(session, filters)
            if order_by is not None:
                column = self.column(order_by)
                query = query.order_by(column.desc() if descending else column.asc())
            if limit is not None:
                query = query.limit(limit)
            return query.all()
        except ValidationError:
            raise
        except Exception:
            logger.exception("Error in TableDao.fetchRows (%s)", self.entity.__tablename__)
            raise

    def countRows(self, session: Session, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Count rows matching `filters`."""
        try:
            return self._filtered(session, filters).count()
        except ValidationError:
            raise
        except Exception:
            logger.exception("Error in TableDao.countRows (%s)", self.entity.__tablename__)
            raise

    def countGroupedBy(self, session: Session, column_name: str, keys: Iterable) -> dict:
        """
        Count rows per value of `column_name`, restricted to `keys`.

        Returns
        -------
        dict
            key -> count. Keys without rows are absent.
        """
        keys = list(keys)
        if not keys:
            return {}
        column = self.column(column_name)
        try:
            rows = (
                session.query(column, func.count())
                .filter(column.in_(keys))
                .group_by(column)
                .all()
            )
            return {key: count for key, count in rows}
        except Exception:
            logger.exception("Error in TableDao.countGroupedBy (%s)", self.entity.__tablename__)
            raise

    def createRow(self, session: Session, record: Mapping[str, Any]):
        """
        Insert one row and flush so constraint violations surface here.

        Returns
        -------
        object
            The persisted entity instance (defaults populated).
        """
        for name in record:
            self.column(name)
        row = self.entity(**dict(record))
        session.add(row)
        session.flush()
        return row

    def updateRows(self, session: Session, filters: Mapping[str, Any], patch: Mapping[str, Any]) -> list:
        """Apply `patch` to every row matching `filters` and return the rows."""
        for name in patch:
            self.column(name)
        rows = self._filtered(session, filters).all()
        for row in rows:
            for name, value in patch.items():
                setattr(row, name, value)
        session.flush()
        return rows

    def deleteRows(self, session: Session, filters: Mapping[str, Any]) -> int:
        """Delete every row matching `filters`. Returns the number deleted."""
        rows = self._filtered(session, filters).all()
        for row in rows:
            session.delete(row)
        session.flush()
        return len(rows)
