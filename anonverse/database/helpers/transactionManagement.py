"""
Database Transaction Management
===============================

Utilities for managing SQLAlchemy sessions using Python context variables and
a decorator-based transaction wrapper.

Functions decorated with ``@transactional`` receive a ``session`` keyword
argument. A session already present in the context is reused; otherwise a new
one is created from ``SessionFactory``, committed on success, rolled back on
error and always closed.

The async adapters call transactional functions through ``asyncio.to_thread``,
which copies the caller's context, so every worker thread gets its own session
slot.
"""

from functools import wraps
import contextvars
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from anonverse.database.config.connection_engine import connection_engine

db_session_context = contextvars.ContextVar("db_session_context", default=None)
"""Context variable storing the active SQLAlchemy session."""

SessionFactory = sessionmaker(bind=connection_engine, expire_on_commit=False)
"""Session factory used by ``@transactional``. Re-bind with ``bind_engine``."""


def bind_engine(engine: Engine) -> None:
    """
    Point ``SessionFactory`` at another engine.

    Parameters
    ----------
    engine : Engine
        Engine new transactions should run against.
    """
    SessionFactory.configure(bind=engine)


def transactional(func):
    """
    Run `func` inside a managed SQLAlchemy transaction.

    An outer transactional call shares its session with nested ones; only
    the outermost call commits, rolls back on error, and closes the session.
    `func` must accept a `session` keyword and be called with keywords.

    Example
    -------
    >>> @transactional
    ... def count_poems(session: Session) -> int:
    ...     return session.query(Poem).count()
    >>> count_poems()
    """
    @wraps(func)
    def wrap_func(*args, **kwargs):
        session = db_session_context.get()
        if session:
            return func(*args, session=session, **kwargs)

        session = SessionFactory()
        token = db_session_context.set(session)

        try:
            result = func(*args, session=session, **kwargs)
            session.flush()
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
            db_session_context.reset(token)

        return result

    return wrap_func
