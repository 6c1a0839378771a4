"""
conftest.py
-----------
Fixtures for integration tests against an in-memory SQLite database.
"""
import uuid

import pytest

import anonverse.database.entities  # noqa: F401  (registers the tables)
from anonverse.database.config.connection_engine import (
    connection_engine,
    create_connection_engine,
    metadata,
)
from anonverse.database.helpers.transactionManagement import bind_engine
from anonverse.services.sql_data_service import SqlDataService


@pytest.fixture
def engine():
    """Fresh schema per test; transactions are bound to it for the duration."""
    engine = create_connection_engine("sqlite://")
    metadata.create_all(engine)
    bind_engine(engine)
    yield engine
    bind_engine(connection_engine)
    engine.dispose()


@pytest.fixture
def sql_data(engine):
    return SqlDataService()


@pytest.fixture
def make_profile(sql_data, run):
    def make(pen_name):
        return run(sql_data.insert("profiles", {"id": uuid.uuid4(), "pen_name": pen_name}))

    return make


class OutboxMailer:
    """Collects confirmation codes instead of sending them."""

    def __init__(self):
        self.sent = []

    def __call__(self, email, code):
        self.sent.append((email, code))

    def last_code(self, email):
        return [code for to, code in self.sent if to == email][-1]


@pytest.fixture
def outbox():
    return OutboxMailer()
