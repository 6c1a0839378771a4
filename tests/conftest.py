"""
conftest.py
-----------
Shared pytest fixtures for the Anonverse tests.

Provides fixtures for:
- Device state in a temporary directory
- In-memory fakes of the auth and data services
- Seeding helpers for profiles, poems and engagement rows
"""
import asyncio
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from anonverse.errors import (
    AlreadyExists,
    DeliveryError,
    InvalidCredentials,
    UnconfirmedAccount,
    UniqueViolation,
    ValidationError,
)
from anonverse.models import AuthSession, AuthUser, Identity
from anonverse.services.auth_service import AuthService, SessionEvent
from anonverse.services.data_service import DataService
from anonverse.state.device_state import LocalDeviceState

GUEST_KEY = "anonverse_guest"


# ----- Fakes -----

class FakeAuthService(AuthService):
    """In-memory identity provider."""

    def __init__(self):
        super().__init__()
        self.accounts = {}
        self.current = None
        self.lookup_gate = None
        self.resent = []

    def register(self, email, password, pen_name, confirmed=True):
        user = AuthUser(id=uuid.uuid4(), email=email, pen_name=pen_name)
        self.accounts[email] = {"password": password, "user": user, "confirmed": confirmed}
        return user

    async def get_current_session(self):
        if self.lookup_gate is not None:
            await self.lookup_gate.wait()
        return self.current

    async def sign_in(self, email, password):
        account = self.accounts.get(email)
        if account is None or account["password"] != password:
            raise InvalidCredentials("Invalid login credentials")
        if not account["confirmed"]:
            raise UnconfirmedAccount("Email not confirmed")
        self.current = AuthSession(
            access_token=f"token-{email}",
            user=account["user"],
            expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        )
        self._notify(SessionEvent.SIGNED_IN, self.current)
        return self.current

    async def sign_up(self, email, password, pen_name):
        if email in self.accounts:
            raise AlreadyExists("User already registered")
        self.register(email, password, pen_name, confirmed=False)
        return None

    async def sign_out(self):
        self.current = None
        self._notify(SessionEvent.SIGNED_OUT, None)

    async def resend_confirmation(self, email):
        if email not in self.accounts:
            raise DeliveryError("No account was found with that email")
        self.resent.append(email)


class FakeDataService(DataService):
    """
    In-memory data store with the same join and count-descriptor shapes as
    the SQL adapter.

    `failures` maps ``(operation, table)`` to an exception to raise;
    `on_select` maps a table to an async hook awaited before a select returns.
    """

    UNIQUE = {"likes": ("poem_id", "user_id"), "followers": ("follower_id", "following_id")}

    def __init__(self):
        self.tables = {name: [] for name in ("profiles", "poems", "likes", "comments", "followers")}
        self.calls = []
        self.failures = {}
        self.on_select = {}

    def _record(self, operation, table):
        self.calls.append((operation, table))
        error = self.failures.get((operation, table))
        if error is not None:
            raise error

    def writes(self):
        return [call for call in self.calls if call[0] in ("insert", "update", "delete")]

    @staticmethod
    def _matches(row, filters):
        for name, value in (filters or {}).items():
            if isinstance(value, (list, tuple, set, frozenset)):
                if row.get(name) not in value:
                    return False
            elif row.get(name) != value:
                return False
        return True

    def _count(self, table, column, key):
        return sum(1 for row in self.tables[table] if row[column] == key)

    def _attach(self, row, joins):
        row = dict(row)
        for name in joins:
            if name == "profiles":
                row[name] = next(
                    (dict(p) for p in self.tables["profiles"] if p["id"] == row["author_id"]), None
                )
            elif name == "likes_count":
                row[name] = [{"count": self._count("likes", "poem_id", row["id"])}]
            elif name == "comments_count":
                row[name] = [{"count": self._count("comments", "poem_id", row["id"])}]
        return row

    async def select(self, table, filters=None, joins=(), order_by=None, descending=False, limit=None):
        self._record("select", table)
        rows = [row for row in self.tables[table] if self._matches(row, filters)]
        if order_by is not None:
            rows.sort(key=lambda row: row[order_by], reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        result = [self._attach(row, joins) for row in rows]
        hook = self.on_select.get(table)
        if hook is not None:
            await hook()
        return result

    async def count(self, table, filters=None):
        self._record("count", table)
        return sum(1 for row in self.tables[table] if self._matches(row, filters))

    async def insert(self, table, record):
        self._record("insert", table)
        row = dict(record)
        row.setdefault("id", uuid.uuid4())
        row.setdefault("created_at", datetime.now(timezone.utc))
        key = self.UNIQUE.get(table)
        if key and any(all(r[k] == row[k] for k in key) for r in self.tables[table]):
            raise UniqueViolation(f"Duplicate row in {table}")
        if table == "followers" and row["follower_id"] == row["following_id"]:
            raise ValidationError("Row rejected by followers")
        self.tables[table].append(row)
        return dict(row)

    async def update(self, table, filters, patch):
        self._record("update", table)
        rows = [row for row in self.tables[table] if self._matches(row, filters)]
        for row in rows:
            row.update(patch)
        return [dict(row) for row in rows]

    async def delete(self, table, filters):
        self._record("delete", table)
        keep = [row for row in self.tables[table] if not self._matches(row, filters)]
        removed = len(self.tables[table]) - len(keep)
        self.tables[table] = keep
        return removed


class Seeder:
    """Writes rows straight into a `FakeDataService`."""

    def __init__(self, data):
        self.data = data
        self._clock = datetime(2024, 3, 1, tzinfo=timezone.utc)

    def _tick(self):
        self._clock += timedelta(minutes=1)
        return self._clock

    def profile(self, pen_name):
        row = {"id": uuid.uuid4(), "pen_name": pen_name, "bio": None, "avatar_url": None}
        self.data.tables["profiles"].append(row)
        return Identity.model_validate(row)

    def poem(self, author, title="Untitled"):
        row = {
            "id": uuid.uuid4(),
            "title": title,
            "content": f"{title}, a poem",
            "author_id": author.id,
            "created_at": self._tick(),
        }
        self.data.tables["poems"].append(row)
        return row["id"]

    def like(self, poem_id, user):
        self.data.tables["likes"].append({"id": uuid.uuid4(), "poem_id": poem_id, "user_id": user.id})

    def comment(self, poem_id, author, content="Lovely"):
        self.data.tables["comments"].append(
            {
                "id": uuid.uuid4(),
                "poem_id": poem_id,
                "author_id": author.id,
                "content": content,
                "created_at": self._tick(),
            }
        )

    def follow(self, follower, following):
        self.data.tables["followers"].append(
            {"id": uuid.uuid4(), "follower_id": follower.id, "following_id": following.id}
        )


# ----- Fixtures -----

@pytest.fixture
def device(tmp_path):
    """Device state stored in a temporary directory."""
    return LocalDeviceState(tmp_path / "device.json", guest_key=GUEST_KEY)


@pytest.fixture
def guest_device(device):
    device.set_guest_flag()
    return device


@pytest.fixture
def auth():
    return FakeAuthService()


@pytest.fixture
def data():
    return FakeDataService()


@pytest.fixture
def seed(data):
    return Seeder(data)


@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run
