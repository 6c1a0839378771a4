"""
Service-layer operations for table-scoped data access and local accounts.

All public functions are wrapped with the `@transactional` decorator, which
manages SQLAlchemy sessions and transactions automatically. Each function
accepts (and uses) an injected `session: Session` and must be called with
keyword arguments.

Table-scoped access
-------------------
Rows are returned as plain dicts. `select_rows` understands named joins:

- ``profiles`` on ``poems`` and ``comments`` embeds the author profile row
  under the ``profiles`` key (``None`` when missing).
- ``likes_count`` and ``comments_count`` on ``poems`` attach an aggregate
  count descriptor: a one-element list ``[{"count": n}]``.

Accounts
--------
Login, creation (with profile provisioning), confirmation-code checks and
renewals, and session-token bookkeeping for the local auth adapter.
"""

from collections import namedtuple
from datetime import datetime, timezone, timedelta
from typing import Any, Iterable, Mapping, Optional
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from anonverse.crypt.encrypt_decrypt import CredentialCrypto
from anonverse.database.daos.account_dao import AccountDao
from anonverse.database.daos.table_dao import TableDao
from anonverse.database.entities import Account, Comment, Follower, Like, Poem, Profile
from anonverse.database.helpers.transactionManagement import transactional
from anonverse.errors import UniqueViolation, ValidationError

COUNT_KEY = "count"

Embed = namedtuple("Embed", ["foreign_key", "entity"])
"""Join that embeds the row referenced by `foreign_key`."""

Aggregate = namedtuple("Aggregate", ["foreign_key", "entity"])
"""Join that counts `entity` rows whose `foreign_key` references the row."""

TABLES = {
    "profiles": Profile,
    "poems": Poem,
    "likes": Like,
    "comments": Comment,
    "followers": Follower,
}
"""Table name -> ORM entity served by the data service."""

JOINS = {
    "poems": {
        "profiles": Embed("author_id", Profile),
        "likes_count": Aggregate("poem_id", Like),
        "comments_count": Aggregate("poem_id", Comment),
    },
    "comments": {
        "profiles": Embed("author_id", Profile),
    },
}
"""Named joins available per table."""


def table_dao(table: str) -> TableDao:
    """Return a `TableDao` for a served table, or raise `ValidationError`."""
    entity = TABLES.get(table)
    if entity is None:
        raise ValidationError(f"Unknown table '{table}'")
    return TableDao(entity)


def _join_spec(table: str, name: str):
    spec = JOINS.get(table, {}).get(name)
    if spec is None:
        raise ValidationError(f"Unknown join '{name}' on {table}")
    return spec


def _translate_integrity_error(table: str, error: IntegrityError) -> Exception:
    """Map a driver integrity error to the data-service taxonomy."""
    orig = error.orig
    text = str(orig).lower()
    if getattr(orig, "pgcode", None) == "23505" or "unique" in text or "duplicate key" in text:
        return UniqueViolation(f"Duplicate row in {table}")
    return ValidationError(f"Row rejected by {table}: {orig}")


@transactional
def select_rows(
    session: Session,
    table: str,
    filters: Optional[Mapping[str, Any]] = None,
    joins: Iterable[str] = (),
    order_by: Optional[str] = None,
    descending: bool = False,
    limit: Optional[int] = None,
) -> list:
    """
    Select rows from a table, optionally embedding joins.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    table : str
        Served table name (see `TABLES`).
    filters : Mapping[str, Any] | None
        Column filters; collections match with ``IN``.
    joins : Iterable[str]
        Named joins from `JOINS`.
    order_by : str | None
        Ordering column.
    descending : bool
        Reverse ordering.
    limit : int | None
        Maximum number of rows.

    Returns
    -------
    list[dict]
        One dict per row, with embedded joins under their names.
    """
    dao = table_dao(table)
    specs = [(name, _join_spec(table, name)) for name in joins]
    rows = [dao.rowToDict(row) for row in dao.fetchRows(session, filters, order_by, descending, limit)]
    if not rows:
        return rows

    for name, spec in specs:
        if isinstance(spec, Embed):
            target = TableDao(spec.entity)
            keys = {row[spec.foreign_key] for row in rows}
            embedded = {
                item.id: target.rowToDict(item)
                for item in target.fetchRows(session, {"id": keys})
            }
            for row in rows:
                row[name] = embedded.get(row[spec.foreign_key])
        else:
            counts = TableDao(spec.entity).countGroupedBy(
                session, spec.foreign_key, [row["id"] for row in rows]
            )
            for row in rows:
                row[name] = [{COUNT_KEY: counts.get(row["id"], 0)}]
    return rows


@transactional
def count_rows(session: Session, table: str, filters: Optional[Mapping[str, Any]] = None) -> int:
    """Count rows of `table` matching `filters`."""
    return table_dao(table).countRows(session, filters)


@transactional
def insert_row(session: Session, table: str, record: Mapping[str, Any]) -> dict:
    """
    Insert one row.

    Raises
    ------
    UniqueViolation
        The row collides with a uniqueness constraint.
    ValidationError
        Any other integrity failure (check constraint, missing column value).
    """
    dao = table_dao(table)
    try:
        row = dao.createRow(session, record)
    except IntegrityError as e:
        raise _translate_integrity_error(table, e) from e
    return dao.rowToDict(row)


@transactional
def update_rows(
    session: Session, table: str, filters: Mapping[str, Any], patch: Mapping[str, Any]
) -> list:
    """Patch matching rows and return them as dicts."""
    dao = table_dao(table)
    try:
        rows = dao.updateRows(session, filters, patch)
    except IntegrityError as e:
        raise _translate_integrity_error(table, e) from e
    return [dao.rowToDict(row) for row in rows]


@transactional
def delete_rows(session: Session, table: str, filters: Mapping[str, Any]) -> int:
    """Delete matching rows and return how many were removed."""
    return table_dao(table).deleteRows(session, filters)


def _account_details(account: Account) -> dict:
    return {
        "id": account.id,
        "email": account.email,
        "pen_name": account.pen_name,
        "verified": account.verified,
    }


@transactional
def login_account(session: Session, email: str, password: str) -> dict:
    """
    Authenticate an account by email and password.

    Returns
    -------
    dict
        - authenticated (bool): True if the credentials match.
        - detail (str): Error or info message.
        - account (dict | None): {id, email, pen_name, verified} on success.

    Notes
    -----
    An unconfirmed account with the right password authenticates here; the
    caller decides whether confirmation is required.
    """
    account_dao = AccountDao()
    crypto = CredentialCrypto()
    accounts = account_dao.fetchAccountByEmail(session, email)
    if len(accounts) == 0:
        return {"authenticated": False, "detail": "Invalid login credentials", "account": None}
    account = accounts[0]
    if crypto.check_passwords(password, account.password):
        return {"authenticated": True, "detail": "", "account": _account_details(account)}
    return {"authenticated": False, "detail": "Invalid login credentials", "account": None}


@transactional
def create_account(session: Session, email: str, password: str, pen_name: str) -> dict:
    """
    Validate uniqueness and password policy, create the account and provision
    its profile.

    Returns
    -------
    dict
        - On success: {'res': True, 'reason': '', 'detail': <confirmation code>, 'account': {...}}
        - On failure: {'res': False, 'reason': 'exists' | 'invalid', 'detail': <message>}
    """
    account_dao = AccountDao()
    crypto = CredentialCrypto()
    email = email.strip().lower()
    pen_name = pen_name.strip()
    if "@" not in email:
        return {"res": False, "reason": "invalid", "detail": "A valid email address is required."}
    if not pen_name:
        return {"res": False, "reason": "invalid", "detail": "A pen name is required."}
    if len(account_dao.fetchAccountByEmail(session, email)) > 0:
        return {"res": False, "reason": "exists", "detail": "User already registered"}
    if not crypto.is_valid_password(password):
        return {
            "res": False,
            "reason": "invalid",
            "detail": "Password is invalid. Must contain at least 1 lowercase, 1 uppercase, 1 digit, and 1 special character.",
        }

    code = crypto.generate_verification_code()
    timestamp = datetime.now(timezone.utc)
    account = Account(
        email=email,
        password=password,
        pen_name=pen_name,
        verification_code=code,
        code_created_on=timestamp.isoformat(),
    )
    account_dao.createAccount(session=session, account=account)
    TableDao(Profile).createRow(
        session,
        {"id": account.id, "pen_name": pen_name, "created_at": timestamp, "updated_at": timestamp},
    )
    return {"res": True, "reason": "", "detail": code, "account": _account_details(account)}


@transactional
def check_verification_code(session: Session, email: str, user_code: str, ttl_minutes: int) -> dict:
    """
    Confirm an account's email by checking its code and expiry.

    Returns
    -------
    dict
        - {'res': True, 'detail': ''} if confirmed.
        - {'res': False, 'detail': <reason>} if unknown, expired or mismatched.
    """
    account_dao = AccountDao()
    accounts = account_dao.fetchAccountByEmail(session, email)
    if len(accounts) == 0:
        return {"res": False, "detail": "No account was found with that email"}
    account = accounts[0]
    created = account.code_created_on
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    if datetime.now(timezone.utc) > created + timedelta(minutes=ttl_minutes):
        return {"res": False, "detail": "Verification code expired"}
    if user_code != account.verification_code:
        return {"res": False, "detail": "Verification code does not match"}
    account_dao.updateVerified(session=session, email=email)
    return {"res": True, "detail": ""}


@transactional
def renew_verification_code(session: Session, email: str) -> dict:
    """
    Generate and store a new confirmation code.

    Returns
    -------
    dict
        - {'res': True, 'detail': <code>} when a new code was stored.
        - {'res': False, 'detail': <reason>} for unknown or already confirmed accounts.
    """
    account_dao = AccountDao()
    crypto = CredentialCrypto()
    accounts = account_dao.fetchAccountByEmail(session, email)
    if len(accounts) == 0:
        return {"res": False, "detail": "No account was found with that email"}
    if accounts[0].verified:
        return {"res": False, "detail": "Email address is already confirmed"}
    code = crypto.generate_verification_code()
    account_dao.updateVerCode(
        session=session,
        email=email,
        code=code,
        code_created_on=datetime.now(timezone.utc),
    )
    return {"res": True, "detail": code}


@transactional
def update_session_token(session: Session, account_id: uuid.UUID, token: Optional[str]) -> None:
    """Store (or clear) the last issued session token of an account."""
    AccountDao().updateToken(session, account_id, token)


@transactional
def get_account(session: Session, account_id: uuid.UUID) -> Optional[dict]:
    """Return account details by id, or None."""
    accounts = AccountDao().fetchAccountById(session, account_id)
    return _account_details(accounts[0]) if accounts else None
