"""
DAOs Package — Data Access Layer (SQLAlchemy 2.0)
=================================================

Encapsulates every interaction with the ORM entities behind small CRUD APIs
used by the transactional operations in `anonverse.database.core.funcs`.

Conventions
-----------
- Session lifecycle (open/commit/rollback) is handled by callers
- DAOs log failures and re-raise so upper layers decide error policy

Contents
--------
- AccountDao
    Credentials persistence:
    * Creates accounts with password hashing
    * Fetches accounts by email or id
    * Updates confirmation status, confirmation codes and session tokens

- TableDao
    Entity-agnostic row access used by the table-scoped data service:
    * fetchRows / countRows with equality and membership filters
    * countGroupedBy for aggregate counts keyed by a foreign key
    * createRow / updateRows / deleteRows
"""
