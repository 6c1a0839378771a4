"""
The `database` package backs the SQL data service and the local identity
provider.

Contents:
    - config:
        Typed settings and the SQLAlchemy engine, metadata and declarative base.

    - entities:
        ORM models for accounts, profiles, poems, likes, comments and follow edges.

    - daos:
        `AccountDao` and the entity-agnostic `TableDao`.

    - core:
        Transactional operations called by the service adapters.

    - helpers:
        Session context and the `@transactional` decorator.
"""
