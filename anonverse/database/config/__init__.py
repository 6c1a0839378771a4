"""
The `config` package provides the two building blocks the data layer is bootstrapped from.

Contents:
    - config: Configuration layer - strongly typed settings loaded from environment variables (with .env support), exposed through a singleton Settings object
    - connection_engine: Database layer - SQLAlchemy bootstrap that creates the Engine from the configured URL, the shared MetaData, and the declarative base for ORM models
"""
