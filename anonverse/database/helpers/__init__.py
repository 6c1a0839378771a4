"""
The `helpers` package provides the transaction plumbing shared by the
transactional operations in `anonverse.database.core`.

Contents
--------
- transactionManagement
    - Context variable (`db_session_context`) propagating the active session across calls
    - `SessionFactory` plus `bind_engine` to point it at another engine (tests, tooling)
    - `@transactional` decorator: reuses a session already in context, otherwise
      creates, commits and closes one, rolling back on errors
"""
