"""
Anonverse client core.

State reconciliation for an anonymous poetry-sharing surface: access tiers,
session state, the feed view model with engagement counts, optimistic
likes/comments, and the follow graph. Identity and persistence are consumed
through the `AuthService` and `DataService` capabilities in
`anonverse.services`.

Packages
--------
- state: the reconciliation components
- services: capability interfaces and the local/SQL adapters
- database: SQLAlchemy configuration, entities, DAOs and transactional operations
- crypt: password hashing, confirmation codes, session tokens
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
