"""
Entities Package — SQLAlchemy 2.0 ORM Models (UUID + UTC)
=========================================================

The `entities` package maps the data store tables to Python classes using
SQLAlchemy 2.0 typed mappings. The classes are consumed by the DAOs (`daos`
package) and, through them, by the transactional operations in
`anonverse.database.core.funcs`.

Tech Stack & Conventions
------------------------
- Portable `Uuid` columns (native UUID on PostgreSQL, CHAR(32) elsewhere)
- Timezone-aware timestamps defaulting to the current UTC time
- SQLAlchemy 2.0 style `Mapped[...]` + `mapped_column(...)`

Contents
--------
- Account
    Credentials of an authenticated principal: email, bcrypt hash,
    confirmation state and code, last issued session token.

- Profile
    Public identity of a principal (``profiles``): pen name, bio, avatar.
    Shares its primary key with the owning `Account`.

- Poem
    A poem (``poems``): title, content, author reference.

- Like
    A (poem, user) like record (``likes``). Unique per pair.

- Comment
    A comment on a poem (``comments``).

- Follower
    A follow edge (``followers``): unique per ordered pair, self-follow
    rejected by a check constraint.
"""

from anonverse.database.entities.user import Account
from anonverse.database.entities.profile import Profile
from anonverse.database.entities.poem import Poem
from anonverse.database.entities.engagement import Like, Comment
from anonverse.database.entities.follower import Follower

__all__ = ["Account", "Profile", "Poem", "Like", "Comment", "Follower"]
