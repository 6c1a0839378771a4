"""
Access tiers and the capability gate.

A caller's tier is derived, never stored remotely:

=============== ============ ===============
session present guest flag   tier
=============== ============ ===============
yes             any          AUTHENTICATED
no              set          GUEST
no              clear        ANONYMOUS
=============== ============ ===============

The gate is a pure predicate. It mirrors the data store's own access rules
for responsiveness; it is checked both when deciding which affordances to
show and again at every mutation entry point.
"""

from enum import Enum
from typing import Optional

from anonverse.errors import Forbidden
from anonverse.models import Identity
from anonverse.state.device_state import LocalDeviceState


class AccessTier(str, Enum):
    GUEST = "guest"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class Action(str, Enum):
    VIEW_FEED = "view feed"
    VIEW_PROFILE = "view profile"
    VIEW_COMMENTS = "view comments"
    LIKE = "like"
    UNLIKE = "unlike"
    COMMENT = "comment"
    CREATE_POEM = "create poem"
    EDIT_PROFILE = "edit profile"
    FOLLOW = "follow"
    UNFOLLOW = "unfollow"


READ_ACTIONS = frozenset({Action.VIEW_FEED, Action.VIEW_PROFILE, Action.VIEW_COMMENTS})
MUTATING_ACTIONS = frozenset(set(Action) - READ_ACTIONS)


def resolve_tier(session_present: bool, guest_flag_set: bool) -> AccessTier:
    """Derive the access tier. A live session always wins over the guest flag."""
    if session_present:
        return AccessTier.AUTHENTICATED
    if guest_flag_set:
        return AccessTier.GUEST
    return AccessTier.ANONYMOUS


def allowed(tier: AccessTier, action: Action) -> bool:
    """
    Return whether `tier` may perform `action`.

    Guests may only read. Anonymous callers may do nothing until they sign
    in or enter guest mode. Authenticated callers may do everything.
    """
    if tier is AccessTier.AUTHENTICATED:
        return True
    if tier is AccessTier.GUEST:
        return action in READ_ACTIONS
    return False


def require(tier: AccessTier, action: Action) -> None:
    """Raise `Forbidden` unless `tier` may perform `action`."""
    if not allowed(tier, action):
        raise Forbidden(tier, action)


def needs_entry(tier: AccessTier) -> bool:
    """True when the caller must first sign in or choose guest mode."""
    return tier is AccessTier.ANONYMOUS


def authorize(viewer: Optional[Identity], device: LocalDeviceState, action: Action) -> None:
    """Resolve the caller's tier from `viewer` and the guest flag, then gate `action`."""
    require(resolve_tier(viewer is not None, device.guest_flag), action)
