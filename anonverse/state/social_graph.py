"""
Follower/following counts and the viewer's follow relationship.

Counts come from the ``followers`` table. Follow and unfollow update the
cached `FollowState` of the target (and the viewer's own following count, if
cached) as soon as the write succeeds.
"""

import logging
from typing import Dict, Optional
from uuid import UUID

from anonverse.errors import InvalidOperation, UniqueViolation
from anonverse.models import FollowState, Identity
from anonverse.services.data_service import DataService
from anonverse.state.access import Action, authorize
from anonverse.state.device_state import LocalDeviceState

logger = logging.getLogger(__name__)


class SocialGraphTracker:
    """
    Parameters
    ----------
    data : DataService
        Data store.
    device : LocalDeviceState
        Device flags used for tier resolution.
    """

    def __init__(self, data: DataService, device: LocalDeviceState):
        self._data = data
        self._device = device
        self.states: Dict[UUID, FollowState] = {}

    def _state(self, profile_id: UUID) -> FollowState:
        return self.states.setdefault(profile_id, FollowState())

    async def load_follow_state(self, viewer: Optional[Identity], target: Identity) -> FollowState:
        """
        Load counts for `target` and whether `viewer` follows it.

        The relationship is only queried for a viewer looking at someone
        else's profile.
        """
        followers = await self._data.count("followers", {"following_id": target.id})
        following = await self._data.count("followers", {"follower_id": target.id})
        can_follow = viewer is not None and viewer.id != target.id
        is_following = False
        if can_follow:
            rows = await self._data.select(
                "followers", filters={"follower_id": viewer.id, "following_id": target.id}, limit=1
            )
            is_following = bool(rows)
        state = FollowState(
            follower_count=followers,
            following_count=following,
            viewer_is_following=is_following,
            can_follow=can_follow,
        )
        self.states[target.id] = state
        return state

    def _check(self, viewer: Optional[Identity], target: Identity, action: Action) -> None:
        authorize(viewer, self._device, action)
        if viewer.id == target.id:
            raise InvalidOperation("You cannot follow yourself")

    async def follow(self, viewer: Optional[Identity], target: Identity) -> FollowState:
        """
        Follow `target`.

        An existing edge counts as success without bumping the count again.

        Raises
        ------
        Forbidden
            Guest or anonymous caller. Nothing is written.
        InvalidOperation
            `viewer` is `target`. Counts are unchanged.
        """
        self._check(viewer, target, Action.FOLLOW)
        state = self._state(target.id)
        try:
            await self._data.insert("followers", {"follower_id": viewer.id, "following_id": target.id})
        except UniqueViolation:
            logger.debug("%s already follows %s", viewer.id, target.id)
            state.viewer_is_following = True
            return state
        state.record_follow()
        own = self.states.get(viewer.id)
        if own is not None:
            own.following_count += 1
        return state

    async def unfollow(self, viewer: Optional[Identity], target: Identity) -> FollowState:
        """Unfollow `target`. The local follower count never drops below zero."""
        self._check(viewer, target, Action.UNFOLLOW)
        await self._data.delete("followers", {"follower_id": viewer.id, "following_id": target.id})
        state = self._state(target.id)
        state.record_unfollow()
        own = self.states.get(viewer.id)
        if own is not None:
            own.following_count = max(0, own.following_count - 1)
        return state
