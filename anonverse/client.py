"""
Client facade.

`AnonverseClient` wires the session store, feed aggregator, mutation engine,
social graph tracker and profile directory around one `AuthService`, one
`DataService` and the device state, and applies the error propagation
policy to UI-initiated actions:

- `PolicyError` (a tier changed mid-action, a hidden control was bypassed)
  is a silent no-op.
- `DataError` / `AuthError` become a user-visible message. Already rendered
  state is left untouched.

Every action reads the viewer identity from the session store at the
moment it runs.

Usage
-----
.. code-block:: python

    async with AnonverseClient(LocalAuthService(), SqlDataService()) as client:
        await client.session.wait_ready()
        if client.needs_entry:
            client.enter_guest()
        await client.refresh_feed()
        for item in client.feed.items:
            ...
"""

import logging
from typing import Awaitable, Optional
from uuid import UUID

from anonverse.errors import AnonverseError, PolicyError
from anonverse.models import ActionOutcome, Identity
from anonverse.services.auth_service import AuthService
from anonverse.services.data_service import DataService
from anonverse.state.access import AccessTier, Action, allowed, needs_entry, require, resolve_tier
from anonverse.state.device_state import LocalDeviceState
from anonverse.state.feed import FeedAggregator
from anonverse.state.mutations import OptimisticMutationEngine
from anonverse.state.profiles import ProfileDirectory
from anonverse.state.session_store import SessionStore
from anonverse.state.social_graph import SocialGraphTracker

logger = logging.getLogger(__name__)


class AnonverseClient:
    """
    One client session on one device.

    Parameters
    ----------
    auth : AuthService
        Identity provider.
    data : DataService
        Data store.
    device : LocalDeviceState, optional
        Device flags; defaults to the configured location.
    """

    def __init__(self, auth: AuthService, data: DataService, device: Optional[LocalDeviceState] = None):
        self.device = device or LocalDeviceState()
        self.session = SessionStore(auth, self.device)
        self.feed = FeedAggregator(data, viewer_source=lambda: self.session.identity)
        self.mutations = OptimisticMutationEngine(data, self.feed, self.device)
        self.graph = SocialGraphTracker(data, self.device)
        self.profiles = ProfileDirectory(data, self.device)

    async def __aenter__(self) -> "AnonverseClient":
        await self.session.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.session.close()

    @property
    def viewer(self) -> Optional[Identity]:
        return self.session.identity

    @property
    def tier(self) -> AccessTier:
        return resolve_tier(self.session.identity is not None, self.device.guest_flag)

    @property
    def needs_entry(self) -> bool:
        """True while the caller has neither signed in nor chosen guest mode."""
        return needs_entry(self.tier)

    def can(self, action: Action) -> bool:
        """Whether the affordance for `action` should be shown."""
        return allowed(self.tier, action)

    def enter_guest(self) -> bool:
        """
        Switch from anonymous to guest browsing.

        Returns False, without touching the flag, for a signed-in caller.
        """
        if self.tier is AccessTier.AUTHENTICATED:
            logger.info("Ignoring guest entry for a signed-in user")
            return False
        self.device.set_guest_flag()
        return True

    def exit_guest(self) -> None:
        """Leave guest mode, back to anonymous."""
        self.device.clear_guest_flag()

    async def perform(self, operation: Awaitable) -> ActionOutcome:
        """Await `operation` and fold its errors into an `ActionOutcome`."""
        try:
            value = await operation
        except PolicyError as e:
            logger.info("Ignoring rejected action: %s", e)
            return ActionOutcome(ok=False, error=type(e).__name__)
        except AnonverseError as e:
            logger.warning("Action failed: %s: %s", type(e).__name__, e)
            return ActionOutcome(ok=False, message=str(e), error=type(e).__name__)
        return ActionOutcome(ok=True, value=value)

    async def _read(self, action: Action, operation):
        require(self.tier, action)
        return await operation()

    async def sign_in(self, email: str, password: str) -> ActionOutcome:
        return await self.perform(self.session.sign_in(email, password))

    async def sign_up(self, email: str, password: str, pen_name: str) -> ActionOutcome:
        return await self.perform(self.session.sign_up(email, password, pen_name))

    async def sign_out(self) -> ActionOutcome:
        return await self.perform(self.session.sign_out())

    async def resend_confirmation(self, email: str) -> ActionOutcome:
        return await self.perform(self.session.resend_confirmation(email))

    async def refresh_feed(self) -> ActionOutcome:
        return await self.perform(self._read(Action.VIEW_FEED, self.feed.refresh))

    async def like(self, poem_id: UUID) -> ActionOutcome:
        return await self.perform(self.mutations.like(poem_id, self.viewer))

    async def unlike(self, poem_id: UUID) -> ActionOutcome:
        return await self.perform(self.mutations.unlike(poem_id, self.viewer))

    async def toggle_like(self, poem_id: UUID) -> ActionOutcome:
        view = self.feed.engagement(poem_id)
        if view is not None and view.viewer_has_liked:
            return await self.unlike(poem_id)
        return await self.like(poem_id)

    async def toggle_comments(self, poem_id: UUID) -> ActionOutcome:
        return await self.perform(
            self._read(Action.VIEW_COMMENTS, lambda: self.mutations.toggle_comments(poem_id))
        )

    async def post_comment(self, poem_id: UUID, text: str) -> ActionOutcome:
        outcome = await self.perform(self.mutations.post_comment(poem_id, self.viewer, text))
        if outcome.ok and outcome.value.refresh_suggested:
            refreshed = await self.refresh_feed()
            if not refreshed.ok:
                logger.warning("Feed refresh after comment failed: %s", refreshed.message)
        return outcome

    async def create_poem(self, title: str, content: str) -> ActionOutcome:
        outcome = await self.perform(self.mutations.create_poem(self.viewer, title, content))
        if outcome.ok:
            await self.refresh_feed()
        return outcome

    async def load_profile(self, profile_id: UUID) -> ActionOutcome:
        async def load():
            profile = await self.profiles.fetch_profile(profile_id)
            follow_state = await self.graph.load_follow_state(self.viewer, profile)
            return profile, follow_state

        return await self.perform(self._read(Action.VIEW_PROFILE, load))

    async def update_profile(self, pen_name: str, bio: Optional[str]) -> ActionOutcome:
        return await self.perform(self.profiles.update_profile(self.viewer, pen_name, bio))

    async def follow(self, target: Identity) -> ActionOutcome:
        return await self.perform(self.graph.follow(self.viewer, target))

    async def unfollow(self, target: Identity) -> ActionOutcome:
        return await self.perform(self.graph.unfollow(self.viewer, target))

    async def toggle_follow(self, target: Identity) -> ActionOutcome:
        state = self.graph.states.get(target.id)
        if state is not None and state.viewer_is_following:
            return await self.unfollow(target)
        return await self.follow(target)
