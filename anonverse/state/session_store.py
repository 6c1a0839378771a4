"""
Process-wide cache of the current authenticated identity.

State machine
-------------
``LOADING -> {UNAUTHENTICATED, AUTHENTICATED(identity)}``

The store starts in ``LOADING``. Opening it subscribes to the provider's
session-change notifications and starts one initial session lookup. Every
notification replaces the state; ``LOADING`` is never re-entered. If a
notification is applied before the initial lookup returns, the lookup
result is dropped as older information.

Notifications are pushed onto an ``asyncio.Queue`` owned by the store and
applied in order by a single consumer task. The subscription is released
and the tasks are cancelled when the store is closed; use the store as an
async context manager to tie both to a scope::

    async with SessionStore(auth, device) as store:
        await store.wait_ready()
        viewer = store.identity
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from anonverse.errors import AlreadyExists, AuthError, DataError
from anonverse.models import AuthSession, Identity
from anonverse.services.auth_service import AuthService, SessionEvent
from anonverse.state.device_state import LocalDeviceState

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus
    identity: Optional[Identity] = None
    session: Optional[AuthSession] = None


LOADING = SessionState(SessionStatus.LOADING)
UNAUTHENTICATED = SessionState(SessionStatus.UNAUTHENTICATED)


def state_for(session: Optional[AuthSession]) -> SessionState:
    if session is None:
        return UNAUTHENTICATED
    return SessionState(SessionStatus.AUTHENTICATED, session.user.to_identity(), session)


class SessionStore:
    """
    Holds the current session state and exposes the account operations.

    Parameters
    ----------
    auth : AuthService
        Identity provider.
    device : LocalDeviceState
        Device flags; the guest flag is cleared whenever the user
        authenticates.
    """

    def __init__(self, auth: AuthService, device: LocalDeviceState):
        self._auth = auth
        self._device = device
        self._state = LOADING
        self._events: Optional[asyncio.Queue] = None
        self._ready: Optional[asyncio.Event] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._consumer: Optional[asyncio.Task] = None
        self._lookup: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "SessionStore":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def identity(self) -> Optional[Identity]:
        """Current viewer identity. Read it at the point of use."""
        return self._state.identity

    @property
    def is_loading(self) -> bool:
        return self._state.status is SessionStatus.LOADING

    @property
    def is_open(self) -> bool:
        return self._unsubscribe is not None

    async def open(self) -> None:
        """Subscribe to session changes and start the initial lookup."""
        if self.is_open:
            return
        self._events = asyncio.Queue()
        self._ready = asyncio.Event()
        self._unsubscribe = self._auth.on_session_change(self._enqueue)
        self._consumer = asyncio.create_task(self._consume())
        self._lookup = asyncio.create_task(self._initial_lookup())

    async def close(self) -> None:
        """Release the subscription and stop the background tasks."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for task in (self._lookup, self._consumer):
            if task is not None and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        self._lookup = self._consumer = None

    async def wait_ready(self) -> SessionState:
        """Wait until the state has left LOADING and return it."""
        if self._ready is None:
            raise RuntimeError("SessionStore is not open")
        await self._ready.wait()
        return self._state

    def _enqueue(self, event: SessionEvent, session: Optional[AuthSession]) -> None:
        self._events.put_nowait((event, session))

    async def _consume(self) -> None:
        while True:
            event, session = await self._events.get()
            try:
                self._apply(state_for(session), event.value)
            finally:
                self._events.task_done()

    async def _initial_lookup(self) -> None:
        try:
            session = await self._auth.get_current_session()
        except (AuthError, DataError) as e:
            logger.warning("Initial session lookup failed: %s", e)
            session = None
        except Exception:
            logger.exception("Initial session lookup raised")
            session = None
        if self._state.status is SessionStatus.LOADING:
            self._apply(state_for(session), "initial lookup")

    def _apply(self, state: SessionState, source: str) -> None:
        self._state = state
        logger.info("Session state -> %s (%s)", state.status.value, source)
        self._ready.set()

    async def _settle(self) -> None:
        """Wait until every queued notification has been applied."""
        if self._events is not None:
            await self._events.join()

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Sign in and wait for the resulting state.

        Raises
        ------
        InvalidCredentials, UnconfirmedAccount
        """
        session = await self._auth.sign_in(email, password)
        self._device.clear_guest_flag()
        await self._settle()
        return session

    async def sign_up(self, email: str, password: str, pen_name: str) -> Optional[AuthSession]:
        """
        Create an account, or sign in if the credentials already match one.

        Returns
        -------
        AuthSession | None
            The session when the user ends up signed in, None while email
            confirmation is pending.
        """
        try:
            session = await self._auth.sign_up(email, password, pen_name)
        except AlreadyExists:
            logger.info("Account for %s already exists, signing in instead", email)
            return await self.sign_in(email, password)
        if session is not None:
            self._device.clear_guest_flag()
        await self._settle()
        return session

    async def sign_out(self) -> None:
        await self._auth.sign_out()
        await self._settle()

    async def resend_confirmation(self, email: str) -> None:
        """Ask the provider for a new confirmation message. State is untouched."""
        await self._auth.resend_confirmation(email)
