"""
Identity provider capability.

The client core never talks to an identity backend directly; it consumes an
`AuthService`. Implementations report session transitions to subscribers
through `on_session_change`, which returns an unsubscribe callable.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional

from anonverse.models import AuthSession

logger = logging.getLogger(__name__)


class SessionEvent(str, Enum):
    """Kinds of session-change notifications."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


SessionListener = Callable[[SessionEvent, Optional[AuthSession]], None]


class AuthService(ABC):
    """
    Identity/session provider.

    Failure contract
    ----------------
    - `sign_in`: `InvalidCredentials`, `UnconfirmedAccount`
    - `sign_up`: `AlreadyExists`, `ValidationError`
    - `resend_confirmation`: `DeliveryError`
    """

    def __init__(self):
        self._listeners: List[SessionListener] = []

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """
        Subscribe to session changes.

        Returns
        -------
        Callable[[], None]
            Releases the subscription. Calling it twice is harmless.
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, event: SessionEvent, session: Optional[AuthSession]) -> None:
        for listener in list(self._listeners):
            listener(event, session)

    @abstractmethod
    async def get_current_session(self) -> Optional[AuthSession]:
        """Return the live session, or None."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Open a session for an existing, confirmed account."""

    @abstractmethod
    async def sign_up(self, email: str, password: str, pen_name: str) -> Optional[AuthSession]:
        """
        Create an account.

        Returns the new session when the provider signs the user in straight
        away, or None when email confirmation is pending.
        """

    @abstractmethod
    async def sign_out(self) -> None:
        """Close the live session, if any."""

    @abstractmethod
    async def resend_confirmation(self, email: str) -> None:
        """Send a new confirmation message for an unconfirmed account."""
