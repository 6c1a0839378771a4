"""
Local identity provider.

`LocalAuthService` keeps accounts in the configured SQL database and issues
signed session tokens. It exists so the client core can run end to end
without a hosted identity backend.

Flow
----
- `sign_up` creates an unconfirmed account (and its profile) and emails a
  numeric confirmation code. No session is opened.
- `confirm` checks the code within `settings.VERIFICATION_CODE_TTL_MINUTES`.
- `sign_in` requires a confirmed account; it issues a token, remembers the
  session and notifies subscribers with `SIGNED_IN`.
- `refresh_session` re-issues the token (`TOKEN_REFRESHED`); `sign_out`
  drops it (`SIGNED_OUT`).
"""

import asyncio
import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from anonverse.crypt.encrypt_decrypt import CredentialCrypto
from anonverse.database.config.config import settings
from anonverse.database.core import funcs
from anonverse.errors import (
    AlreadyExists,
    DeliveryError,
    FetchError,
    InvalidCredentials,
    UnconfirmedAccount,
    ValidationError,
)
from anonverse.models import AuthSession, AuthUser
from anonverse.services.auth_service import AuthService, SessionEvent
from anonverse.services.mailer import SmtpMailer

logger = logging.getLogger(__name__)


class LocalAuthService(AuthService):
    """
    Identity provider backed by the local `account` table.

    Parameters
    ----------
    mailer : Callable[[str, str], None], optional
        Delivers ``(email, code)``; must raise `DeliveryError` on failure.
        Defaults to `SmtpMailer()`.
    crypto : CredentialCrypto, optional
        Token signer; defaults to one built from settings.
    code_ttl_minutes : int, optional
        Confirmation code lifetime.
    """

    def __init__(
        self,
        mailer: Optional[Callable[[str, str], None]] = None,
        crypto: Optional[CredentialCrypto] = None,
        code_ttl_minutes: Optional[int] = None,
    ):
        super().__init__()
        self._mailer = mailer or SmtpMailer()
        self._crypto = crypto or CredentialCrypto()
        self._code_ttl = code_ttl_minutes or settings.VERIFICATION_CODE_TTL_MINUTES
        self._current: Optional[AuthSession] = None

    async def _run(self, operation, **kwargs):
        try:
            return await asyncio.to_thread(operation, **kwargs)
        except SQLAlchemyError as e:
            raise FetchError(f"{operation.__name__} failed") from e

    async def _deliver(self, email: str, code: str) -> None:
        try:
            await asyncio.to_thread(self._mailer, email, code)
        except DeliveryError:
            raise
        except Exception as e:
            raise DeliveryError(f"Could not deliver confirmation email: {e}") from e

    async def _open_session(self, account: dict, event: SessionEvent) -> AuthSession:
        user = AuthUser(id=account["id"], email=account["email"], pen_name=account["pen_name"])
        token, expires_at = self._crypto.issue_access_token({"sub": str(user.id), "email": user.email})
        await self._run(funcs.update_session_token, account_id=user.id, token=token)
        self._current = AuthSession(access_token=token, user=user, expires_at=expires_at)
        logger.info("Session %s for %s", event.value, user.email)
        self._notify(event, self._current)
        return self._current

    async def get_current_session(self) -> Optional[AuthSession]:
        if self._current is None:
            return None
        if self._crypto.decode_access_token(self._current.access_token) is None:
            logger.info("Session for %s expired", self._current.user.email)
            self._current = None
        return self._current

    async def sign_in(self, email: str, password: str) -> AuthSession:
        auth = await self._run(funcs.login_account, email=email, password=password)
        if not auth["authenticated"]:
            raise InvalidCredentials(auth["detail"])
        if not auth["account"]["verified"]:
            raise UnconfirmedAccount("Email not confirmed")
        return await self._open_session(auth["account"], SessionEvent.SIGNED_IN)

    async def sign_up(self, email: str, password: str, pen_name: str) -> Optional[AuthSession]:
        res = await self._run(funcs.create_account, email=email, password=password, pen_name=pen_name)
        if not res["res"]:
            if res["reason"] == "exists":
                raise AlreadyExists(res["detail"])
            raise ValidationError(res["detail"])
        await self._deliver(res["account"]["email"], res["detail"])
        return None

    async def confirm(self, email: str, code: str) -> None:
        """
        Confirm an account with the emailed code.

        Raises
        ------
        ValidationError
            Unknown email, expired or mismatched code.
        """
        res = await self._run(
            funcs.check_verification_code, email=email, user_code=code, ttl_minutes=self._code_ttl
        )
        if not res["res"]:
            raise ValidationError(res["detail"])

    async def refresh_session(self) -> Optional[AuthSession]:
        """Re-issue the token of the live session. Returns None without one."""
        session = await self.get_current_session()
        if session is None:
            return None
        account = await self._run(funcs.get_account, account_id=session.user.id)
        if account is None:
            await self.sign_out()
            return None
        return await self._open_session(account, SessionEvent.TOKEN_REFRESHED)

    async def sign_out(self) -> None:
        session, self._current = self._current, None
        if session is not None:
            await self._run(funcs.update_session_token, account_id=session.user.id, token=None)
            logger.info("Session SIGNED_OUT for %s", session.user.email)
        self._notify(SessionEvent.SIGNED_OUT, None)

    async def resend_confirmation(self, email: str) -> None:
        res = await self._run(funcs.renew_verification_code, email=email)
        if not res["res"]:
            raise DeliveryError(res["detail"])
        await self._deliver(email.strip().lower(), res["detail"])
