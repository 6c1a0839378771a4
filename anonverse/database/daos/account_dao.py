"""
Account DAO

Purpose
-------
Thin data-access layer for the `Account` ORM entity. Provides:
- Creation with password hashing
- Lookup by email or id
- Confirmation status, confirmation-code and session-token updates

Design
------
- The DAO expects an active SQLAlchemy `Session` supplied by the caller.
- Passwords are hashed using `CredentialCrypto.hash_password(...)` before insert.
- Lookups return lists (at most one row) so callers can test emptiness.

Error Handling
--------------
- Each method logs the failure and re-raises.
- Methods using `.one()` raise `NoResultFound` when the account is missing.
"""

import logging
import uuid
from sqlalchemy.orm import Session
from anonverse.database.entities.user import Account
from anonverse.crypt.encrypt_decrypt import CredentialCrypto

logger = logging.getLogger(__name__)


class AccountDao:
    """
    Data Access Object (DAO) for managing Account entities.
    """

    def createAccount(self, session: Session, account: Account) -> bool:
        """
        Stage a new account with a hashed password.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        account : Account
            Account entity carrying the plaintext password.

        Returns
        -------
        bool
            True once the account is added to the session.
        """
        try:
            crypto = CredentialCrypto()
            account.password = crypto.hash_password(text=account.password)
            session.add(account)
            return True
        except Exception:
            logger.exception("Error in AccountDao.createAccount")
            raise

    def fetchAccountByEmail(self, session: Session, email: str) -> list:
        """
        Fetch an account by email (case-insensitive on the stored lowercase form).

        Returns
        -------
        list[Account]
            At most one account.
        """
        try:
            return session.query(Account).filter(Account.email == email.strip().lower()).limit(1).all()
        except Exception:
            logger.exception("Error in AccountDao.fetchAccountByEmail")
            raise

    def fetchAccountById(self, session: Session, account_id: uuid.UUID) -> list:
        """Fetch an account by id. Returns a list with at most one account."""
        try:
            return session.query(Account).filter(Account.id == account_id).limit(1).all()
        except Exception:
            logger.exception("Error in AccountDao.fetchAccountById")
            raise

    def updateVerified(self, session: Session, email: str) -> None:
        """
        Mark an account as confirmed.

        Raises
        ------
        NoResultFound
            If no account has that email.
        """
        try:
            account = session.query(Account).filter(Account.email == email.strip().lower()).one()
            account.verified = True
        except Exception:
            logger.exception("Error in AccountDao.updateVerified")
            raise

    def updateVerCode(self, session: Session, email: str, code: str, code_created_on) -> None:
        """
        Replace the confirmation code and its creation timestamp.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        email : str
            Email of the account.
        code : str
            The new confirmation code.
        code_created_on : datetime
            Timestamp when the code was generated.
        """
        try:
            account = session.query(Account).filter(Account.email == email.strip().lower()).one()
            account.verification_code = code
            account.code_created_on = code_created_on
        except Exception:
            logger.exception("Error in AccountDao.updateVerCode")
            raise

    def updateToken(self, session: Session, account_id: uuid.UUID, token) -> None:
        """Store the last issued session token (or None on sign-out)."""
        try:
            account = session.query(Account).filter(Account.id == account_id).one()
            account.session_id = token
        except Exception:
            logger.exception("Error in AccountDao.updateToken")
            raise
