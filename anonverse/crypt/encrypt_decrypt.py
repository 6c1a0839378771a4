"""
Credential cryptography: password hashing and policy, confirmation codes and
signed session tokens.

Environment contract (from `settings`)
--------------------------------------
SECRET_KEY : str
    HMAC signing key for session tokens.
ALGORITHM : str
    JWT signing algorithm (e.g., "HS256").
ACCESS_TOKEN_EXPIRE_MINUTES : int
    Default token lifetime window in minutes.
PASSWORD_MIN_LENGTH : int
    Minimum password length accepted by `is_valid_password`.
"""

import re
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt, JWTError
from anonverse.database.config.config import settings


class CredentialCrypto:
    """
    Utility class for password hashing, validation, confirmation codes and
    session tokens.

    Parameters
    ----------
    secret_key : str, optional
        Token signing key. Defaults to `settings.SECRET_KEY`.
    algorithm : str, optional
        Token signing algorithm. Defaults to `settings.ALGORITHM`.
    """

    def __init__(self, secret_key: Optional[str] = None, algorithm: Optional[str] = None):
        self.secret_key = secret_key or settings.SECRET_KEY
        self.algorithm = algorithm or settings.ALGORITHM

    def hash_password(self, text: str) -> str:
        """
        Hash a plaintext password using bcrypt.

        Returns
        -------
        str
            The bcrypt-hashed password (UTF-8 decoded).
        """
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(text.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def check_passwords(self, plain_text: str, passwd: str) -> bool:
        """Return True if `plain_text` matches the bcrypt hash `passwd`."""
        return bcrypt.checkpw(plain_text.encode("utf-8"), passwd.encode("utf-8"))

    def is_valid_password(self, password: str) -> bool:
        """
        Validate that a password meets the complexity rules.

        Notes
        -----
        - Minimum length: `settings.PASSWORD_MIN_LENGTH`
        - Must contain at least one lowercase letter, one uppercase letter,
          one digit and one special character (!@#$%^&*(),.?":{}|<>)
        """
        if len(password) < settings.PASSWORD_MIN_LENGTH:
            return False

        has_lower = re.search(r"[a-z]", password)
        has_upper = re.search(r"[A-Z]", password)
        has_digit = re.search(r"\d", password)
        has_special = re.search(r"[!@#$%^&*(),.?\":{}|<>]", password)

        return all([has_lower, has_upper, has_digit, has_special])

    def generate_verification_code(self, length: int = 6) -> str:
        """
        Generate a numeric confirmation code of the given length.

        Example
        -------
        >>> CredentialCrypto().generate_verification_code()
        '493027'
        """
        return "".join(secrets.choice(string.digits) for _ in range(length))

    def issue_access_token(self, claims: dict, expires_minutes: Optional[int] = None) -> tuple:
        """
        Create a signed session token.

        Parameters
        ----------
        claims : dict
            Claims to embed (`sub` should carry the principal id).
        expires_minutes : int, optional
            Lifetime override; defaults to `settings.ACCESS_TOKEN_EXPIRE_MINUTES`.

        Returns
        -------
        tuple[str, datetime]
            The encoded token and its UTC expiry.
        """
        lifetime = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=int(lifetime))
        encoding = dict(claims)
        encoding.update({"exp": int(expires_at.timestamp())})
        token = jwt.encode(encoding, self.secret_key, algorithm=self.algorithm)
        return token, expires_at

    def decode_access_token(self, token: str) -> Optional[dict]:
        """
        Verify a session token's signature and expiry.

        Returns
        -------
        dict | None
            The claims if the token is valid, otherwise None.
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
