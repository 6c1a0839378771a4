"""
errors.py
---------
Exception hierarchy of the Anonverse client core.

Exception Hierarchy:
    AnonverseError
    ├── AuthError - identity provider failures
    │   ├── InvalidCredentials - wrong email/password pair
    │   ├── UnconfirmedAccount - account exists but email is not confirmed
    │   ├── DeliveryError - provider could not send a confirmation message
    │   └── AlreadyExists - sign-up for an email that already has an account
    ├── DataError - data service failures
    │   ├── FetchError - transport or query failure
    │   ├── UniqueViolation - insert collided with a uniqueness constraint
    │   ├── ValidationError - rejected input
    │   └── NotFound - targeted row does not exist
    └── PolicyError - client-side capability policy
        ├── Forbidden - the caller's tier may not perform the action
        └── InvalidOperation - the action makes no sense for its arguments

Usage:
    from anonverse.errors import DataError, UniqueViolation

    try:
        await data.insert("likes", record)
    except UniqueViolation:
        pass  # already liked
"""


class AnonverseError(Exception):
    """Base class of every error raised by the package."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class AuthError(AnonverseError):
    """Base exception for identity provider failures."""


class InvalidCredentials(AuthError):
    """The email/password pair does not match an account."""


class UnconfirmedAccount(AuthError):
    """
    The account exists but its email address has not been confirmed.

    Callers may offer `resend_confirmation` for the same email.
    """


class DeliveryError(AuthError):
    """The provider rejected or failed to deliver a confirmation message."""


class AlreadyExists(AuthError):
    """Sign-up attempted for an email that already has an account."""


class DataError(AnonverseError):
    """Base exception for data service failures."""


class FetchError(DataError):
    """
    Transport or query failure.

    A failed feed refresh raises this and leaves the previously rendered
    feed untouched.
    """


class UniqueViolation(DataError):
    """An insert collided with a uniqueness constraint."""


class ValidationError(DataError):
    """Input rejected by the client or the data store."""


class NotFound(DataError):
    """The targeted row does not exist."""


class PolicyError(AnonverseError):
    """Base exception for capability policy violations."""


class Forbidden(PolicyError):
    """
    The caller's access tier does not permit the action.

    Attributes:
        tier: AccessTier the request was evaluated under
        action: Action that was refused
    """

    def __init__(self, tier, action, message: str = ""):
        super().__init__(message or f"{tier.value} callers may not {action.value}")
        self.tier = tier
        self.action = action


class InvalidOperation(PolicyError):
    """The action is not meaningful for its arguments (e.g. following yourself)."""
