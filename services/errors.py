"""Exceptions raised by the service layer."""


class StorageError(Exception):
    """A database operation failed; the session has been rolled back."""


class UsernameTakenError(ValueError):
    """Registration attempted with a username that already exists."""


class IdentityVerificationError(Exception):
    """An external identity provider token could not be verified."""
