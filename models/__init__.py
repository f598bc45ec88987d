"""Database models package.

This package contains the SQLAlchemy ORM model definitions for the application.
Each model lives in its own module (user, login_record, user_activity,
external_account) and is re-exported here for convenience. Login and activity
records form an append-only log: flushing a change to an already persisted
record raises.
"""
from sqlalchemy import event
from sqlalchemy.orm import object_session

# Re-export model classes from individual modules
from .user import User  # noqa: F401
from .login_record import LoginRecord, LoginMethod  # noqa: F401
from .user_activity import UserActivity  # noqa: F401
from .external_account import ExternalAccount  # noqa: F401

__all__ = ["User", "LoginRecord", "LoginMethod", "UserActivity", "ExternalAccount", "AppendOnlyError"]


class AppendOnlyError(Exception):
    """Raised when a persisted log record is modified."""


def _reject_update(mapper, connection, target):
    session = object_session(target)
    if session is not None and session.is_modified(target, include_collections=False):
        raise AppendOnlyError(f'{target.__class__.__name__} {target.id} is append-only')


event.listen(LoginRecord, 'before_update', _reject_update)
event.listen(UserActivity, 'before_update', _reject_update)
