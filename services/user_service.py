"""User account service.

Creates, looks up and edits user accounts. Every database failure rolls back
the session and surfaces as ``StorageError``.
"""
from typing import Optional

from flask import current_app
from sqlalchemy import func, or_, update
from sqlalchemy.exc import SQLAlchemyError

from models import User
from models.timestamps import utcnow
from services.errors import StorageError, UsernameTakenError

UPDATABLE_FIELDS = ('email', 'display_name', 'password')


class UserService:

    def __init__(self, db):
        self.db = db

    def get_user(self, user_id: int) -> Optional[User]:
        try:
            return self.db.session.get(User, user_id)
        except SQLAlchemyError as e:
            self._fail(f'Error loading user {user_id}', e)

    def get_user_by_username(self, username: str) -> Optional[User]:
        try:
            return self.db.session.execute(
                self.db.select(User).filter_by(username=username)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            self._fail(f'Error loading user {username!r}', e)

    def get_user_by_email(self, email: str) -> Optional[User]:
        if not email:
            return None
        try:
            return self.db.session.execute(
                self.db.select(User)
                .where(func.lower(User.email) == email.lower())
                .order_by(User.id)
                .limit(1)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            self._fail(f'Error loading user by email {email!r}', e)

    def get_user_by_login(self, identifier: str) -> Optional[User]:
        """Find a user by username first, then by email."""
        try:
            return self.db.session.execute(
                self.db.select(User)
                .where(or_(User.username == identifier, func.lower(User.email) == identifier.lower()))
                .order_by((User.username == identifier).desc(), User.id)
                .limit(1)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            self._fail(f'Error loading user {identifier!r}', e)

    def create_user(self, username: str, password: str, email: str = None,
                    display_name: str = None) -> User:
        """Create a new user with a bcrypt-hashed password."""
        if self.get_user_by_username(username) is not None:
            raise UsernameTakenError(f'Username {username!r} already exists')

        user = User(username=username, email=email, display_name=display_name)
        user.set_password(password)
        try:
            self.db.session.add(user)
            self.db.session.commit()
        except SQLAlchemyError as e:
            self._fail(f'Error creating user {username!r}', e)

        current_app.logger.info(f'Created user {user.username} ({user.id})')
        return user

    def update_user(self, user_id: int, **fields) -> Optional[User]:
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f'Cannot update fields: {", ".join(sorted(unknown))}')

        user = self.get_user(user_id)
        if user is None:
            return None

        password = fields.pop('password', None)
        if password:
            user.set_password(password)
        for name, value in fields.items():
            setattr(user, name, value)

        try:
            self.db.session.commit()
        except SQLAlchemyError as e:
            self._fail(f'Error updating user {user_id}', e)
        return user

    def delete_user(self, user_id: int) -> Optional[User]:
        user = self.get_user(user_id)
        if user is None:
            return None
        try:
            self.db.session.delete(user)
            self.db.session.commit()
        except SQLAlchemyError as e:
            self._fail(f'Error deleting user {user_id}', e)

        current_app.logger.info(f'Deleted user {user.username} ({user_id})')
        return user

    def touch_last_login(self, user_id: int):
        """Set ``last_login`` to now with a single-row UPDATE. Does not commit."""
        self.db.session.execute(
            update(User).where(User.id == user_id).values(last_login=utcnow())
        )

    def _fail(self, message, error):
        self.db.session.rollback()
        current_app.logger.error(f'{message}: {error}')
        raise StorageError(message) from error
