"""User activity service.

Appends activity events (page views, viewed reports, logouts) and reads them
back for the activity page.
"""
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import UserActivity
from services.errors import StorageError


class ActivityService:

    def __init__(self, db):
        self.db = db

    def record_activity(self, user_id: int, activity_type: str, path: str = None,
                        details: dict = None) -> UserActivity:
        """Append an activity event. ``details`` is stored as an empty dict when omitted."""
        activity = UserActivity(
            user_id=user_id,
            activity_type=activity_type,
            path=path,
            details=details if details is not None else {},
        )
        try:
            self.db.session.add(activity)
            self.db.session.commit()
        except SQLAlchemyError as e:
            self.db.session.rollback()
            current_app.logger.error(f'Error recording {activity_type} for user {user_id}: {e}')
            raise StorageError(f'Could not record activity for user {user_id}') from e
        return activity

    def record_activity_safely(self, *args, **kwargs) -> Optional[UserActivity]:
        """Like ``record_activity`` but logs and drops storage failures."""
        try:
            return self.record_activity(*args, **kwargs)
        except StorageError as e:
            current_app.logger.error(f'Dropped activity record: {e}')
            return None

    def get_user_activities(self, user_id: int, limit: int = 20) -> List[UserActivity]:
        """Retrieve a user's activity events, newest first."""
        try:
            return self.db.session.execute(
                self.db.select(UserActivity)
                .filter_by(user_id=user_id)
                .order_by(UserActivity.timestamp.desc(), UserActivity.id.desc())
                .limit(limit)
            ).scalars().all()
        except SQLAlchemyError as e:
            self.db.session.rollback()
            current_app.logger.error(f'Error loading activity for user {user_id}: {e}')
            raise StorageError(f'Could not load activity for user {user_id}') from e
