"""Login and activity statistics.

Every figure in ``get_user_stats`` comes from its own query, so under
concurrent writes the fields may describe slightly different moments. The
statistics are for display only and this is accepted.
"""
from typing import Any, Dict, List

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from models import LoginRecord, UserActivity
from models.timestamps import isoformat
from services.errors import StorageError


class StatsService:

    def __init__(self, db):
        self.db = db

    def get_user_stats(self, user_id: int) -> Dict[str, Any]:
        try:
            login_count = self._count(LoginRecord, user_id)
            activity_count = self._count(UserActivity, user_id)

            first_login = self.db.session.execute(
                self.db.select(LoginRecord.timestamp)
                .where(LoginRecord.user_id == user_id)
                .order_by(LoginRecord.timestamp.asc(), LoginRecord.id.asc())
                .limit(1)
            ).scalar_one_or_none()

            last_failed_login = self.db.session.execute(
                self.db.select(LoginRecord.timestamp)
                .where(LoginRecord.user_id == user_id, LoginRecord.success.is_(False))
                .order_by(LoginRecord.timestamp.desc(), LoginRecord.id.desc())
                .limit(1)
            ).scalar_one_or_none()

            unique_ips = self.db.session.execute(
                self.db.select(LoginRecord.ip_address)
                .where(LoginRecord.user_id == user_id)
                .where(LoginRecord.ip_address.is_not(None), LoginRecord.ip_address != '')
                .group_by(LoginRecord.ip_address)
            ).scalars().all()
        except SQLAlchemyError as e:
            self.db.session.rollback()
            current_app.logger.error(f'Error computing stats for user {user_id}: {e}')
            raise StorageError(f'Could not compute stats for user {user_id}') from e

        return {
            'userId': user_id,
            'loginCount': login_count,
            'activityCount': activity_count,
            'firstLoginAt': isoformat(first_login),
            'lastFailedLoginAt': isoformat(last_failed_login),
            'uniqueIpCount': len(unique_ips),
            'uniqueIps': list(unique_ips),
        }

    def get_recent_logins(self, limit: int = 10) -> List[LoginRecord]:
        """Most recent login attempts across all users, with their user loaded.

        Equal timestamps keep insertion order (``id`` ascending), unlike the
        per-user history in ``LoginHistoryService.get_login_history`` which
        lists the newest insert first.
        """
        try:
            return self.db.session.execute(
                self.db.select(LoginRecord)
                .options(joinedload(LoginRecord.user))
                .order_by(LoginRecord.timestamp.desc(), LoginRecord.id.asc())
                .limit(limit)
            ).scalars().all()
        except SQLAlchemyError as e:
            self.db.session.rollback()
            current_app.logger.error(f'Error loading recent logins: {e}')
            raise StorageError('Could not load recent logins') from e

    def _count(self, model, user_id):
        return self.db.session.execute(
            self.db.select(func.count(model.id)).where(model.user_id == user_id)
        ).scalar_one()
