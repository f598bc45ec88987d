"""Login history service.

Records every authentication attempt together with the client's IP address
and a classification of its user agent, and reads the history back for the
account pages.
"""
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import LoginRecord, LoginMethod
from models.login_record import IP_ADDRESS_MAX_LENGTH
from services.errors import StorageError
from services.user_agent_service import classify_user_agent


def client_details(request):
    """Return ``(user_agent, ip_address)`` for a request, empty strings when absent."""
    user_agent = request.headers.get('User-Agent', '') or ''
    ip_address = request.remote_addr or ''
    return user_agent, ip_address


class LoginHistoryService:

    def __init__(self, db, user_service):
        self.db = db
        self.user_service = user_service

    def record_login(self, user_id: int, request, success: bool,
                     method=LoginMethod.PASSWORD, failure_reason: str = None,
                     metadata: dict = None) -> LoginRecord:
        """
        Append a login attempt for ``user_id``.

        Args:
            user_id: ID of the account the attempt was made against
            request: The incoming request; its User-Agent header and remote
                address are stored
            success: Whether the attempt succeeded. Successful attempts also
                update the user's last login time
            method: A LoginMethod or its string value
            failure_reason: Optional reason stored with failed attempts
            metadata: Optional free-form data, stored as an empty dict when omitted

        Returns:
            The persisted LoginRecord
        """
        method = LoginMethod(method)
        user_agent, ip_address = client_details(request)
        agent = classify_user_agent(user_agent)

        try:
            if success:
                self.user_service.touch_last_login(user_id)

            record = LoginRecord(
                user_id=user_id,
                ip_address=ip_address[:IP_ADDRESS_MAX_LENGTH],
                user_agent=user_agent,
                browser=agent.browser,
                os=agent.os,
                device=agent.device,
                login_method=method,
                success=success,
                failure_reason=failure_reason,
                extra_data=metadata if metadata is not None else {},
            )
            self.db.session.add(record)
            self.db.session.commit()
        except SQLAlchemyError as e:
            self.db.session.rollback()
            current_app.logger.error(f'Error recording login for user {user_id}: {e}')
            raise StorageError(f'Could not record login for user {user_id}') from e

        return record

    def record_login_safely(self, *args, **kwargs) -> Optional[LoginRecord]:
        """Like ``record_login`` but logs and drops storage failures."""
        try:
            return self.record_login(*args, **kwargs)
        except StorageError as e:
            current_app.logger.error(f'Dropped login record: {e}')
            return None

    def get_login_history(self, user_id: int, limit: int = 20) -> List[LoginRecord]:
        """Retrieve a user's login attempts, newest first."""
        try:
            return self.db.session.execute(
                self.db.select(LoginRecord)
                .filter_by(user_id=user_id)
                .order_by(LoginRecord.timestamp.desc(), LoginRecord.id.desc())
                .limit(limit)
            ).scalars().all()
        except SQLAlchemyError as e:
            self.db.session.rollback()
            current_app.logger.error(f'Error loading login history for user {user_id}: {e}')
            raise StorageError(f'Could not load login history for user {user_id}') from e
