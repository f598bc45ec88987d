"""Login history model definition.
One append-only row per authentication attempt.
"""
import enum

from extensions import db
from models.timestamps import utcnow, isoformat

IP_ADDRESS_MAX_LENGTH = 45


class LoginMethod(str, enum.Enum):
    PASSWORD = 'password'
    GOOGLE = 'google'
    APPLE = 'apple'
    MICROSOFT = 'microsoft'


class LoginRecord(db.Model):
    __tablename__ = 'login_history'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    timestamp = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    # Client information
    ip_address = db.Column(db.String(IP_ADDRESS_MAX_LENGTH))
    user_agent = db.Column(db.Text)
    browser = db.Column(db.String(100))
    os = db.Column(db.String(100))
    device = db.Column(db.String(100))

    login_method = db.Column(
        db.Enum(LoginMethod, native_enum=False, length=50,
                values_callable=lambda methods: [m.value for m in methods]),
        nullable=False,
        default=LoginMethod.PASSWORD,
    )
    success = db.Column(db.Boolean, default=True, nullable=False)
    failure_reason = db.Column(db.Text)
    extra_data = db.Column('metadata', db.JSON)

    user = db.relationship('User', back_populates='login_history')

    def to_dict(self, include_user=False):
        data = {
            'id': self.id,
            'userId': self.user_id,
            'timestamp': isoformat(self.timestamp),
            'ipAddress': self.ip_address,
            'userAgent': self.user_agent,
            'browser': self.browser,
            'os': self.os,
            'device': self.device,
            'loginMethod': self.login_method.value if self.login_method else None,
            'success': self.success,
            'failureReason': self.failure_reason,
            'metadata': self.extra_data or {},
        }
        if include_user:
            data['user'] = self.user.to_dict() if self.user else None
        return data

    def __repr__(self):
        status = 'success' if self.success else 'failed'
        return f'<LoginRecord {self.user_id} - {status} - {self.timestamp}>'
