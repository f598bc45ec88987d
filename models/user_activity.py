"""User Activity model definition.
Append-only trail of user-initiated actions shown on the activity page.
"""
from extensions import db
from models.timestamps import utcnow, isoformat


class UserActivity(db.Model):
    __tablename__ = 'user_activity'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    timestamp = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    activity_type = db.Column(db.String(100), nullable=False)  # page_view, view_stats, logout
    path = db.Column(db.Text)
    details = db.Column(db.JSON)

    user = db.relationship('User', back_populates='activities')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'timestamp': isoformat(self.timestamp),
            'activityType': self.activity_type,
            'path': self.path,
            'details': self.details or {},
        }

    def __repr__(self):
        return f'<UserActivity {self.user_id} - {self.activity_type} - {self.timestamp}>'
