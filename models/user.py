"""User model definition.
This module defines the User ORM model and any user-related helper methods.
"""
from extensions import db, bcrypt
from models.timestamps import utcnow, isoformat


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(128), nullable=False)

    # Profile information
    email = db.Column(db.String(255), index=True)
    display_name = db.Column(db.String(150))

    last_login = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    # Relationships
    login_history = db.relationship('LoginRecord', back_populates='user', lazy='dynamic',
                                    cascade='all, delete-orphan')
    activities = db.relationship('UserActivity', back_populates='user', lazy='dynamic',
                                 cascade='all, delete-orphan')
    external_accounts = db.relationship('ExternalAccount', back_populates='user', lazy='dynamic',
                                        cascade='all, delete-orphan')

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'displayName': self.display_name,
            'lastLogin': isoformat(self.last_login),
            'createdAt': isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<User {self.username}>'
