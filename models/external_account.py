"""External account model definition.
Links a provider identity (provider + subject) to a local user.
"""
from extensions import db
from models.login_record import LoginMethod
from models.timestamps import utcnow


class ExternalAccount(db.Model):
    __tablename__ = 'external_accounts'
    __table_args__ = (
        db.UniqueConstraint('provider', 'subject', name='uq_external_accounts_provider_subject'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    provider = db.Column(
        db.Enum(LoginMethod, native_enum=False, length=50,
                values_callable=lambda methods: [m.value for m in methods]),
        nullable=False,
    )
    subject = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    user = db.relationship('User', back_populates='external_accounts')

    def __repr__(self):
        return f'<ExternalAccount {self.provider.value}:{self.subject} -> {self.user_id}>'
