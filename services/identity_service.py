"""External identity provider verification.

The browser completes the provider's sign-in popup and posts the resulting
token to the server. Each verifier turns such a token into an
``ExternalIdentity`` or raises ``IdentityVerificationError``.
"""
import secrets
from abc import ABC, abstractmethod
from typing import NamedTuple, Optional

import requests
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import ExternalAccount, LoginMethod
from services.errors import IdentityVerificationError, StorageError, UsernameTakenError

GOOGLE_TOKENINFO_URL = 'https://oauth2.googleapis.com/tokeninfo'
MICROSOFT_GRAPH_ME_URL = 'https://graph.microsoft.com/v1.0/me'


class ExternalIdentity(NamedTuple):
    provider: LoginMethod
    subject: str
    email: Optional[str]
    display_name: Optional[str]
    # Only a provider-verified email may link to an existing local account
    email_verified: bool = False


class IdentityVerifier(ABC):
    provider = None

    @abstractmethod
    def verify(self, token):
        pass

    def _get(self, url, **kwargs):
        timeout = current_app.config.get('IDENTITY_REQUEST_TIMEOUT', 10)
        try:
            response = requests.get(url, timeout=timeout, **kwargs)
        except requests.exceptions.Timeout:
            raise IdentityVerificationError(f'{self.provider.value} verification timed out')
        except requests.exceptions.RequestException as e:
            current_app.logger.error(f'{self.provider.value} verification request failed: {e}')
            raise IdentityVerificationError(f'{self.provider.value} verification failed')

        if response.status_code != 200:
            raise IdentityVerificationError(f'{self.provider.value} rejected the token')
        try:
            return response.json()
        except ValueError:
            raise IdentityVerificationError(f'{self.provider.value} returned an invalid response')


class GoogleVerifier(IdentityVerifier):
    provider = LoginMethod.GOOGLE

    def verify(self, token):
        client_id = current_app.config.get('GOOGLE_CLIENT_ID')
        if not client_id:
            raise IdentityVerificationError('Google sign in is not configured')

        claims = self._get(GOOGLE_TOKENINFO_URL, params={'id_token': token})
        if claims.get('aud') != client_id:
            raise IdentityVerificationError('Google token was issued for another application')
        if str(claims.get('email_verified', 'false')).lower() != 'true':
            raise IdentityVerificationError('Google account email is not verified')
        if not claims.get('sub'):
            raise IdentityVerificationError('Google token has no subject')

        return ExternalIdentity(
            provider=self.provider,
            subject=claims['sub'],
            email=claims.get('email'),
            display_name=claims.get('name'),
            email_verified=True,
        )


class MicrosoftVerifier(IdentityVerifier):
    provider = LoginMethod.MICROSOFT

    def verify(self, token):
        profile = self._get(MICROSOFT_GRAPH_ME_URL, headers={'Authorization': f'Bearer {token}'})
        if not profile.get('id'):
            raise IdentityVerificationError('Microsoft profile has no id')

        # Graph does not say whether mail or userPrincipalName was verified
        return ExternalIdentity(
            provider=self.provider,
            subject=profile['id'],
            email=profile.get('mail') or profile.get('userPrincipalName'),
            display_name=profile.get('displayName'),
        )


class AppleVerifier(IdentityVerifier):
    provider = LoginMethod.APPLE

    def verify(self, token):
        raise IdentityVerificationError('Apple sign in is not available yet')


class IdentityService:

    def __init__(self, db, user_service):
        self.db = db
        self.user_service = user_service
        self.verifiers = {
            LoginMethod.GOOGLE: GoogleVerifier(),
            LoginMethod.MICROSOFT: MicrosoftVerifier(),
            LoginMethod.APPLE: AppleVerifier(),
        }

    def verify(self, provider, token):
        try:
            verifier = self.verifiers[LoginMethod(provider)]
        except (ValueError, KeyError):
            raise IdentityVerificationError(f'Unsupported identity provider: {provider}')
        if not token:
            raise IdentityVerificationError('Missing identity token')
        return verifier.verify(token)

    def resolve_user(self, identity: ExternalIdentity):
        """Return the account linked to the identity, linking or creating one if needed.

        Identities are matched on provider and subject. An existing local
        account is linked by email only when the provider vouches for that
        email; otherwise a new account is created.
        """
        try:
            account = self.db.session.execute(
                self.db.select(ExternalAccount)
                .filter_by(provider=identity.provider, subject=identity.subject)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            self._fail(f'Error loading {identity.provider.value} account {identity.subject}', e)
        if account is not None:
            return account.user

        email = identity.email if identity.email_verified else None
        user = self.user_service.get_user_by_email(email)
        if user is None:
            user = self._create_user(identity, email)

        try:
            self.db.session.add(ExternalAccount(user_id=user.id, provider=identity.provider,
                                                subject=identity.subject))
            self.db.session.commit()
        except SQLAlchemyError as e:
            self._fail(f'Error linking {identity.provider.value} account to user {user.id}', e)

        current_app.logger.info(f'Linked {identity.provider.value} account to user {user.username}')
        return user

    def _create_user(self, identity, email):
        # Provider accounts never log in with a password
        password = secrets.token_urlsafe(32)
        fallback = f'{identity.provider.value}_{identity.subject}'
        candidates = dict.fromkeys([email or fallback, fallback, f'{fallback}_{secrets.token_hex(4)}'])
        for username in candidates:
            try:
                return self.user_service.create_user(username, password, email=email,
                                                     display_name=identity.display_name)
            except UsernameTakenError:
                continue
        raise StorageError(f'Could not pick a username for {fallback}')

    def _fail(self, message, error):
        self.db.session.rollback()
        current_app.logger.error(f'{message}: {error}')
        raise StorageError(message) from error
