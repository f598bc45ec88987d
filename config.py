import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    # Security settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SERVER_NAME = os.environ.get('SERVER_NAME')
    APPLICATION_ROOT = os.environ.get('APPLICATION_ROOT', '/')
    PREFERRED_URL_SCHEME = os.environ.get('PREFERRED_URL_SCHEME', 'http')

    # Database configuration
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///account_tracker.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DATABASE_QUERY_TIMEOUT = int(os.environ.get('DATABASE_QUERY_TIMEOUT', 5))  # seconds

    # Session configuration
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = int(os.environ.get('SESSION_LIFETIME', 86400))  # 24 hours default

    # Accounts
    ADMIN_USER_ID = int(os.environ.get('ADMIN_USER_ID', 1))
    PASSWORD_MIN_LENGTH = int(os.environ.get('PASSWORD_MIN_LENGTH', 6))

    # History pagination
    DEFAULT_HISTORY_LIMIT = int(os.environ.get('DEFAULT_HISTORY_LIMIT', 20))
    DEFAULT_RECENT_LOGINS_LIMIT = int(os.environ.get('DEFAULT_RECENT_LOGINS_LIMIT', 10))
    MAX_HISTORY_LIMIT = int(os.environ.get('MAX_HISTORY_LIMIT', 100))

    # External identity providers
    GOOGLE_CLIENT_ID = os.environ.get('GOOGLE_CLIENT_ID')
    IDENTITY_REQUEST_TIMEOUT = int(os.environ.get('IDENTITY_REQUEST_TIMEOUT', 10))

    # Number of trusted proxies setting X-Forwarded-For (0 disables ProxyFix)
    PROXY_FIX_X_FOR = int(os.environ.get('PROXY_FIX_X_FOR', 0))

    # Logging
    LOG_TO_STDOUT = os.environ.get('LOG_TO_STDOUT', 'False').lower() == 'true'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    DEBUG = False
    TESTING = False


class ProductionConfig(Config):
    SESSION_COOKIE_SECURE = True


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    BCRYPT_LOG_ROUNDS = 4
    GOOGLE_CLIENT_ID = 'account-tracker-tests.apps.googleusercontent.com'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': Config
}


def get_config():
    """Get configuration based on environment variable"""
    env = os.environ.get('FLASK_ENV', 'development').lower()
    return config.get(env, config['default'])


def engine_options(database_uri, query_timeout):
    """SQLAlchemy engine options applying a per-query timeout for the given database."""
    if database_uri.startswith('sqlite'):
        return {'connect_args': {'timeout': query_timeout}}
    if database_uri.startswith('postgres'):
        return {
            'pool_pre_ping': True,
            'connect_args': {'options': f'-c statement_timeout={query_timeout * 1000}'},
        }
    return {'pool_pre_ping': True}
