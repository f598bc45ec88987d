"""
Pytest configuration and shared fixtures for the test suite.
"""
import pytest
from app import create_app, db
from models import User

CHROME_WINDOWS_UA = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app('testing')
    app.config.update({
        'SECRET_KEY': 'test-secret-key',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Create database session."""
    with app.app_context():
        yield db.session


@pytest.fixture
def services(app):
    """The application's service container."""
    return app.extensions['services']


@pytest.fixture
def test_user(db_session):
    """Create test user."""
    user = User(username='testuser', email='test@example.com')
    user.set_password('password123')
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def admin_user(app, db_session):
    """Create a user and make it the configured admin."""
    user = User(username='admin')
    user.set_password('admin123')
    db_session.add(user)
    db_session.commit()
    app.config['ADMIN_USER_ID'] = user.id
    return user


@pytest.fixture
def logged_in_client(client, test_user):
    """Client with the test user's session already established."""
    with client.session_transaction() as sess:
        sess['user_id'] = test_user.id
        sess['username'] = test_user.username
    return client


@pytest.fixture
def request_context(app):
    """Factory for request contexts carrying a user agent and client address."""
    def make(user_agent=CHROME_WINDOWS_UA, ip_address='1.2.3.4', path='/api/login'):
        headers = {'User-Agent': user_agent} if user_agent is not None else {}
        return app.test_request_context(path, headers=headers,
                                        environ_base={'REMOTE_ADDR': ip_address})
    return make


@pytest.fixture
def sample_user_data():
    """Sample registration payload."""
    return {
        'username': 'newuser',
        'password': 'securepassword123',
        'confirmPassword': 'securepassword123',
        'email': 'newuser@example.com',
        'displayName': 'New User',
    }
