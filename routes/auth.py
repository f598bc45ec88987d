from functools import wraps
import re

from flask import Blueprint, request, session, current_app, jsonify, after_this_request, g

from models import LoginMethod
from services import get_services, StorageError, UsernameTakenError, IdentityVerificationError

auth_bp = Blueprint('auth', __name__)

INVALID_CREDENTIALS = 'Invalid username or password'


def is_valid_email(email):
    """Simple email validation"""
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return re.match(pattern, email) is not None


def get_current_user():
    """Get current logged in user"""
    if 'user_id' in session:
        return get_services().users.get_user(session['user_id'])
    return None


def load_session_user():
    """Return the session's user, clearing sessions whose account no longer exists."""
    user = get_current_user()
    if user is None:
        session.clear()
        return None
    g.current_user = user
    return user


def login_required(f):
    """Decorator to require an authenticated session for API routes"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if load_session_user() is None:
            return jsonify({'error': 'Unauthorized'}), 401
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator restricting a route to the configured admin account"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if load_session_user() is None:
            return jsonify({'error': 'Unauthorized'}), 401
        if session['user_id'] != current_app.config['ADMIN_USER_ID']:
            return jsonify({'error': 'Unauthorized: Admin access required'}), 403
        return f(*args, **kwargs)
    return decorated_function


def record_activity_after_request(user_id, activity_type, details=None):
    """Record an activity once the view has produced a successful response.

    Recording failures are logged and dropped so they never alter the response.
    """
    path = request.path

    @after_this_request
    def record(response):
        if response.status_code < 400:
            get_services().activity.record_activity_safely(user_id, activity_type, path, details)
        return response


def record_login_after_request(user_id, success, method=LoginMethod.PASSWORD,
                               failure_reason=None, metadata=None):
    """Record a login attempt after the response is built, logging and dropping failures."""
    @after_this_request
    def record(response):
        get_services().logins.record_login_safely(
            user_id, request, success, method=method,
            failure_reason=failure_reason, metadata=metadata,
        )
        return response


def start_session(user, remember_me=False):
    session.clear()
    session['user_id'] = user.id
    session['username'] = user.username
    session.permanent = remember_me


@auth_bp.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    email = (data.get('email') or '').strip().lower() or None
    display_name = (data.get('displayName') or '').strip() or None

    if not username:
        return jsonify({'error': 'Username is required'}), 400
    if len(username) > 150:
        return jsonify({'error': 'Username is too long'}), 400
    min_length = current_app.config['PASSWORD_MIN_LENGTH']
    if len(password) < min_length:
        return jsonify({'error': f'Password must be at least {min_length} characters long'}), 400
    if 'confirmPassword' in data and data['confirmPassword'] != password:
        return jsonify({'error': 'Passwords do not match'}), 400
    if email and not is_valid_email(email):
        return jsonify({'error': 'Please enter a valid email address'}), 400

    try:
        user = get_services().users.create_user(username, password, email=email,
                                                display_name=display_name)
    except UsernameTakenError:
        return jsonify({'error': 'Username already exists'}), 400
    except StorageError as e:
        current_app.logger.error(f'Registration error: {e}')
        return jsonify({'error': 'Registration failed'}), 500

    start_session(user)
    current_app.logger.info(f'User {user.username} registered')
    record_activity_after_request(user.id, 'register')
    return jsonify(user.to_dict()), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    remember_me = bool(data.get('rememberMe'))

    if not username or not password:
        return jsonify({'error': 'Please enter both username and password'}), 400

    try:
        user = get_services().users.get_user_by_login(username)
    except StorageError as e:
        current_app.logger.error(f'Login error: {e}')
        return jsonify({'error': 'Login failed'}), 500

    if user is None:
        current_app.logger.warning(f'Login attempt for unknown account {username!r}')
        return jsonify({'error': INVALID_CREDENTIALS}), 401

    if not user.check_password(password):
        current_app.logger.warning(f'Failed login for {user.username}')
        record_login_after_request(user.id, False, failure_reason='invalid_password')
        return jsonify({'error': INVALID_CREDENTIALS}), 401

    start_session(user, remember_me)
    current_app.logger.info(f'User {user.username} logged in successfully')
    record_login_after_request(user.id, True)
    return jsonify(user.to_dict())


@auth_bp.route('/login/<provider>', methods=['POST'])
def provider_login(provider):
    """Sign in with a token obtained from an external identity provider"""
    if provider not in {m.value for m in LoginMethod} or provider == LoginMethod.PASSWORD.value:
        return jsonify({'error': 'Unknown identity provider'}), 404

    data = request.get_json(silent=True) or {}
    services = get_services()
    try:
        identity = services.identity.verify(provider, data.get('token'))
    except IdentityVerificationError as e:
        current_app.logger.warning(f'{provider} sign in rejected: {e}')
        return jsonify({'error': str(e)}), 401

    try:
        user = services.identity.resolve_user(identity)
    except StorageError as e:
        current_app.logger.error(f'{provider} sign in error: {e}')
        return jsonify({'error': 'Login failed'}), 500

    start_session(user, bool(data.get('rememberMe')))
    current_app.logger.info(f'User {user.username} logged in with {provider}')
    record_login_after_request(user.id, True, method=identity.provider,
                              metadata={'subject': identity.subject})
    return jsonify(user.to_dict())


@auth_bp.route('/logout', methods=['POST'])
def logout():
    user_id = session.get('user_id')
    username = session.get('username', 'Unknown')
    session.clear()
    if user_id is not None:
        current_app.logger.info(f'User {username} logged out')
        record_activity_after_request(user_id, 'logout')
    return jsonify({'success': True})
