from flask import Blueprint, jsonify, request, current_app, session, g

from routes.auth import (login_required, is_valid_email,
                         record_activity_after_request)
from services import get_services, StorageError

user_bp = Blueprint('user', __name__)


def parse_limit(default):
    """Read ``?limit=`` clamped to ``[1, MAX_HISTORY_LIMIT]``, falling back to ``default``."""
    limit = request.args.get('limit', default, type=int)
    return max(1, min(limit, current_app.config['MAX_HISTORY_LIMIT']))


@user_bp.route('', methods=['GET'])
@login_required
def current_user():
    return jsonify(g.current_user.to_dict())


@user_bp.route('', methods=['PATCH'])
@login_required
def update_profile():
    data = request.get_json(silent=True) or {}
    fields = {}
    if 'email' in data:
        email = (data['email'] or '').strip().lower() or None
        if email and not is_valid_email(email):
            return jsonify({'error': 'Please enter a valid email address'}), 400
        fields['email'] = email
    if 'displayName' in data:
        fields['display_name'] = (data['displayName'] or '').strip() or None
    if data.get('password'):
        min_length = current_app.config['PASSWORD_MIN_LENGTH']
        if len(data['password']) < min_length:
            return jsonify({'error': f'Password must be at least {min_length} characters long'}), 400
        fields['password'] = data['password']

    if not fields:
        return jsonify({'error': 'No profile fields provided'}), 400

    user_id = session['user_id']
    try:
        user = get_services().users.update_user(user_id, **fields)
    except StorageError as e:
        current_app.logger.error(f'Error updating profile for user {user_id}: {e}')
        return jsonify({'error': 'Failed to update profile'}), 500
    if user is None:
        session.clear()
        return jsonify({'error': 'Unauthorized'}), 401

    record_activity_after_request(user_id, 'profile_update', {'fields': sorted(fields)})
    return jsonify(user.to_dict())


@user_bp.route('/login-history', methods=['GET'])
@login_required
def login_history():
    user_id = session['user_id']
    limit = parse_limit(current_app.config['DEFAULT_HISTORY_LIMIT'])
    try:
        records = get_services().logins.get_login_history(user_id, limit)
    except StorageError as e:
        current_app.logger.error(f'Error fetching login history: {e}')
        return jsonify({'error': 'Failed to fetch login history'}), 500

    record_activity_after_request(user_id, 'view_login_history')
    return jsonify([record.to_dict() for record in records])


@user_bp.route('/activity', methods=['GET'])
@login_required
def activity():
    user_id = session['user_id']
    limit = parse_limit(current_app.config['DEFAULT_HISTORY_LIMIT'])
    try:
        activities = get_services().activity.get_user_activities(user_id, limit)
    except StorageError as e:
        current_app.logger.error(f'Error fetching user activity: {e}')
        return jsonify({'error': 'Failed to fetch activity data'}), 500

    record_activity_after_request(user_id, 'view_activity_log')
    return jsonify([a.to_dict() for a in activities])


@user_bp.route('/activity', methods=['POST'])
@login_required
def add_activity():
    """Record a client-side event such as a page view"""
    data = request.get_json(silent=True) or {}
    activity_type = (data.get('activityType') or '').strip()
    if not activity_type or len(activity_type) > 100:
        return jsonify({'error': 'activityType is required (max 100 characters)'}), 400
    details = data.get('details')
    if details is not None and not isinstance(details, dict):
        return jsonify({'error': 'details must be an object'}), 400

    try:
        record = get_services().activity.record_activity(
            session['user_id'], activity_type, data.get('path'), details)
    except StorageError as e:
        current_app.logger.error(f'Error recording activity: {e}')
        return jsonify({'error': 'Failed to record activity'}), 500
    return jsonify(record.to_dict()), 201


@user_bp.route('/stats', methods=['GET'])
@login_required
def stats():
    user_id = session['user_id']
    try:
        user_stats = get_services().stats.get_user_stats(user_id)
    except StorageError as e:
        current_app.logger.error(f'Error fetching user stats: {e}')
        return jsonify({'error': 'Failed to fetch user statistics'}), 500

    record_activity_after_request(user_id, 'view_stats')
    return jsonify(user_stats)
