from flask import Blueprint, jsonify, current_app

from routes.auth import admin_required
from routes.user import parse_limit
from services import get_services, StorageError

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/recent-logins', methods=['GET'])
@admin_required
def recent_logins():
    """Most recent login attempts across all users"""
    limit = parse_limit(current_app.config['DEFAULT_RECENT_LOGINS_LIMIT'])
    try:
        records = get_services().stats.get_recent_logins(limit)
    except StorageError as e:
        current_app.logger.error(f'Error fetching recent logins: {e}')
        return jsonify({'error': 'Failed to fetch recent logins'}), 500

    return jsonify([record.to_dict(include_user=True) for record in records])
