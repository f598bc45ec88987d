# Blueprint registration module
from .auth import auth_bp
from .user import user_bp
from .admin import admin_bp

__all__ = [
    'auth_bp',
    'user_bp',
    'admin_bp',
]
