from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix
from sqlalchemy import event
from config import get_config, engine_options
from extensions import db, migrate, bcrypt, enable_sqlite_foreign_keys
from services import init_services, StorageError
import logging
from logging.handlers import RotatingFileHandler
import os


def configure_logging(app):
    if app.debug or app.testing:
        return

    if app.config['LOG_TO_STDOUT']:
        handler = logging.StreamHandler()
    else:
        if not os.path.exists('logs'):
            os.mkdir('logs')
        handler = RotatingFileHandler('logs/account_tracker.log', maxBytes=10240, backupCount=10)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'))
    handler.setLevel(app.config['LOG_LEVEL'])
    app.logger.addHandler(handler)
    app.logger.setLevel(app.config['LOG_LEVEL'])
    app.logger.info('Account Tracker startup')


def create_app(config_name=None):
    app = Flask(__name__)

    # Get configuration based on environment or passed parameter
    if config_name:
        from config import config
        app.config.from_object(config[config_name])
    else:
        app.config.from_object(get_config())

    app.config.setdefault('SQLALCHEMY_ENGINE_OPTIONS', engine_options(
        app.config['SQLALCHEMY_DATABASE_URI'], app.config['DATABASE_QUERY_TIMEOUT']))

    if app.config['PROXY_FIX_X_FOR']:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=app.config['PROXY_FIX_X_FOR'])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)

    with app.app_context():
        if db.engine.dialect.name == 'sqlite':
            event.listen(db.engine, 'connect', enable_sqlite_foreign_keys)

    # Import models to register them with SQLAlchemy
    from models import User, LoginRecord, UserActivity, ExternalAccount  # noqa: F401

    init_services(app, db)
    configure_logging(app)

    # Register blueprints
    from routes.auth import auth_bp
    from routes.user import user_bp
    from routes.admin import admin_bp

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(user_bp, url_prefix='/api/user')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    # Error handlers
    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(StorageError)
    def storage_error(error):
        db.session.rollback()
        app.logger.error(f'Unhandled storage error: {error}')
        return jsonify({'error': 'Internal server error'}), 500

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'error': 'Internal server error'}), 500

    return app
