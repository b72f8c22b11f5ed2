# File: backend/classcheck/__init__.py
"""ClassCheck attendance tracker - Application Factory."""
import logging
import os
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)

def create_app(config_name: str = None) -> Flask:
    """Application factory pattern."""
    app = Flask(__name__)

    # Load configuration
    from config import get_config
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    # Configure CORS
    CORS(app, origins=app.config.get('CORS_ORIGINS', ["*"]))

    # Setup logging
    setup_logging(app)

    # Compose store and services
    setup_services(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Add CLI commands
    register_commands(app)

    # Add health check
    @app.route('/health')
    def health_check():
        return jsonify({
            'status': 'healthy',
            'service': 'ClassCheck',
            'version': '1.0.0'
        })

    return app

def setup_services(app: Flask) -> None:
    """Build the store handle and the services that share it."""
    from classcheck import models  # noqa: F401  registers tables
    from classcheck.services import Services
    from classcheck.store import SessionStore, create_change_bus

    bus = create_change_bus(
        app.config.get('REALTIME_BACKEND', 'memory'),
        app.config.get('REDIS_URL'),
        app=app
    )
    store = SessionStore(db, bus)
    services = Services(store, threshold_feet=app.config['CHECKIN_PROXIMITY_FEET'])
    services.start()

    app.extensions['classcheck'] = services

def register_blueprints(app: Flask) -> None:
    """Register all application blueprints."""
    from classcheck.api.attendance import attendance_bp
    from classcheck.api.courses import courses_bp
    from classcheck.api.realtime import realtime_bp
    from classcheck.api.stats import stats_bp

    app.register_blueprint(courses_bp, url_prefix='/api/courses')
    app.register_blueprint(attendance_bp, url_prefix='/api')
    app.register_blueprint(realtime_bp, url_prefix='/api')
    app.register_blueprint(stats_bp, url_prefix='/api')

def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from classcheck.utils.exceptions import AttendanceError
    from classcheck.utils.helpers import error_response, handle_error
    from classcheck.utils.validators import ValidationError
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(AttendanceError)
    def attendance_error(error):
        if error.status_code >= 500:
            app.logger.error('%s: %s', error.__class__.__name__, error.message)
        return error_response(error.message, error.status_code, error.to_dict())

    @app.errorhandler(ValidationError)
    def validation_error(error):
        return error_response(str(error), 400)

    @app.errorhandler(HTTPException)
    def handle_exception(e):
        return handle_error(e.description, e.code)

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return handle_error('Internal server error', 500)

    # JWT error handlers
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({
            'error': True,
            'message': 'Token has expired',
            'status_code': 401
        }), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return jsonify({
            'error': True,
            'message': 'Invalid token',
            'status_code': 401
        }), 401

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return jsonify({
            'error': True,
            'message': 'Authorization token required',
            'status_code': 401
        }), 401

def setup_logging(app: Flask) -> None:
    """Setup application logging."""
    level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'))
    logging.getLogger('classcheck').setLevel(level)

    log_file = app.config.get('LOG_FILE')
    if not app.debug and not app.testing and log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(level)
        app.logger.addHandler(file_handler)
        logging.getLogger('classcheck').addHandler(file_handler)

        app.logger.setLevel(level)
        app.logger.info('ClassCheck startup')

def register_commands(app: Flask) -> None:
    """Register CLI commands."""
    import click

    @app.cli.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop existing tables')
    def init_db(drop):
        """Initialize the database."""
        if drop:
            db.drop_all()
            click.echo('Dropped all tables.')

        db.create_all()
        click.echo('Created all tables.')

    @app.cli.command('seed-db')
    def seed_db():
        """Seed database with demo data."""
        from classcheck.services import get_services
        from classcheck.services.seed_service import SeedService
        from classcheck.utils.exceptions import AttendanceError

        try:
            SeedService.seed_all(get_services())
            click.echo('Database seeded successfully!')
        except AttendanceError as e:
            click.echo(f'Error seeding database: {e.message}')

    @app.cli.command('issue-token')
    @click.argument('email')
    def issue_token(email):
        """Print a development access token for a user."""
        from flask_jwt_extended import create_access_token
        from classcheck.services import get_services
        from classcheck.store.base import Eq, Tables

        users = get_services().store.list(Tables.USERS, [Eq('email', email)])
        if not users:
            click.echo(f'No user with email {email}')
            return

        click.echo(create_access_token(identity=str(users[0].id)))
