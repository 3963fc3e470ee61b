"""
Parking Corporativo - Corporate parking availability and cession system
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask, g
from flask_wtf.csrf import CSRFError
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import login_manager, csrf

# Import database functions
from database import close_db, init_db

from utils.api_response import api_error
from utils.messages import MESSAGES


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    config_class = config.get(config_name, config['default'])
    if hasattr(config_class, 'validate'):
        config_class.validate()

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config_class)

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Initialize Flask-Login
    login_manager.init_app(app)
    # Initialize CSRF Protection
    csrf.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    # Import blueprints
    from blueprints.auth.routes import auth_bp
    from blueprints.parking import parking_bp
    from blueprints.api.routes import api_bp

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(parking_bp, url_prefix='/parking')
    app.register_blueprint(api_bp, url_prefix='/api')


def register_error_handlers(app):
    """Register JSON error handlers."""

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        """Handle missing or expired CSRF tokens."""
        return api_error(error.description, status=400, code='invalid')

    @app.errorhandler(401)
    def unauthorized_error(error):
        """Handle 401 errors."""
        return api_error(MESSAGES['not_authenticated'], status=401, code='not_authenticated')

    @app.errorhandler(403)
    def forbidden_error(error):
        """Handle 403 errors."""
        return api_error(MESSAGES['permission_denied'], status=403, code='forbidden')

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error(MESSAGES['not_found'], status=404, code='not_found')

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db:
            db.rollback()
        return api_error(MESSAGES['unexpected_error'], status=500, code='unexpected')


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('create-user')
    @click.argument('username')
    @click.argument('email')
    @click.option('--full-name', default=None, help='Display name')
    @click.option('--role', type=click.Choice(['employee', 'management', 'admin']),
                  default='employee', show_default=True)
    @click.password_option()
    def create_user_command(username, email, full_name, role, password):
        """Create a new user."""
        from models.user import create_user

        with app.app_context():
            try:
                user_id = create_user(
                    username=username,
                    email=email,
                    password=password,
                    full_name=full_name,
                    role=role
                )
                click.echo(f'User created successfully! ID: {user_id}')
            except Exception as e:
                click.echo(f'Error creating user: {str(e)}', err=True)

    @app.cli.command('create-spot')
    @click.argument('label')
    @click.option('--type', 'spot_type',
                  type=click.Choice(['standard', 'management', 'visitor', 'disabled']),
                  default='standard', show_default=True)
    @click.option('--assigned-to', type=int, default=None, help='Owner user ID (management spots)')
    def create_spot_command(label, spot_type, assigned_to):
        """Create a parking spot."""
        from models.spot import create_spot

        with app.app_context():
            try:
                spot_id = create_spot(label, spot_type=spot_type, assigned_to=assigned_to)
                click.echo(f'Spot created successfully! ID: {spot_id}')
            except Exception as e:
                click.echo(f'Error creating spot: {str(e)}', err=True)

    @app.cli.command('reconcile-cessions')
    @click.option('--since', type=click.DateTime(formats=['%Y-%m-%d']), default=None,
                  help='Only reconcile cessions on or after this date')
    def reconcile_cessions_command(since):
        """Repair cession statuses that drifted from their reservations."""
        from models.cession_sync import reconcile_cession_statuses

        since_date = since.date() if since else None
        with app.app_context():
            result = reconcile_cession_statuses(since_date)
        click.echo(
            f"Reconciled: {result['marked_reserved']} marked reserved, "
            f"{result['marked_available']} marked available"
        )


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/parking.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        logging.getLogger().addHandler(file_handler)
        logging.getLogger().setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info("Parking startup")
    else:
        # Development logging
        logging.getLogger().setLevel(logging.DEBUG)
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
