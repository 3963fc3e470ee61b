"""
Test application factory, configuration and CLI commands.
"""

import pytest
from app import create_app

from conftest import add_cession, add_reservation, fetch_status


class TestAppFactory:
    """Test Flask application factory."""

    def test_create_app_development(self):
        """Test app creation with development config."""
        app = create_app('development')
        assert app is not None
        assert app.config['DEBUG'] is True
        assert app.config['TESTING'] is False

    def test_create_app_test(self):
        """Test app creation with test config."""
        app = create_app('test')
        assert app is not None
        assert app.config['TESTING'] is True
        assert app.config['WTF_CSRF_ENABLED'] is False

    def test_production_requires_secret_key(self, monkeypatch):
        """Production refuses to start without a strong SECRET_KEY."""
        monkeypatch.delenv('SECRET_KEY', raising=False)
        with pytest.raises(ValueError):
            create_app('production')

        monkeypatch.setenv('SECRET_KEY', 'short')
        with pytest.raises(ValueError):
            create_app('production')

    def test_app_has_blueprints(self):
        """Test that all blueprints are registered."""
        app = create_app('test')
        blueprint_names = list(app.blueprints.keys())

        assert 'auth' in blueprint_names
        assert 'parking' in blueprint_names
        assert 'api' in blueprint_names

    def test_app_has_extensions(self):
        """Test that extensions are initialized."""
        app = create_app('test')

        # Check login manager
        assert hasattr(app, 'login_manager')
        assert 'csrf' in app.extensions


class TestAppConfiguration:
    """Test application configuration."""

    def test_parking_settings(self, app):
        assert app.config['TIMEZONE'] == 'Europe/Madrid'
        assert app.config['FEW_SPOTS_THRESHOLD'] == 3
        assert app.config['APP_NAME'] == 'Parking Corporativo'


class TestCliCommands:
    """Test Flask CLI commands."""

    def test_create_user(self, app):
        from models.user import get_user_by_username

        runner = app.test_cli_runner()
        result = runner.invoke(args=[
            'create-user', 'lucia', 'lucia@parking.local',
            '--role', 'management', '--password', 'secret123'
        ])

        assert 'User created successfully' in result.output
        assert get_user_by_username('lucia')['role'] == 'management'

    def test_create_spot(self, app):
        from database import get_db

        runner = app.test_cli_runner()
        result = runner.invoke(args=['create-spot', 'V-99', '--type', 'visitor'])

        assert 'Spot created successfully' in result.output
        row = get_db().execute("SELECT type FROM spots WHERE label = 'V-99'").fetchone()
        assert row['type'] == 'visitor'

    def test_create_spot_rejects_long_label(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=['create-spot', 'X' * 21])
        assert 'Error creating spot' in result.output

    def test_reconcile_cessions(self, app, users, management_spot, workday):
        cession_id = add_cession(management_spot['id'], users['marta'].id, workday)
        add_reservation(management_spot['id'], users['ana'].id, workday)

        runner = app.test_cli_runner()
        result = runner.invoke(args=['reconcile-cessions', '--since', workday.isoformat()])

        assert '1 marked reserved' in result.output
        assert fetch_status('cessions', cession_id) == 'reserved'
