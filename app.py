"""
Portfolio - Main Application Entry Point
Application Factory Pattern: extensions, blueprints, error handlers and CLI

All route handling is delegated to blueprints; data access goes through the
procedure routers.
"""

import os
import logging
from datetime import datetime
from flask import Flask, render_template, request, jsonify
from config import get_config
from extensions import db, login_manager
from models import User
from schemas import EXPERIENCE_TYPE_LABELS

# Import all blueprints
from blueprints.api import api_bp
from blueprints.auth import auth_bp
from blueprints.dashboard import dashboard_bp
from blueprints.pages import pages_bp


def create_app(config_name=None):
    """
    Application Factory Pattern
    Creates and configures Flask application instance

    Args:
        config_name (str): Configuration environment name (optional)

    Returns:
        Flask: Configured Flask application instance
    """

    app = Flask(__name__)

    # Load configuration
    app.config.from_object(get_config(config_name))
    app.json.sort_keys = app.config.get('JSON_SORT_KEYS', False)
    app.json.ensure_ascii = app.config.get('JSON_AS_ASCII', False)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # Initialize extensions with app
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register request/response hooks
    register_hooks(app)

    # Register CLI commands
    register_commands(app)

    # Health check route
    @app.route('/health')
    def health_check():
        return {'status': 'ok', 'message': f"{app.config['SITE_NAME']} is running"}, 200

    return app


def initialize_extensions(app):
    """Initialize Flask extensions with the app instance"""
    db.init_app(app)
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, user_id)

    # Create tables if they don't exist
    with app.app_context():
        db.create_all()
        app.logger.info("Database initialized successfully")


def register_blueprints(app):
    """Register all application blueprints"""
    app.register_blueprint(api_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(pages_bp)


def _wants_json():
    return request.path.startswith('/api/') or request.is_json


def register_error_handlers(app):
    """Register custom error handlers"""

    @app.errorhandler(403)
    def forbidden(e):
        if _wants_json():
            return jsonify({'error': {'code': 'FORBIDDEN', 'message': 'Forbidden'}}), 403
        return render_template('403.html'), 403

    @app.errorhandler(404)
    def page_not_found(e):
        if _wants_json():
            return jsonify({'error': {'code': 'NOT_FOUND', 'message': 'Not found'}}), 404
        return render_template('404.html'), 404

    @app.errorhandler(500)
    def internal_server_error(e):
        app.logger.error(f"Server Error: {str(e)}")
        db.session.rollback()
        if _wants_json():
            return jsonify({'error': {'code': 'INTERNAL_SERVER_ERROR',
                                      'message': 'Internal server error'}}), 500
        return render_template('500.html'), 500


def register_hooks(app):
    """Register request/response hooks and context processors"""

    @app.context_processor
    def inject_global_vars():
        from flask_login import current_user
        return {
            'site_name': app.config['SITE_NAME'],
            'current_year': datetime.now().year,
            'is_logged_in': current_user.is_authenticated,
            'experience_type_label': lambda value: EXPERIENCE_TYPE_LABELS.get(value, value),
        }

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        if app.config.get('SESSION_COOKIE_SECURE'):
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response


def register_commands(app):
    """Register flask CLI commands"""
    import click

    @app.cli.command('seed-admin')
    def seed_admin_command():
        """Create the first admin user."""
        from migrations.seed_admin import seed_admin, read_credentials

        email, password, name = read_credentials(app.config)
        try:
            user, created = seed_admin(email, password, name)
        except ValueError as e:
            raise click.ClickException(str(e))
        click.echo(f"{'Created' if created else 'Kept existing'} admin {user.email}")


if __name__ == '__main__':
    # Get environment
    env = os.environ.get('FLASK_ENV', 'development')

    # Create app
    app = create_app(env)

    # Run development server
    app.run(
        host='0.0.0.0',
        port=int(os.environ.get('PORT', 5000)),
        debug=(env == 'development')
    )
