"""
SmartWill Application Shell

Role-based navigation and will data validation for the SmartWill
digital-estate-planning application.

Enhanced with:
- Navigation configuration self-check at startup
- CSRF protection
- Rate limiting
- Security headers
"""

import os
from datetime import datetime

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == 'true'


def create_app(test_config=None):
    """Application factory pattern."""
    app = Flask(__name__, instance_relative_config=True)

    # Default configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production'),

        # Navigation settings
        NAVIGATION_STRICT=_env_flag('SMARTWILL_NAVIGATION_STRICT', 'true'),
        ROLE_HEADER=os.environ.get('SMARTWILL_ROLE_HEADER', 'X-User-Role'),

        # CSRF settings
        WTF_CSRF_ENABLED=True,
        WTF_CSRF_TIME_LIMIT=3600,  # 1 hour
        WTF_CSRF_SSL_STRICT=False,  # Disabled for development

        # Rate limiting settings
        RATELIMIT_ENABLED=_env_flag('RATELIMIT_ENABLED', 'true'),
        RATELIMIT_STORAGE_URI=os.environ.get('REDIS_URL', 'memory://'),
        RATELIMIT_STRATEGY='fixed-window',
        RATELIMIT_DEFAULT='100 per minute',
        RATELIMIT_HEADERS_ENABLED=True,
    )

    if test_config is None:
        # Load instance config if it exists
        app.config.from_pyfile('config.py', silent=True)
    else:
        # Load test config
        app.config.from_mapping(test_config)

    # Build the navigation registry once. A ConfigurationError aborts startup
    # so a partial registry is never served.
    from smartwill.navigation import build_registry
    from smartwill.routes import NAVIGATION_EXTENSION, api_bp
    registry = build_registry(strict=app.config['NAVIGATION_STRICT'])
    app.extensions[NAVIGATION_EXTENSION] = registry
    app.logger.info(
        f'Navigation registry ready: {len(registry.catalog())} tabs, '
        f'{"strict" if registry.config.strict else "lenient"} mode'
    )

    # Import and initialize security (after config to pick up test overrides)
    from smartwill.security import add_security_headers, init_security
    init_security(app)

    # Register blueprints
    app.register_blueprint(api_bp)

    # Add security headers to all responses
    @app.after_request
    def after_request(response):
        """Add security headers to all responses."""
        return add_security_headers(response)

    # Request logging
    @app.before_request
    def before_request():
        """Log request start."""
        g.request_start_time = datetime.utcnow()

    @app.after_request
    def log_request(response):
        """Log request completion."""
        if hasattr(g, 'request_start_time'):
            duration = (datetime.utcnow() - g.request_start_time).total_seconds()
            app.logger.info(
                f'{request.method} {request.path} - {response.status_code} - {duration:.3f}s'
            )
        return response

    # Error handlers
    @app.errorhandler(HTTPException)
    def http_error(error):
        """Render aborts as JSON."""
        return jsonify({'ok': False, 'error': error.description}), error.code

    @app.errorhandler(500)
    def internal_error(error):
        """Handle internal errors."""
        app.logger.error(f'Internal error: {str(error)}')
        return jsonify({'ok': False, 'error': 'Internal server error'}), 500

    return app
