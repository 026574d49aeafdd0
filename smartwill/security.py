"""
Security hardening module.

Provides CSRF protection, rate limiting, security headers, input
sanitization and role checks for the API.

The caller's role is established by the authentication gateway in front of
this application and forwarded in a trusted request header (ROLE_HEADER).
Unknown roles are rejected here so they never reach the navigation registry.
"""

import re
from datetime import timedelta
from functools import wraps
from typing import Any

from flask import abort, current_app, g, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_wtf.csrf import CSRFProtect

from smartwill.navigation import Role


# Initialize extensions at module level
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per day", "50 per hour"]
)


# Security configuration defaults
DEFAULT_CONFIG = {
    'SESSION_COOKIE_SECURE': True,
    'SESSION_COOKIE_HTTPONLY': True,
    'SESSION_COOKIE_SAMESITE': 'Lax',
    'PERMANENT_SESSION_LIFETIME': timedelta(hours=1),
    'WTF_CSRF_TIME_LIMIT': 3600,  # 1 hour
    'WTF_CSRF_SSL_STRICT': True,
}


def add_security_headers(response):
    """
    Add security headers to response.
    This is a standalone function that can be used as an after_request handler.
    """
    # JSON API only
    response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"

    # Prevent MIME type sniffing
    response.headers['X-Content-Type-Options'] = 'nosniff'

    # Prevent clickjacking
    response.headers['X-Frame-Options'] = 'DENY'

    # Referrer policy
    response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

    # Navigation and will data are per-role
    response.vary.add(current_app.config.get('ROLE_HEADER', 'X-User-Role'))

    return response


def init_security(app):
    """Initialize security extensions with the app."""
    # Apply default security config
    for key, value in DEFAULT_CONFIG.items():
        if key not in app.config:
            app.config[key] = value

    # Initialize CSRF protection
    csrf.init_app(app)

    # Initialize rate limiter
    limiter.init_app(app)


# Rate limit configurations
RATE_LIMITS = {
    'navigation': "120 per minute",
    'validate': "30 per minute",
    'summary': "20 per minute",
    'sample': "30 per minute",
}


def rate_limit(name: str):
    """Decorator applying the named rate limit."""
    return limiter.limit(RATE_LIMITS[name])


# Input sanitization
HTML_TAG_PATTERN = re.compile(r'<[^>]+>')
SCRIPT_PATTERN = re.compile(r'<script[^>]*>.*?</script>', re.DOTALL | re.IGNORECASE)
EVENT_HANDLER_PATTERN = re.compile(r'on\w+\s*=', re.IGNORECASE)


def sanitize_string(value: str, max_length: int = 10000) -> str:
    """
    Sanitize a string value for safe storage and display.

    Args:
        value: Input string
        max_length: Maximum allowed length

    Returns:
        Sanitized string
    """
    if value is None:
        return ''

    if not isinstance(value, str):
        value = str(value)

    value = SCRIPT_PATTERN.sub('', value)
    value = EVENT_HANDLER_PATTERN.sub('', value)
    value = HTML_TAG_PATTERN.sub('', value)

    return value[:max_length].strip()


def sanitize_payload(payload: Any) -> Any:
    """
    Recursively sanitize all string values in a payload.

    Non-string values (numbers, booleans, None) are preserved so that type
    validation still sees what the client sent.
    """
    if isinstance(payload, dict):
        return {k: sanitize_payload(v) for k, v in payload.items()}
    elif isinstance(payload, list):
        return [sanitize_payload(item) for item in payload]
    elif isinstance(payload, str):
        return sanitize_string(payload)
    else:
        return payload


def get_request_role() -> Role:
    """
    Read the caller's role from the trusted gateway header.

    Aborts with 401 when the header is missing and 400 when the value is not
    a known role.
    """
    header = current_app.config.get('ROLE_HEADER', 'X-User-Role')
    raw_role = request.headers.get(header)
    if not raw_role:
        abort(401, 'No authenticated role on request')

    try:
        return Role.parse(raw_role)
    except ValueError:
        current_app.logger.warning(f'Rejected unknown role {raw_role!r} from {get_client_ip()}')
        abort(400, 'Unknown role')


def role_required(*roles: Role):
    """Decorator requiring the caller to hold one of `roles` (any role if none given)."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            role = get_request_role()
            if roles and role not in roles:
                abort(403, f'This action is not available to the {role.value} role')

            # Store for use in view
            g.role = role
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def get_client_ip() -> str:
    """Get the client IP address, handling proxies."""
    forwarded_for = request.headers.get('X-Forwarded-For')
    if forwarded_for:
        # Get first IP in chain
        return forwarded_for.split(',')[0].strip()

    real_ip = request.headers.get('X-Real-Ip')
    if real_ip:
        return real_ip

    return request.remote_addr or 'unknown'
