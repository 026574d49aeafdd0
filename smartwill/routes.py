"""
Flask routes for the SmartWill application shell.

Exposes the navigation registry and the will validation surface to the
rendering layer as a JSON API. Every endpoint requires a role forwarded by
the authentication gateway; will editing endpoints are owner-only.
"""

from flask import Blueprint, current_app, g, jsonify, request
from flask_wtf.csrf import generate_csrf

from smartwill.navigation import NavigationRegistry, Role, tabs_to_dicts
from smartwill.sample_data import get_sample_data_set
from smartwill.security import rate_limit, role_required, sanitize_payload
from smartwill.summary import generate_will_summary
from smartwill.validation import validate_will


# Create blueprints
api_bp = Blueprint('api', __name__, url_prefix='/api')

NAVIGATION_EXTENSION = 'smartwill.navigation'


def get_registry() -> NavigationRegistry:
    """The registry built for this application at startup."""
    return current_app.extensions[NAVIGATION_EXTENSION]


def _missing_payload():
    return jsonify({
        'ok': False,
        'errors': [{'field': '', 'reason': 'No JSON payload provided', 'code': 'missing_payload'}]
    }), 400


# Navigation
@api_bp.route('/navigation', methods=['GET'])
@rate_limit('navigation')
@role_required()
def api_navigation():
    """Tabs the caller's role may open, in catalog order."""
    tabs = get_registry().resolve_tabs_for_role(g.role)
    return jsonify({'ok': True, 'role': g.role.value, 'tabs': tabs_to_dicts(tabs)}), 200


@api_bp.route('/navigation/default', methods=['GET'])
@rate_limit('navigation')
@role_required()
def api_navigation_default():
    """Single global tab list for clients that predate per-role navigation."""
    return jsonify({'ok': True, 'tabs': tabs_to_dicts(get_registry().default_tabs())}), 200


@api_bp.route('/navigation/select', methods=['GET'])
@rate_limit('navigation')
@role_required()
def api_navigation_select():
    """
    Resolve which tab to show.

    Falls back to the role's first tab when the requested one is missing,
    stale, or not visible to the role.
    """
    requested = request.args.get('tab')
    tab = get_registry().select_tab(g.role, requested)
    return jsonify({
        'ok': True,
        'requested': requested,
        'tab': tab.to_dict() if tab else None,
        'fallback': tab is None or tab.id != requested,
    }), 200


@api_bp.route('/csrf-token', methods=['GET'])
@role_required()
def api_csrf_token():
    return jsonify({'ok': True, 'csrf_token': generate_csrf()}), 200


# Will data
@api_bp.route('/will/validate', methods=['POST'])
@rate_limit('validate')
@role_required(Role.OWNER)
def api_validate_will():
    """
    Validate a will.

    Returns:
        JSON response with validation result
    """
    try:
        payload = request.get_json(silent=True)
        if not payload:
            return _missing_payload()

        result = validate_will(sanitize_payload(payload))

        if result.is_valid:
            return jsonify(result.to_dict()), 200
        return jsonify(result.to_dict()), 422

    except Exception as e:
        current_app.logger.error(f'Validation error: {str(e)}')
        return jsonify({
            'ok': False,
            'errors': [{'field': '', 'reason': 'Internal validation error', 'code': 'internal_error'}]
        }), 500


@api_bp.route('/will/summary', methods=['POST'])
@rate_limit('summary')
@role_required(Role.OWNER)
def api_will_summary():
    """
    Validate a will and summarize its distribution.

    A summary is only produced for structurally valid wills.
    """
    try:
        payload = request.get_json(silent=True)
        if not payload:
            return _missing_payload()

        payload = sanitize_payload(payload)
        result = validate_will(payload)
        if not result.is_valid:
            return jsonify(result.to_dict()), 422

        summary = generate_will_summary(payload)
        return jsonify({
            'ok': True,
            'summary': summary.to_dict(),
            'validation': result.to_dict(),
        }), 200

    except Exception as e:
        current_app.logger.error(f'Summary error: {str(e)}')
        return jsonify({'ok': False, 'error': 'Internal server error'}), 500


@api_bp.route('/will/sample', methods=['GET'])
@rate_limit('sample')
@role_required()
def api_sample_data():
    """Demonstration data for the dashboard and vault views."""
    return jsonify({'ok': True, **get_sample_data_set()}), 200
