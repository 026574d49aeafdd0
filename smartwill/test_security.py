"""
Security Tests

Tests for security features:
- Input sanitization
- Role extraction from the gateway header
- Security headers
"""

import unittest

from smartwill import create_app
from smartwill.navigation import Role
from smartwill.security import (
    get_request_role, role_required, sanitize_payload, sanitize_string
)
from werkzeug.exceptions import BadRequest, Forbidden, Unauthorized


class TestInputSanitization(unittest.TestCase):
    """Test input sanitization functions."""

    def test_sanitize_string_removes_dangerous_chars(self):
        """Test that dangerous characters are removed."""
        sanitized = sanitize_string('<script>alert("xss")</script>Sarah')
        self.assertEqual(sanitized, 'Sarah')

    def test_sanitize_string_preserves_safe_text(self):
        """Test that safe text is preserved."""
        safe = 'John O\'Connor-Smith'
        self.assertEqual(sanitize_string(safe), safe)

    def test_sanitize_string_handles_unicode(self):
        unicode_text = 'José García-Müller'
        self.assertEqual(sanitize_string(unicode_text), unicode_text)

    def test_sanitize_string_trims_whitespace(self):
        self.assertEqual(sanitize_string('  John Smith  '), 'John Smith')

    def test_sanitize_string_empty_input(self):
        self.assertEqual(sanitize_string(''), '')
        self.assertEqual(sanitize_string(None), '')

    def test_sanitize_payload_nested_will(self):
        """Test sanitization of a nested will payload."""
        payload = {
            'beneficiaries': [
                {'id': 1, 'name': '<img src=x onerror=alert(1)>Sarah', 'percentage': 60, 'verified': True}
            ],
            'assets': {'stx': '50,000', 'btc': '2.5', 'nfts': 12, 'totalValue': '$125,000'},
        }

        sanitized = sanitize_payload(payload)

        self.assertEqual(sanitized['beneficiaries'][0]['name'], 'Sarah')
        self.assertEqual(sanitized['assets'], payload['assets'])

    def test_sanitize_payload_preserves_types(self):
        """Test that non-string types are preserved."""
        payload = {'integer': 42, 'float': 3.14, 'boolean': True, 'null': None, 'list': [1, 2, 3]}
        self.assertEqual(sanitize_payload(payload), payload)


class TestRequestRole(unittest.TestCase):
    """Test reading the trusted role header."""

    def setUp(self):
        self.app = create_app({'TESTING': True, 'RATELIMIT_ENABLED': False, 'WTF_CSRF_ENABLED': False})

    def test_role_from_header(self):
        with self.app.test_request_context(headers={'X-User-Role': 'heir'}):
            self.assertEqual(get_request_role(), Role.HEIR)

    def test_custom_header_name(self):
        app = create_app({'TESTING': True, 'ROLE_HEADER': 'X-Gateway-Role'})
        with app.test_request_context(headers={'X-Gateway-Role': 'verifier'}):
            self.assertEqual(get_request_role(), Role.VERIFIER)

    def test_missing_header(self):
        with self.app.test_request_context():
            with self.assertRaises(Unauthorized):
                get_request_role()

    def test_unknown_role(self):
        with self.app.test_request_context(headers={'X-User-Role': 'admin'}):
            with self.assertRaises(BadRequest):
                get_request_role()

    def test_role_required_rejects_other_roles(self):
        @role_required(Role.OWNER)
        def owner_view():
            return 'ok'

        with self.app.test_request_context(headers={'X-User-Role': 'verifier'}):
            with self.assertRaises(Forbidden):
                owner_view()

        with self.app.test_request_context(headers={'X-User-Role': 'owner'}):
            self.assertEqual(owner_view(), 'ok')


class TestSecurityHeaders(unittest.TestCase):
    """Test headers added to every response."""

    def test_headers_present(self):
        app = create_app({'TESTING': True, 'RATELIMIT_ENABLED': False})
        response = app.test_client().get('/api/navigation', headers={'X-User-Role': 'owner'})
        self.assertEqual(response.headers['X-Content-Type-Options'], 'nosniff')
        self.assertEqual(response.headers['X-Frame-Options'], 'DENY')
        self.assertIn('X-User-Role', response.headers['Vary'])


if __name__ == '__main__':
    unittest.main()
