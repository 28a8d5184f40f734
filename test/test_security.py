"""
Test cases for input sanitization, security headers and error envelopes.
"""
from quizhub.security import InputValidator, sanitize_string, sanitize_markdown
from quizhub.security.input_validator import MAX_STRING_LENGTH, MAX_MARKDOWN_LENGTH


class TestSanitizeString:

    def test_strips_whitespace_and_angle_brackets(self):
        assert sanitize_string('  <b>hello</b>  ') == 'bhello/b'

    def test_caps_length(self):
        assert len(sanitize_string('a' * (MAX_STRING_LENGTH + 50))) == MAX_STRING_LENGTH

    def test_empty_values_are_returned_unchanged(self):
        assert sanitize_string('') == ''
        assert sanitize_string(None) is None


class TestSanitizeMarkdown:

    def test_keeps_markdown(self):
        text = '# Title\n\n- **bold** item\n- [link](https://example.com)'
        assert sanitize_markdown(text) == text

    def test_removes_script_blocks(self):
        assert sanitize_markdown('before<script>alert("x")</script>after') == 'beforeafter'

    def test_removes_event_handlers(self):
        cleaned = sanitize_markdown('<img src="a.png" onerror="alert(1)">')
        assert 'onerror' not in cleaned

    def test_removes_javascript_urls(self):
        assert sanitize_markdown('[x](JavaScript:alert(1))') == '[x](alert(1))'

    def test_caps_length(self):
        assert len(sanitize_markdown('a' * (MAX_MARKDOWN_LENGTH + 1))) == MAX_MARKDOWN_LENGTH


class TestDetectXss:

    def test_flags_suspicious_input(self):
        assert InputValidator.detect_xss('<script>alert(1)</script>')
        assert InputValidator.detect_xss('<iframe src="x">')
        assert InputValidator.detect_xss('<div onclick=steal()>')

    def test_plain_text_is_not_flagged(self):
        assert not InputValidator.detect_xss('What is 2 + 2?')
        assert not InputValidator.detect_xss(None)


class TestSecurityHeaders:

    def test_headers_on_every_response(self, client):
        response = client.get('/api/quizzes')
        assert response.headers['X-Content-Type-Options'] == 'nosniff'
        assert response.headers['X-Frame-Options'] == 'DENY'
        assert "default-src 'none'" in response.headers['Content-Security-Policy']
        assert 'no-store' in response.headers['Cache-Control']

    def test_no_hsts_without_secure_cookies(self, client):
        response = client.get('/api/quizzes')
        assert 'Strict-Transport-Security' not in response.headers


class TestErrorEnvelope:

    def test_unknown_route(self, client):
        response = client.get('/api/does-not-exist')
        assert response.status_code == 404
        body = response.get_json()
        assert body['success'] is False
        assert body['error_code'] == 'NOT_FOUND'

    def test_method_not_allowed(self, client):
        response = client.patch('/api/auth/login')
        assert response.status_code == 405
        assert response.get_json()['error_code'] == 'METHOD_NOT_ALLOWED'
