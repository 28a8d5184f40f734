"""
Input sanitization module.

Quiz titles, question text and option text are stored as plain strings;
quiz descriptions are markdown. Both are cleaned before they reach the
database. Suspicious input is logged, not rejected.
"""

import re
from typing import Optional

from flask import has_request_context

MAX_STRING_LENGTH = 10000
MAX_MARKDOWN_LENGTH = 50000


class InputValidator:
    """
    Pattern checks used to flag suspicious input.
    """

    SCRIPT_TAG_PATTERN = re.compile(
        r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>', re.IGNORECASE
    )
    EVENT_HANDLER_PATTERN = re.compile(r'on\w+\s*=\s*["\'][^"\']*["\']', re.IGNORECASE)
    JAVASCRIPT_URL_PATTERN = re.compile(r'javascript:', re.IGNORECASE)

    XSS_PATTERNS = [
        r'<script[^>]*>.*?</script>',
        r'javascript:',
        r'on\w+\s*=',
        r'<iframe[^>]*>',
        r'<object[^>]*>',
        r'<embed[^>]*>',
    ]

    @classmethod
    def detect_xss(cls, value: str) -> bool:
        """
        Detect potential XSS attempts.

        Args:
            value: Input value to check

        Returns:
            True if suspicious pattern detected, False otherwise
        """
        if not value or not isinstance(value, str):
            return False

        for pattern in cls.XSS_PATTERNS:
            if re.search(pattern, value, re.IGNORECASE | re.DOTALL):
                return True
        return False


def _log_if_suspicious(value: str) -> None:
    if has_request_context() and InputValidator.detect_xss(value):
        from .security_logger import SecurityLogger
        SecurityLogger.log_injection_attempt("XSS", value)


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a plain-text field.

    Strips surrounding whitespace, removes angle brackets and caps the
    length. Empty values are returned unchanged.
    """
    if not value:
        return value

    _log_if_suspicious(value)
    value = value.strip().replace('<', '').replace('>', '')
    return value[:MAX_STRING_LENGTH]


def sanitize_markdown(value: Optional[str]) -> Optional[str]:
    """
    Sanitize markdown content.

    Markdown syntax is kept; script blocks, inline event handlers and
    javascript: URLs are removed.
    """
    if not value:
        return value

    _log_if_suspicious(value)
    value = InputValidator.SCRIPT_TAG_PATTERN.sub('', value)
    value = InputValidator.EVENT_HANDLER_PATTERN.sub('', value)
    value = InputValidator.JAVASCRIPT_URL_PATTERN.sub('', value)
    return value[:MAX_MARKDOWN_LENGTH]
