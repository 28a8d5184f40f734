"""
Security module for the application.

This module provides:
- Input sanitization for quiz and question text
- Security headers
- Security logging
"""

from .input_validator import InputValidator, sanitize_string, sanitize_markdown
from .security_headers import SecurityHeaders
from .security_logger import SecurityLogger
from .security_init import init_security

__all__ = [
    'InputValidator',
    'sanitize_string',
    'sanitize_markdown',
    'SecurityHeaders',
    'SecurityLogger',
    'init_security',
]
