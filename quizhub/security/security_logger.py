"""
Security logging module.

This module provides specialized logging for security events
such as failed logins, unauthorized access and suspicious input.
"""

from flask import request, current_app
from datetime import datetime, timezone


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SecurityLogger:
    """
    Security event logger.

    Logs security-related events for monitoring and auditing.
    """

    @staticmethod
    def log_failed_login(email: str, reason: str = "Invalid credentials"):
        """
        Log a failed login attempt.

        Args:
            email: Email address used in login attempt
            reason: Reason for failure
        """
        current_app.logger.warning(
            f"SECURITY: Failed login attempt - Email: {email}, "
            f"IP: {request.remote_addr}, Reason: {reason}, "
            f"Time: {_now_iso()}"
        )

    @staticmethod
    def log_successful_login(user_id: int, email: str):
        current_app.logger.info(
            f"SECURITY: Successful login - User ID: {user_id}, "
            f"Email: {email}, IP: {request.remote_addr}, "
            f"Time: {_now_iso()}"
        )

    @staticmethod
    def log_injection_attempt(input_type: str, value: str):
        """
        Log potential injection attempt.

        Args:
            input_type: Type of injection (XSS, etc.)
            value: Suspicious input value (truncated)
        """
        truncated_value = value[:100] if len(value) > 100 else value
        current_app.logger.warning(
            f"SECURITY: Potential {input_type} injection - "
            f"IP: {request.remote_addr}, Value: {truncated_value}, "
            f"Time: {_now_iso()}"
        )

    @staticmethod
    def log_unauthorized_access(resource: str, user_id: int = None):
        """
        Log unauthorized access attempt.

        Args:
            resource: Resource that was accessed
            user_id: User ID if authenticated
        """
        user_info = f"User ID: {user_id}" if user_id else "Unauthenticated"
        current_app.logger.warning(
            f"SECURITY: Unauthorized access - {user_info}, "
            f"Resource: {resource}, IP: {request.remote_addr}, "
            f"Time: {_now_iso()}"
        )
