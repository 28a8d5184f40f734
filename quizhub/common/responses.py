"""
Standard JSON response envelopes.
"""
import math
from typing import Any, Optional

from flask import jsonify


def success_response(data: Any = None, message: Optional[str] = None,
                     meta: Optional[dict] = None, status: int = 200):
    """
    Build a success response.

    Returns:
        (response, status) tuple ready to be returned from a view
    """
    payload = {'success': True}
    if message:
        payload['message'] = message
    if data is not None:
        payload['data'] = data
    if meta:
        payload['meta'] = meta
    return jsonify(payload), status


def paginated_response(data: list, page: int, limit: int, total: int,
                       message: Optional[str] = None):
    """Build a success response carrying pagination metadata."""
    return success_response(data, message, meta={
        'page': page,
        'limit': limit,
        'total': total,
        'total_pages': math.ceil(total / limit) if limit else 0,
    })
