from flask import current_app, request

from quizhub.errors import ValidationError


def _positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be a positive integer')
    if value < 1:
        raise ValidationError(f'{name} must be a positive integer')
    return value


def get_page_args() -> tuple[int, int]:
    """
    Read ``page`` and ``limit`` from the query string.

    ``limit`` defaults to DEFAULT_PAGE_SIZE and is capped at MAX_PAGE_SIZE.
    """
    page = _positive_int('page', request.args.get('page', '1'))
    default_limit = current_app.config.get('DEFAULT_PAGE_SIZE', 10)
    limit = _positive_int('limit', request.args.get('limit', str(default_limit)))
    return page, min(limit, current_app.config.get('MAX_PAGE_SIZE', 100))
