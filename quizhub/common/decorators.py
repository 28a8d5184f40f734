from functools import wraps
from flask import request
from flask_login import current_user

from quizhub import login_manager
from quizhub.errors import ForbiddenError
from quizhub.security import SecurityLogger


def role_required(user_type: str):
    """Decorator factory requiring a logged-in user of the given type."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return login_manager.unauthorized()
            if getattr(current_user, 'user_type', None) != user_type:
                SecurityLogger.log_unauthorized_access(request.path, current_user.id)
                raise ForbiddenError(f'This endpoint is only accessible to {user_type}s')
            return f(*args, **kwargs)
        return decorated_function
    return decorator


admin_required = role_required('admin')
student_required = role_required('student')
