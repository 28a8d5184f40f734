from flask import Blueprint
from quizhub.config import config

# Blueprint for authentication related endpoints
auth_bp = Blueprint("auth", __name__, url_prefix=f"{config.API_PREFIX}/auth")

# Import routes so that they are registered with the blueprint
from quizhub.auth import routes  # noqa: E402,F401
