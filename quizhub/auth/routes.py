from flask import jsonify, request
from flask_login import login_user, logout_user, login_required, current_user

from quizhub import db
from quizhub.auth import auth_bp
from quizhub.auth.models import User
from quizhub.auth.utils import is_valid_email, verify_password
from quizhub.errors import UnauthorizedError, ValidationError
from quizhub.security import SecurityLogger


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    email = data.get("email")
    password = data.get("password")
    if not isinstance(email, str) or not isinstance(password, str) or not email.strip() or not password:
        raise ValidationError("Email and password are required")

    email = email.strip().lower()
    if not is_valid_email(email):
        raise ValidationError("Please provide a valid email address")

    user = db.session.query(User).filter_by(email=email).first()
    if not user or not verify_password(password, user.password_hash):
        SecurityLogger.log_failed_login(email)
        raise UnauthorizedError("Invalid email or password")

    login_user(user, remember=bool(data.get("remember", False)))
    SecurityLogger.log_successful_login(user.id, user.email)

    return jsonify({
        "success": True,
        "message": "Logged in successfully",
        "data": user.to_dict(),
    }), 200


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout_route():
    """Logout route."""
    logout_user()
    return jsonify({"success": True, "message": "Logged out successfully"}), 200


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify({"success": True, "data": current_user.to_dict()}), 200
