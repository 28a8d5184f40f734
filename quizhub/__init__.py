from flask import Flask, request, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from dotenv import load_dotenv
from flask_migrate import Migrate
from flask_compress import Compress
from werkzeug.exceptions import HTTPException

# Load environment variables early so config is available for blueprint creation
load_dotenv()

from quizhub.config import config  # noqa: E402

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
compress = Compress()


def create_app(test_config: dict | None = None) -> Flask:
    """
    Application factory for the Flask app.
    Loads environment variables, configures the database,
    and registers blueprints.

    Args:
        test_config: Optional mapping applied on top of the environment
            configuration before any extension is bound to the app.
    """
    # Re-initialize config to ensure latest .env values are loaded
    from quizhub.config import Config
    app_config = Config()

    # Validate configuration
    app_config.validate()

    app = Flask(__name__)
    app.config.update(app_config.to_flask_config())
    if test_config:
        app.config.update(test_config)

    db_uri = app.config["SQLALCHEMY_DATABASE_URI"]
    if db_uri.startswith("mysql"):
        if "?" not in db_uri:
            app.config["SQLALCHEMY_DATABASE_URI"] = db_uri + "?charset=utf8mb4"
        # Database connection pooling for performance
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
            "pool_size": 10,
            "pool_recycle": 3600,
            "pool_pre_ping": True,
            "max_overflow": 20,
            "connect_args": {
                "connect_timeout": 5,
                "read_timeout": 10,
                "write_timeout": 10,
                "charset": "utf8mb4",
            }
        }

    # Response compression settings
    app.config["COMPRESS_MIMETYPES"] = ['application/json']
    app.config["COMPRESS_LEVEL"] = 6
    app.config["COMPRESS_MIN_SIZE"] = 500

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    compress.init_app(app)

    # Initialize security features
    from quizhub.security import init_security
    init_security(app)

    @login_manager.user_loader
    def load_user(user_id):
        from quizhub.auth.models import User
        try:
            return db.session.get(User, int(user_id))
        except (ValueError, TypeError):
            return None

    @login_manager.unauthorized_handler
    def handle_unauthorized():
        """API clients get a JSON 401 instead of a login redirect."""
        from quizhub.security import SecurityLogger
        SecurityLogger.log_unauthorized_access(request.path)
        return jsonify({
            'success': False,
            'error': 'Authentication required',
            'error_code': 'UNAUTHORIZED',
        }), 401

    register_error_handlers(app)

    # Register blueprints
    from quizhub.auth import auth_bp
    app.register_blueprint(auth_bp)

    from quizhub.quiz import admin_quiz_bp, student_quiz_bp
    app.register_blueprint(admin_quiz_bp)
    app.register_blueprint(student_quiz_bp)

    from quizhub.auth.cli import create_user_command
    app.cli.add_command(create_user_command)

    # Create tables if they do not exist
    with app.app_context():
        from quizhub.auth import models as auth_models  # noqa: F401
        from quizhub.quiz import models as quiz_models  # noqa: F401
        db.create_all()

    return app


def register_error_handlers(app: Flask) -> None:
    """Render every error as the JSON error envelope."""
    from quizhub.errors import AppError

    @app.errorhandler(AppError)
    def handle_app_error(e):
        db.session.rollback()
        app.logger.info(f"{request.method} {request.path} -> {e.status_code} {e.error_code}: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def handle_404(e):
        """Handle 404 errors for unknown routes."""
        app.logger.warning(f"404 error: {request.method} {request.path}")
        return jsonify({
            'success': False,
            'error': f'Route not found: {request.method} {request.path}',
            'error_code': 'NOT_FOUND',
        }), 404

    @app.errorhandler(405)
    def handle_405(e):
        """Handle 405 Method Not Allowed."""
        app.logger.warning(f"405 error: {request.method} {request.path}")
        return jsonify({
            'success': False,
            'error': f'Method not allowed: {request.method} {request.path}',
            'error_code': 'METHOD_NOT_ALLOWED',
        }), 405

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return jsonify({
                'success': False,
                'error': e.description,
                'error_code': e.name.upper().replace(' ', '_'),
            }), e.code
        db.session.rollback()
        app.logger.exception(f"Unhandled error on {request.method} {request.path}: {str(e)}")
        return jsonify({
            'success': False,
            'error': 'An unexpected error occurred',
            'error_code': 'INTERNAL_ERROR',
        }), 500
