from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import check_required_settings, get_config
from .errors import register_error_handlers
from models import storage  # DBStorage singleton (scoped_session)
from services.session_manager import SessionManager
from utils.security import TokenCodec

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Task Tracker API",
        "version": "1.0.0",
        "description": "REST API for per-user tasks with access/refresh token sessions.",
    },
    "basePath": "/",  # blueprints are mounted under /api
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    Token secrets and lifetimes are read once here; request handlers only
    read them back from app.extensions.
    """
    config_cls = get_config(config_name)
    check_required_settings(config_cls)

    app = Flask(__name__)
    app.config.from_object(config_cls)

    CORS(app, resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Uniform {success, message} envelope for every failure
    register_error_handlers(app)

    storage.configure(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    storage.reload()

    codec = TokenCodec.from_config(app.config)
    app.extensions["token_codec"] = codec
    app.extensions["session_manager"] = SessionManager(storage, codec)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .tasks import bp as tasks_bp

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # This calls scoped_session.remove(), preventing connection leaks
        storage.close()

    @app.route("/")
    def root():
        return {
            "success": True,
            "message": "Welcome to Task Tracker API",
            "data": {"docs": "/apidocs/", "health": "/api/health"},
        }, 200

    return app
