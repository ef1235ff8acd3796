import click
from flask import Flask
from flasgger import Swagger
from flask_cors import CORS
import logging

from .config import DEFAULT_JWT_SECRET, get_config
from .errors import register_error_handlers
from models.db_storage import DBStorage
from services.credentials import CredentialService
from utils.security import AccessTokenIssuer

logger = logging.getLogger(__name__)

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "Auth Service API",
        "version": "1.0.0",
        "description": "Registers users, authenticates them and issues rotating access/refresh token pairs.",
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


def create_app(config_name: str | None = None, **overrides) -> Flask:
    """
    Application factory: creates and configures the Flask app.

    The configuration is read once here and its values are passed into the
    components that need them: the connection string to DBStorage, the
    signing secret to AccessTokenIssuer. ``overrides`` replace individual
    config keys (tests use this for DATABASE_URL).
    """
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))
    app.config.update(overrides)

    if not app.debug and not app.testing and app.config["JWT_SECRET"] == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is the insecure default; set it in the environment")

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    storage = DBStorage(app.config["DATABASE_URL"], echo=app.config.get("DB_ECHO", False))
    storage.reload()
    issuer = AccessTokenIssuer(app.config["JWT_SECRET"])
    app.extensions["credential_service"] = CredentialService(storage, issuer)

    from .health import bp as health_bp
    from .auth import bp as auth_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.cli.command("purge-expired-tokens")
    def purge_expired_tokens():
        """Delete refresh token records past their expiry."""
        deleted = app.extensions["credential_service"].refresh_tokens.purge_expired()
        click.echo(f"purged {deleted} expired refresh tokens")

    @app.route("/")
    def root():
        return {
            "message": "Welcome to the Auth Service API",
            "docs": "/apidocs/",
            "health": "/health",
        }, 200

    return app
