import os
from flask import Flask
from dotenv import load_dotenv
from flask_jwt_extended import JWTManager
from datetime import timedelta

from gramasathi.errors import register_error_handlers
from gramasathi.routes import (
    auth_bp,
    core,
    campaigns,
    profile_bp,
    camps_bp,
    admin_bp,
)
from gramasathi.realtime import init_socketio

load_dotenv(dotenv_path=".env")


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


def create_app(test_config=None):
    app = Flask(__name__)
    app.url_map.strict_slashes = False

    # JWT
    app.config["JWT_SECRET_KEY"] = os.getenv("JWT_SECRET", "dev-secret")
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    app.config["JWT_HEADER_NAME"] = "Authorization"
    app.config["JWT_HEADER_TYPE"] = "Bearer"
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(
        minutes=int(os.getenv("JWT_ACCESS_TOKEN_MINUTES", "60"))
    )
    app.config["JWT_REFRESH_TOKEN_EXPIRES"] = timedelta(
        days=int(os.getenv("JWT_REFRESH_TOKEN_DAYS", "30"))
    )

    # uploads: 5 images x 5MB plus form fields
    app.config["MAX_CONTENT_LENGTH"] = int(
        os.getenv("MAX_CONTENT_LENGTH", str(26 * 1024 * 1024))
    )
    # object storage (MinIO locally)
    app.config["S3_ENDPOINT"] = os.getenv("S3_ENDPOINT", "http://127.0.0.1:9000")
    app.config["S3_REGION"] = os.getenv("S3_REGION", "us-east-1")
    app.config["S3_ACCESS_KEY"] = os.getenv("S3_ACCESS_KEY", "minioadmin")
    app.config["S3_SECRET_KEY"] = os.getenv("S3_SECRET_KEY", "minioadmin")
    app.config["S3_BUCKET"] = os.getenv("S3_BUCKET", "gramasathi-uploads")
    app.config["S3_USE_PATH_STYLE"] = _flag("S3_USE_PATH_STYLE", "true")

    app.config["RATE_LIMIT_ENABLED"] = _flag("RATE_LIMIT_ENABLED", "1")
    app.config["RATE_LIMIT_AUTH_PER_MINUTE"] = int(
        os.getenv("RATE_LIMIT_AUTH_PER_MINUTE", "10")
    )
    app.config["PROGRESS_CACHE_SECONDS"] = int(os.getenv("PROGRESS_CACHE_SECONDS", "30"))
    app.config["SOCKETIO_ASYNC_MODE"] = os.getenv("SOCKETIO_ASYNC_MODE") or None

    if test_config:
        app.config.update(test_config)

    jwt = JWTManager(app)
    register_error_handlers(app, jwt)

    app.register_blueprint(core)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(campaigns, url_prefix="/api/campaigns")
    app.register_blueprint(profile_bp, url_prefix="/api/profile")
    app.register_blueprint(camps_bp, url_prefix="/api/camps")
    app.register_blueprint(admin_bp)

    if app.debug:
        for rule in app.url_map.iter_rules():
            app.logger.debug("%-45s | endpoint=%s", rule, rule.endpoint)

    init_socketio(app)
    return app
