from collections.abc import Mapping

from flask import Flask, request
from flask_cors import CORS

from .config import Config
from .errors import register_error_handlers
from .extensions import db
from .routes import register_routes


def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)

    app.config.from_object(Config)
    if isinstance(config_object, Mapping):
        app.config.from_mapping(config_object)
    elif config_object:
        app.config.from_object(config_object)
    app.config.from_envvar("SALON_SETTINGS", silent=True)

    db.init_app(app)

    # Allow the frontend to talk to the backend with bearer tokens
    CORS(app,
         origins=app.config["CORS_ORIGINS"],
         allow_headers=["Content-Type", "Authorization"],
         methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )

    @app.before_request
    def log_mutating_request() -> None:
        # Bodies are not logged: they may carry passwords.
        if request.method not in ("GET", "HEAD", "OPTIONS"):
            app.logger.info("%s %s", request.method, request.path)

    register_error_handlers(app)
    register_routes(app)

    if app.config.get("CREATE_TABLES_ON_STARTUP"):
        with app.app_context():
            db.create_all()

    return app
