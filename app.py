import os
import importlib
import pkgutil
from datetime import timedelta

from dotenv import load_dotenv
from flask import Blueprint, Flask, session

# Settings read the environment at import time
load_dotenv()

from config import settings
from config.database import EXTENSION_KEY, MongoConnection, bootstrap_indexes
from config.logging_config import setup_logging


def create_app(config=None, store=None) -> Flask:
    """Flask application factory.

    ``store`` is any object exposing ``db()`` and ``ping()``; a
    ``MongoConnection`` built from the environment is used when omitted.
    """
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    app = Flask(__name__)
    app.secret_key = os.getenv("SECRET_KEY", "dev")
    app.config.update(
        DASHBOARD_TIMEOUT=settings.DASHBOARD_TIMEOUT,
        PERMANENT_SESSION_LIFETIME=timedelta(seconds=settings.SESSION_MAX_AGE),
        SESSION_COOKIE_SECURE=settings.SESSION_COOKIE_SECURE,
        SESSION_COOKIE_HTTPONLY=True,
    )
    if config:
        app.config.update(config)

    """Registration of error handlers."""
    from middleware.handlers import register_error_handlers
    register_error_handlers(app)

    app.extensions[EXTENSION_KEY] = store if store is not None else MongoConnection()

    if settings.DB_BOOTSTRAP_INDEXES:
        bootstrap_indexes(app.extensions[EXTENSION_KEY].db())

    # Auto-register all blueprints defined in routes/*.py
    from routes import __path__ as routes_path

    for _, module_name, _ in pkgutil.iter_modules(routes_path):
        module = importlib.import_module(f"routes.{module_name}")
        for attr_name in dir(module):
            obj = getattr(module, attr_name)
            if isinstance(obj, Blueprint) and obj.name not in app.blueprints:
                app.register_blueprint(obj)

    @app.context_processor
    def _inject_navigation():
        return {
            "app_title": settings.APP_TITLE,
            "current_user": session.get("username"),
        }

    app.logger.info("Application created")
    return app


# at bottom of app.py
if __name__ == "__main__":
    from os import getenv

    connection = MongoConnection()
    # Fail fast if credentials/URI are wrong
    connection.ping()
    app = create_app(store=connection)

    cert_path, key_path = getenv("CERT_PATH"), getenv("KEY_PATH")
    app.run(
        host="0.0.0.0",
        port=int(getenv("PORT", 443)),
        debug=getenv("FLASK_DEBUG", "0") == "1",
        use_reloader=False,
        ssl_context=(cert_path, key_path) if cert_path and key_path else None,
    )
