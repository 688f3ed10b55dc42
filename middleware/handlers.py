"""
Global Flask error handling middleware.

Requests under ``/api/`` get JSON payloads:
{
    "status": "error",
    "error": "ErrorClassName",
    "message": "Human readable message",
    "details": { ... optional context ... }
}

Page requests get ``error.html`` (or ``404.html``) with a generic message.
"""

import os
import traceback

from flask import jsonify, render_template, request
from werkzeug.exceptions import HTTPException, NotFound

from config.settings import APP_TITLE
from middleware.errors import BaseAppError, StoreError


GENERIC_FAILURE = "Something went wrong while loading this page. Please try again later."


def _wants_json() -> bool:
    return request.path.startswith("/api/")


def _render_error_page(code: int, message: str):
    return render_template(
        "error.html",
        title=f"{APP_TITLE} | Error",
        code=code,
        message=message,
    ), code


def register_error_handlers(app):
    """Attach all error handlers to a Flask app instance."""

    @app.errorhandler(BaseAppError)
    def handle_custom_error(err):
        """Handle custom, domain-specific errors."""
        if isinstance(err, StoreError):
            app.logger.error("%s: %s %s", err.__class__.__name__, err.message, err.details)
        if _wants_json():
            response = jsonify(err.to_dict())
            response.status_code = err.code
            return response
        # Store details never reach the page
        message = GENERIC_FAILURE if isinstance(err, StoreError) else err.message
        return _render_error_page(err.code, message)

    @app.errorhandler(NotFound)
    def handle_not_found(err):
        if _wants_json():
            return jsonify({
                "status": "error",
                "error": "NotFound",
                "message": "Resource not found",
                "details": {},
            }), 404
        return render_template("404.html", title="Page not found"), 404

    @app.errorhandler(Exception)
    def handle_unexpected_error(err):
        """Catch-all handler for unexpected exceptions."""
        # Flask files HTTPException handlers under their status code, so
        # subclasses with a different code land here.
        if isinstance(err, BaseAppError):
            return handle_custom_error(err)
        if isinstance(err, NotFound):
            return handle_not_found(err)
        if isinstance(err, HTTPException):
            return err

        app.logger.exception("Unhandled error on %s", request.path)

        if not _wants_json():
            return _render_error_page(500, GENERIC_FAILURE)

        details = {}
        if app.debug or os.getenv("FLASK_DEBUG") == "1":
            details["traceback"] = traceback.format_exc()

        payload = {
            "status": "error",
            "error": err.__class__.__name__,
            "message": str(err) or "Unexpected internal error",
            "details": details
        }
        return jsonify(payload), 500
