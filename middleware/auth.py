# middleware/auth.py
from functools import wraps
from flask import (
    Blueprint, redirect, url_for, session, flash, current_app, request
)

from config.database import get_db
from repositories.users_repository import UserRepository
from services.auth_service import ensure_default_users

auth_bp = Blueprint("auth", __name__, url_prefix="/users")


@auth_bp.before_app_request
def _seed_default_users_once():
    # store a flag on the app object so it persists across requests
    if not current_app.config.get("_DEFAULT_USERS_SEEDED", False):
        try:
            ensure_default_users(UserRepository(get_db()))
        except Exception as exc:
            current_app.logger.warning("ensure_default_users failed: %s", exc)
        current_app.config["_DEFAULT_USERS_SEEDED"] = True


def current_username():
    return session.get("username")


def login_required(view_func):
    """Decorator that requires a logged-in user (session['username'])."""
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        if current_app.config.get("LOGIN_DISABLED"):
            return view_func(*args, **kwargs)
        if "username" not in session:
            flash("Please log in to continue.", "warning")
            return redirect(url_for("auth.login", next=request.full_path.rstrip("?")))
        return view_func(*args, **kwargs)
    return wrapper
