# routes/auth.py
from urllib.parse import urlparse

from flask import (
    render_template, request, redirect,
    url_for, session, flash
)

from config.database import get_db
from config.settings import APP_TITLE
from middleware.auth import auth_bp
from middleware.errors import DuplicateKeyError, ValidationError
from repositories.users_repository import UserRepository
from services.auth_service import authenticate, register_user


def _safe_next(target):
    """Only allow redirects to paths on this site."""
    if not target:
        return None
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc or not target.startswith("/") or target.startswith("//"):
        return None
    return target


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    """Render login form and handle authentication."""
    if request.method == "POST":
        username = (request.form.get("username") or "").strip()
        password = request.form.get("password") or ""

        user = authenticate(UserRepository(get_db()), username, password)
        if not user:
            flash("Invalid username or password.", "danger")
            return render_template("login.html", title=f"{APP_TITLE} | Login", username=username)

        session.clear()
        session.permanent = True
        session["username"] = user["username"]
        flash(f"Welcome, {session['username']}!", "success")
        target = _safe_next(request.args.get("next") or request.form.get("next"))
        return redirect(target or url_for("main.show_home"))

    return render_template("login.html", title=f"{APP_TITLE} | Login", next=request.args.get("next", ""))


@auth_bp.route("/register", methods=["GET", "POST"])
def register():
    """Render the sign-up form and create the account."""
    form_data = {
        "username": (request.form.get("username") or "").strip(),
        "email": (request.form.get("email") or "").strip(),
    }
    errors: dict[str, str] = {}

    if request.method == "POST":
        password = request.form.get("password") or ""
        confirm = request.form.get("confirm_password") or ""
        if not form_data["username"]:
            errors["username"] = "Username is required."
        if password != confirm:
            errors["confirm_password"] = "Passwords do not match."

        if not errors:
            try:
                register_user(
                    UserRepository(get_db()),
                    form_data["username"],
                    password,
                    email=form_data["email"] or None,
                )
            except DuplicateKeyError:
                errors["username"] = "That username is already taken."
            except ValidationError as exc:
                errors.update(exc.details or {"__all__": exc.message})
                errors.setdefault("__all__", exc.message)
            else:
                flash("Account created. Please log in.", "success")
                return redirect(url_for("auth.login"))

    return render_template(
        "register.html",
        title=f"{APP_TITLE} | Register",
        form_data=form_data,
        errors=errors,
    )


@auth_bp.route("/logout", methods=["POST", "GET"])
def logout():
    """Log out current user and redirect to login page."""
    session.clear()
    flash("You have been logged out.", "info")
    return redirect(url_for("auth.login"))
