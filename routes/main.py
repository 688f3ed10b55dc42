# routes/main.py
"""Routes for the landing page.

The home page lists every part, service and tool, newest first. The fan-out
over the three collections lives in ``services.dashboard_service``; a failed
read surfaces as ``StoreQueryFailure`` and is turned into an error page by
the global handlers.
"""

from flask import Blueprint, current_app, jsonify, render_template

from config.database import get_db
from config.settings import HOME_TITLE
from middleware.auth import login_required
from services.dashboard_service import fetch_dashboard

main_bp = Blueprint("main", __name__)


def _load_dashboard():
    return fetch_dashboard(get_db(), timeout=current_app.config.get("DASHBOARD_TIMEOUT"))


@main_bp.route("/")
def show_home():
    """Render the dashboard with the three catalogs."""

    dashboard = _load_dashboard()
    return render_template("index.html", title=HOME_TITLE, **dashboard.as_context())


@main_bp.get("/api/dashboard")
@login_required
def api_dashboard():
    return jsonify(_load_dashboard().to_json())
