"""System endpoints (health check and stats)."""

from flask import Blueprint, current_app, jsonify

from config.database import get_db, get_store
from middleware.auth import login_required
from repositories.catalog_repository import CATALOG_REPOSITORIES

system_bp = Blueprint("system", __name__)


@system_bp.route("/health", methods=["GET"])
def health_check():
    """Simple health-check route without authentication."""
    try:
        get_store().ping()
        db_status = "ok"
    except Exception as e:
        current_app.logger.warning("Health check ping failed: %s", e)
        db_status = f"error: {str(e)}"

    return jsonify({
        "status": "ok",
        "database": db_status,
    }), 200


@system_bp.route("/stats", methods=["GET"])
@login_required
def get_stats():
    """Return the number of records in each catalog."""
    db = get_db()
    counts = {kind: repo_cls(db).count() for kind, repo_cls in CATALOG_REPOSITORIES.items()}
    return jsonify({
        "status": "ok",
        **{f"{kind}_count": count for kind, count in counts.items()},
        "message": "Successfully retrieved statistics",
    }), 200
