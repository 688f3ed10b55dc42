"""API and UI routes for the parts, services and tools catalogs.

The three catalogs share one shape, so a single factory builds a blueprint
per kind; each blueprint is named after its collection (``parts.list_items``,
``services.item_detail`` ...).
"""

from __future__ import annotations

from flask import (
    Blueprint,
    abort,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    url_for,
)

from config.database import get_db
from config.settings import APP_TITLE
from middleware.auth import login_required
from middleware.errors import ValidationError
from services.catalog_service import CATALOG_FIELDS, CatalogService, catalog_service_for


def make_catalog_blueprint(kind: str) -> Blueprint:
    bp = Blueprint(kind, __name__)

    def service() -> CatalogService:
        return catalog_service_for(kind, get_db())

    @bp.get(f"/{kind}")
    def list_items():
        """Render every record of this catalog, newest first."""
        svc = service()
        return render_template(
            "catalog/list.html",
            title=f"{APP_TITLE} | {kind.title()}",
            kind=kind,
            label=svc.label,
            items=svc.list_items(),
        )

    @bp.route(f"/{kind}/create", methods=["GET", "POST"])
    @login_required
    def create_item():
        """Render and process the creation form."""
        svc = service()
        form_data = {key: (request.form.get(key) or "").strip() for key in CATALOG_FIELDS}
        errors: dict[str, str] = {}

        if request.method == "POST":
            if not form_data["name"]:
                errors["name"] = "Name is required."
            else:
                try:
                    item = svc.create_item(form_data)
                except ValidationError as exc:
                    errors.update(exc.details)
                else:
                    flash(f"{svc.label} created successfully.", "success")
                    return redirect(url_for(f"{kind}.item_detail", item_id=item.id))

        return render_template(
            "catalog/create.html",
            title=f"{APP_TITLE} | New {svc.label}",
            kind=kind,
            label=svc.label,
            form_data=form_data,
            errors=errors,
        ), (400 if errors else 200)

    @bp.get(f"/{kind}/<item_id>")
    def item_detail(item_id: str):
        svc = service()
        item = svc.get_item(item_id)
        if not item:
            abort(404)
        return render_template(
            "catalog/detail.html",
            title=f"{APP_TITLE} | {item.name}",
            kind=kind,
            label=svc.label,
            item=item,
        )

    @bp.post(f"/{kind}/<item_id>/delete")
    @login_required
    def delete_item(item_id: str):
        svc = service()
        if not svc.delete_item(item_id):
            abort(404)
        flash(f"{svc.label} deleted.", "info")
        return redirect(url_for(f"{kind}.list_items"))

    @bp.get(f"/api/{kind}")
    @login_required
    def api_list_items():
        return jsonify([item.to_json() for item in service().list_items()])

    @bp.post(f"/api/{kind}")
    @login_required
    def api_create_item():
        data = request.get_json(silent=True) or {}
        item = service().create_item(data)
        return jsonify(item.to_json()), 201

    @bp.get(f"/api/{kind}/<item_id>")
    @login_required
    def api_get_item(item_id: str):
        item = service().get_item(item_id)
        if not item:
            abort(404)
        return jsonify(item.to_json())

    @bp.delete(f"/api/{kind}/<item_id>")
    @login_required
    def api_delete_item(item_id: str):
        if not service().delete_item(item_id):
            abort(404)
        return "", 204

    return bp


parts_bp = make_catalog_blueprint("parts")
services_bp = make_catalog_blueprint("services")
tools_bp = make_catalog_blueprint("tools")
