"""Service helpers for the parts, services and tools catalogs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from domain.models.catalog import CatalogItem
from middleware.errors import RecordNotFoundError, ValidationError
from repositories.catalog_repository import CATALOG_REPOSITORIES, CatalogRepository


CATALOG_FIELDS = ("name", "description", "category")


def _field_errors(exc: PydanticValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__all__",)
        errors.setdefault(str(loc[0]), error.get("msg", "Invalid value"))
    return errors


class CatalogService:
    """List, show, create and delete records of one catalog kind."""

    def __init__(self, repository: CatalogRepository) -> None:
        self.repository = repository

    @property
    def kind(self) -> str:
        return self.repository.name

    @property
    def label(self) -> str:
        return self.repository.model.label

    def list_items(self) -> List[CatalogItem]:
        """Return every record, newest first."""
        return self.repository.find_all()

    def get_item(self, item_id: str) -> Optional[CatalogItem]:
        return self.repository.find_by_id(item_id)

    def create_item(self, data: Dict[str, Any]) -> CatalogItem:
        """Validate ``data`` and insert it; raises ValidationError on bad input."""
        payload = {key: data.get(key) for key in CATALOG_FIELDS if key in data}
        try:
            item = self.repository.model(
                **payload, created_at=datetime.now(timezone.utc)
            )
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid {self.label.lower()}",
                details=_field_errors(exc),
            ) from exc
        item.id = self.repository.save(item)
        return item

    def delete_item(self, item_id: str) -> bool:
        return self.repository.delete(item_id) > 0


def catalog_service_for(kind: str, db) -> CatalogService:
    """Resolve ``kind`` (parts, services, tools) to a service bound to ``db``."""
    repo_cls = CATALOG_REPOSITORIES.get(kind)
    if repo_cls is None:
        raise RecordNotFoundError(f"Unknown catalog '{kind}'", details={"kind": kind})
    return CatalogService(repo_cls(db))


__all__ = ["CATALOG_FIELDS", "CatalogService", "catalog_service_for"]
