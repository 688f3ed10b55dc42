from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CatalogItem(BaseModel):
    """Common shape of every catalog record (part, service or tool)."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    collection_name: ClassVar[str] = ""
    label: ClassVar[str] = "Item"

    id: Optional[str] = Field(default=None, alias="_id", description="MongoDB identifier")
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    category: Optional[str] = Field(default=None, max_length=100)
    created_at: datetime = Field(default_factory=_utcnow, description="Creation timestamp, sole sort key")
    updated_at: Optional[datetime] = None

    @field_validator("category", mode="before")
    @classmethod
    def _blank_category_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _none_description_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_mongo(self) -> dict:
        data = self.model_dump(exclude_none=True, by_alias=True)
        if isinstance(data.get("_id"), str):
            data["_id"] = ObjectId(data["_id"])
        return data

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_mongo(cls, doc: dict | None):
        if not doc:
            return None
        doc = {**doc, "_id": str(doc.get("_id"))}
        return cls(**doc)


class Part(CatalogItem):
    """A vehicle part offered in the catalog."""

    collection_name: ClassVar[str] = "parts"
    label: ClassVar[str] = "Part"


class Service(CatalogItem):
    """A service offered by the workshop."""

    collection_name: ClassVar[str] = "services"
    label: ClassVar[str] = "Service"


class Tool(CatalogItem):
    """A tool listed in the catalog."""

    collection_name: ClassVar[str] = "tools"
    label: ClassVar[str] = "Tool"
