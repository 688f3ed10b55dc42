from __future__ import annotations

import logging
from typing import Dict, Generic, List, Optional, Type, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from domain.models.catalog import CatalogItem, Part, Service, Tool
from middleware.errors import StoreQueryFailure, StoreWriteFailure


logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=CatalogItem)


def _object_id(item_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(item_id)
    except (InvalidId, TypeError):
        return None


class CatalogRepository(Generic[ItemT]):
    """Read/write access to one catalog collection, newest records first."""

    model: Type[ItemT]

    def __init__(self, db) -> None:
        self.collection: Collection = db[self.model.collection_name]

    @property
    def name(self) -> str:
        return self.model.collection_name

    def ensure_indexes(self) -> None:
        """Create the index backing the newest-first listing."""
        self.collection.create_index([("created_at", DESCENDING)])

    def find_all(self) -> List[ItemT]:
        """Return every record, sorted by creation time descending."""
        try:
            cursor = self.collection.find().sort("created_at", DESCENDING)
            docs = list(cursor)
        except PyMongoError as exc:
            logger.error("Reading %s failed: %s", self.name, exc)
            raise StoreQueryFailure(
                f"Failed to read {self.name}",
                details={"collection": self.name},
            ) from exc
        return [self.model.from_mongo(doc) for doc in docs]

    def find_by_id(self, item_id: str) -> Optional[ItemT]:
        oid = _object_id(item_id)
        if oid is None:
            return None
        try:
            doc = self.collection.find_one({"_id": oid})
        except PyMongoError as exc:
            raise StoreQueryFailure(
                f"Failed to read {self.name}",
                details={"collection": self.name, "id": item_id},
            ) from exc
        return self.model.from_mongo(doc)

    def count(self) -> int:
        try:
            return self.collection.count_documents({})
        except PyMongoError as exc:
            raise StoreQueryFailure(
                f"Failed to count {self.name}",
                details={"collection": self.name},
            ) from exc

    def save(self, item: ItemT) -> str:
        """Insert a new record and return its id."""
        try:
            result = self.collection.insert_one(item.to_mongo())
        except PyMongoError as exc:
            raise StoreWriteFailure(
                f"Failed to save to {self.name}",
                details={"collection": self.name},
            ) from exc
        return str(result.inserted_id)

    def delete(self, item_id: str) -> int:
        oid = _object_id(item_id)
        if oid is None:
            return 0
        try:
            result = self.collection.delete_one({"_id": oid})
        except PyMongoError as exc:
            raise StoreWriteFailure(
                f"Failed to delete from {self.name}",
                details={"collection": self.name, "id": item_id},
            ) from exc
        return result.deleted_count


class PartRepository(CatalogRepository[Part]):
    model = Part


class ServiceRepository(CatalogRepository[Service]):
    model = Service


class ToolRepository(CatalogRepository[Tool]):
    model = Tool


CATALOG_REPOSITORIES: Dict[str, Type[CatalogRepository]] = {
    "parts": PartRepository,
    "services": ServiceRepository,
    "tools": ToolRepository,
}
