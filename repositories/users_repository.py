from __future__ import annotations

from typing import Optional
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError
from pymongo.errors import PyMongoError

from domain.models.user import User
from middleware.errors import DuplicateKeyError, StoreQueryFailure, StoreWriteFailure


class UserRepository:
    """CRUD operations for users collection."""

    def __init__(self, db) -> None:
        self.collection = db["users"]

    def ensure_indexes(self) -> None:
        # unique index for fast username lookups
        self.collection.create_index("username", unique=True)

    def create(self, user: User) -> str:
        try:
            result = self.collection.insert_one(user.to_mongo())
        except MongoDuplicateKeyError as exc:
            raise DuplicateKeyError("Username already exists", details={"username": user.username}) from exc
        except PyMongoError as exc:
            raise StoreWriteFailure("Failed to save user") from exc
        return str(result.inserted_id)

    def get_by_id(self, user_id: str) -> Optional[User]:
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        doc = self._find_one({"_id": oid})
        return User.from_mongo(doc)

    def get_by_username(self, username: str) -> Optional[User]:
        doc = self._find_one({"username": username})
        return User.from_mongo(doc)

    def update(self, user_id: str, data: dict) -> int:
        data = {k: v for k, v in data.items() if k != "_id"}
        try:
            result = self.collection.update_one({"_id": ObjectId(user_id)}, {"$set": data})
        except PyMongoError as exc:
            raise StoreWriteFailure("Failed to update user") from exc
        return result.modified_count

    def delete(self, user_id: str) -> int:
        try:
            result = self.collection.delete_one({"_id": ObjectId(user_id)})
        except PyMongoError as exc:
            raise StoreWriteFailure("Failed to delete user") from exc
        return result.deleted_count

    def _find_one(self, query: dict) -> Optional[dict]:
        try:
            return self.collection.find_one(query)
        except PyMongoError as exc:
            raise StoreQueryFailure("Failed to read users") from exc
