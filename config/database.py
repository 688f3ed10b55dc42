# config/database.py
from __future__ import annotations

import logging
import os
from typing import Optional
from urllib.parse import quote_plus

from flask import current_app
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.server_api import ServerApi

from config.settings import DB_NAME
from middleware.errors import ConfigurationError


logger = logging.getLogger(__name__)

EXTENSION_KEY = "mongo"


def _build_mongo_uri() -> str:
    """
    Build the MongoDB URI.
    Precedence:
      1. TEST_MONGODB_URI (for CI/tests)
      2. MONGODB_URI (full connection string)
      3. Individual parts: DB_USER / DB_PASSWORD / DB_HOST / DB_NAME
    """
    test_uri = os.getenv("TEST_MONGODB_URI")
    if test_uri:
        return test_uri

    uri = os.getenv("MONGODB_URI")
    if uri:
        return uri

    user = os.getenv("DB_USER", "").strip()
    pwd = os.getenv("DB_PASSWORD", "").strip()
    host = os.getenv("DB_HOST", "").strip()
    dbname = os.getenv("DB_NAME", DB_NAME).strip()

    if not (user and pwd and host):
        raise ConfigurationError(
            "Missing Mongo credentials. Set TEST_MONGODB_URI, MONGODB_URI or "
            "DB_USER/DB_PASSWORD/DB_HOST (and optionally DB_NAME)."
        )

    return (
        f"mongodb+srv://{user}:{quote_plus(pwd)}@{host}/{dbname}"
        f"?retryWrites=true&w=majority&tls=true"
    )


class MongoConnection:
    """
    MongoDB client & DB accessor owned by whoever creates it.
    - Holds one pooled client; the app factory stores it on the Flask app.
    - Tests pass any object exposing ``db()`` and ``ping()`` instead.
    """

    def __init__(
        self,
        uri: Optional[str] = None,
        db_name: Optional[str] = None,
        *,
        server_selection_timeout_ms: int = 5000,
    ) -> None:
        self._uri = uri or _build_mongo_uri()
        self._db_name = db_name or os.getenv("DB_NAME", DB_NAME)
        options = {"serverSelectionTimeoutMS": server_selection_timeout_ms}
        if self._uri.startswith("mongodb+srv://"):
            options["server_api"] = ServerApi("1")
        # MongoClient connects lazily; call ping() to fail fast
        self._client = MongoClient(self._uri, **options)

    @property
    def client(self) -> MongoClient:
        """Return the underlying MongoClient instance."""
        return self._client

    def db(self) -> Database:
        """Return the default database handle."""
        return self._client[self._db_name]

    def collection(self, name: str):
        """Return a collection handle from the default DB."""
        return self.db()[name]

    def ping(self) -> None:
        """Round-trip to the server; raises PyMongoError when unreachable."""
        self._client.admin.command("ping")

    def close(self) -> None:
        """Close the client (used in tests/shutdown)."""
        if getattr(self, "_client", None) is not None:
            self._client.close()


def get_store(app=None):
    """Return the store attached to ``app`` (defaults to the current app)."""
    app = app or current_app
    return app.extensions[EXTENSION_KEY]


def get_db():
    """Return the default database handle of the current app's store."""
    return get_store().db()


def bootstrap_indexes(db) -> None:
    """Create the indexes used by the catalog and user queries."""
    from repositories.catalog_repository import CATALOG_REPOSITORIES
    from repositories.users_repository import UserRepository

    for repo_cls in CATALOG_REPOSITORIES.values():
        repo_cls(db).ensure_indexes()
    UserRepository(db).ensure_indexes()
    logger.info("MongoDB indexes ensured")
