import os

import pytest

from config.database import MongoConnection
from repositories.catalog_repository import PartRepository
from services.dashboard_service import fetch_dashboard


@pytest.mark.integration
def test_can_ping_and_aggregate_against_test_mongo():
    uri = os.getenv("TEST_MONGODB_URI")
    if not uri:
        pytest.skip("TEST_MONGODB_URI must be set for integration tests.")

    conn = MongoConnection(uri, db_name="automotive_intelligence_test")
    try:
        conn.ping()
        db = conn.db()
        PartRepository(db).ensure_indexes()

        dashboard = fetch_dashboard(db)

        assert isinstance(dashboard.parts, list)
        assert isinstance(dashboard.services, list)
        assert isinstance(dashboard.tools, list)
    finally:
        conn.close()
