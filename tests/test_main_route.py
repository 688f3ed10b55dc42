from pymongo.errors import ServerSelectionTimeoutError

from conftest import ts


def test_home_renders_all_three_catalogs_newest_first(client, store):
    store.add("parts", "Old alternator", ts(1))
    store.add("parts", "New alternator", ts(2))
    store.add("tools", "Scan tool", ts(5))

    resp = client.get("/")

    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert "Automotive Intelligence | Home" in html
    assert html.index("New alternator") < html.index("Old alternator")
    assert "Scan tool" in html
    assert "No services yet." in html


def test_home_fails_without_partial_payload(client, store):
    store.add("parts", "Visible part", ts(1))
    store.add("tools", "Visible tool", ts(1))
    store.database["services"].error = ServerSelectionTimeoutError("no servers")

    resp = client.get("/")

    assert resp.status_code == 503
    html = resp.get_data(as_text=True)
    assert "Something went wrong" in html
    assert "Visible part" not in html
    assert "Visible tool" not in html


def test_api_dashboard_requires_login(client):
    resp = client.get("/api/dashboard")

    assert resp.status_code == 302
    assert "/users/login" in resp.headers["Location"]


def test_api_dashboard_returns_json(auth_client, store):
    store.add("services", "Wheel alignment", ts(3))

    resp = auth_client.get("/api/dashboard")

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["parts"] == []
    assert data["services"][0]["name"] == "Wheel alignment"


def test_api_dashboard_failure_is_json(auth_client, store):
    store.database["parts"].error = ServerSelectionTimeoutError("no servers")

    resp = auth_client.get("/api/dashboard")

    assert resp.status_code == 503
    data = resp.get_json()
    assert data["status"] == "error"
    assert data["error"] == "StoreQueryFailure"
    assert data["details"] == {"collection": "parts"}


def test_unknown_route_renders_404_page(client):
    resp = client.get("/no/such/page")

    assert resp.status_code == 404
    assert "Page not found" in resp.get_data(as_text=True)
