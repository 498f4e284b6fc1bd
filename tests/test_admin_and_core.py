from uuid import uuid4


def test_root_banner(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "GramaSathi API is running"


def test_ping(client):
    assert client.get("/__ping").get_json() == {"ok": True}


def test_api_index_lists_campaign_routes(client):
    endpoints = client.get("/api").get_json()["endpoints"]
    assert "/api/campaigns/<id>/donate (POST)" in endpoints["campaigns"]


def test_unknown_route(client):
    resp = client.get("/api/nowhere")
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "Route not found"}


def test_wrong_method(client):
    resp = client.get(f"/api/campaigns/{uuid4()}/donate")
    assert resp.status_code == 405
    assert resp.get_json() == {"success": False, "message": "Method not allowed"}


def test_unexpected_error_is_a_generic_500(client, monkeypatch):
    from gramasathi.models import campaign as campaign_model

    def boom(**kwargs):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(campaign_model, "list_campaigns", boom)
    resp = client.get("/api/campaigns")
    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Server error"}


def test_metrics_requires_admin(client, donor, admin):
    assert client.get("/admin/metrics").status_code == 401

    resp = client.get("/admin/metrics", headers=donor[1])
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "admin role required"

    resp = client.get("/admin/metrics", headers=admin[1])
    assert resp.status_code == 200
    assert "gramasathi_donations" in resp.get_data(as_text=True)
