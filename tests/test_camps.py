import pytest

VARANASI = [82.9739, 25.3176]
SARNATH = [83.0234, 25.3811]
PATNA = [85.1376, 25.5941]


@pytest.fixture
def add_camp(client, donor):
    def _add(title, date, coordinates, **extra):
        resp = client.post(
            "/api/camps",
            json={"title": title, "date": date, "coordinates": coordinates, **extra},
            headers=donor[1],
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _add


def test_create_camp(add_camp, donor, store):
    camp = add_camp(
        "Eye check-up",
        "2026-03-10T09:00:00",
        VARANASI,
        organizer="District Hospital",
        services=["eye test", " spectacles "],
    )
    assert camp["location"] == {"type": "Point", "coordinates": VARANASI}
    assert camp["date"] == "2026-03-10T09:00:00+00:00"
    assert camp["services"] == ["eye test", "spectacles"]
    assert store.camps[camp["id"]]["created_by"] == donor[0]["id"]


def test_create_camp_accepts_geojson_location(client, donor):
    resp = client.post(
        "/api/camps",
        json={
            "title": "Dental camp",
            "date": "2026-04-01",
            "location": {"type": "Point", "coordinates": PATNA},
        },
        headers=donor[1],
    )
    assert resp.status_code == 201
    assert resp.get_json()["data"]["location"]["coordinates"] == PATNA


def test_create_camp_validation(client, donor, store):
    resp = client.post(
        "/api/camps",
        json={"date": "someday", "coordinates": [200, 10], "services": "all"},
        headers=donor[1],
    )
    assert resp.status_code == 400
    assert set(resp.get_json()["errors"]) == {"title", "date", "coordinates", "services"}
    assert store.camps == {}


def test_create_camp_rejects_non_text_fields(client, donor, store):
    resp = client.post(
        "/api/camps",
        json={
            "title": 5,
            "date": "2026-04-01",
            "coordinates": PATNA,
            "contact": 9876543210,
        },
        headers=donor[1],
    )
    assert resp.status_code == 400
    assert resp.get_json()["errors"] == {
        "title": "title must be a string",
        "contact": "contact must be a string",
    }
    assert store.camps == {}


def test_create_camp_body_must_be_an_object(client, donor, store):
    resp = client.post("/api/camps", json="Eye check-up", headers=donor[1])
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Request body must be a JSON object"
    assert store.camps == {}


def test_create_camp_requires_token(client):
    resp = client.post(
        "/api/camps",
        json={"title": "x", "date": "2026-04-01", "coordinates": VARANASI},
    )
    assert resp.status_code == 401


def test_list_camps_ordered_by_date(client, add_camp):
    add_camp("Later", "2026-05-01", VARANASI)
    add_camp("Sooner", "2026-02-01", PATNA)
    body = client.get("/api/camps").get_json()
    assert body["count"] == 2
    assert [c["title"] for c in body["data"]] == ["Sooner", "Later"]


def test_filter_camps_by_date_range(client, add_camp):
    add_camp("Jan", "2026-01-15", VARANASI)
    add_camp("Feb", "2026-02-15", VARANASI)
    add_camp("Mar", "2026-03-15", VARANASI)
    resp = client.get("/api/camps?startDate=2026-02-01&endDate=2026-02-28")
    assert [c["title"] for c in resp.get_json()["data"]] == ["Feb"]


def test_filter_camps_by_radius(client, add_camp):
    add_camp("Varanasi", "2026-02-01", VARANASI)
    add_camp("Sarnath", "2026-02-02", SARNATH)
    add_camp("Patna", "2026-02-03", PATNA)

    resp = client.get(f"/api/camps?lat={VARANASI[1]}&lng={VARANASI[0]}&radius=20")
    assert [c["title"] for c in resp.get_json()["data"]] == ["Varanasi", "Sarnath"]

    resp = client.get(f"/api/camps?lat={VARANASI[1]}&lng={VARANASI[0]}&radius=300")
    assert resp.get_json()["count"] == 3


def test_radius_needs_all_three_params(client, add_camp):
    add_camp("Patna", "2026-02-03", PATNA)
    resp = client.get(f"/api/camps?lat={VARANASI[1]}&lng={VARANASI[0]}")
    assert resp.get_json()["count"] == 1


def test_invalid_camp_filters(client):
    resp = client.get("/api/camps?startDate=soon&lat=100&lng=10&radius=5")
    assert resp.status_code == 400
    assert set(resp.get_json()["errors"]) == {"startDate", "location"}
