import io

import pytest

from gramasathi.utils.media_validators import (
    MAX_SIZE_CAMPAIGN_IMAGE,
    validate_content_type,
    validate_filename,
    validate_size,
)
from tests.conftest import campaign_payload


def image(name="photo.jpg", mimetype="image/jpeg", size=1024):
    return (io.BytesIO(b"\xff" * size), name, mimetype)


def post_multipart(client, url, headers, files, **fields):
    data = {k: str(v) for k, v in fields.items()}
    data["images"] = files
    return client.post(url, data=data, headers=headers, content_type="multipart/form-data")


def test_create_campaign_with_images(client, organizer, uploads):
    resp = post_multipart(
        client,
        "/api/campaigns",
        organizer[1],
        [image("a.jpg"), image("b.png", "image/png")],
        **campaign_payload(),
    )
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert len(data["images"]) == 2
    assert data["targetAmount"] == 1000
    assert len(uploads.objects) == 2
    for key in uploads.objects:
        assert key.startswith(f"charity/{organizer[0]['id']}/")
    assert all("/charity/" in url for url in data["images"])


@pytest.mark.parametrize(
    "files",
    [
        [image("a.jpg"), image("anim.gif", "image/gif")],
        [image("a.jpg"), image("notes.txt", "text/plain")],
        [image(f"p{i}.jpg") for i in range(6)],
        [image("huge.jpg", size=MAX_SIZE_CAMPAIGN_IMAGE + 1)],
    ],
    ids=["gif", "text", "too-many", "too-large"],
)
def test_bad_upload_stores_nothing(client, organizer, uploads, store, files):
    resp = post_multipart(
        client, "/api/campaigns", organizer[1], files, **campaign_payload()
    )
    assert resp.status_code == 400
    assert "images" in resp.get_json()["errors"]
    assert uploads.objects == {}
    assert store.campaigns == {}


def test_invalid_fields_are_reported_before_uploading(client, organizer, uploads):
    resp = post_multipart(
        client,
        "/api/campaigns",
        organizer[1],
        [image("a.jpg")],
        **campaign_payload(targetAmount="lots"),
    )
    assert resp.status_code == 400
    assert "targetAmount" in resp.get_json()["errors"]
    assert uploads.objects == {}


def test_update_entry_allows_three_images(client, create_campaign, organizer, uploads):
    camp = create_campaign()
    url = f"/api/campaigns/{camp['id']}/update"

    resp = post_multipart(
        client,
        url,
        organizer[1],
        [image(f"u{i}.webp", "image/webp") for i in range(4)],
        title="Delivered",
        content="All done",
    )
    assert resp.status_code == 400
    assert uploads.objects == {}

    resp = post_multipart(
        client,
        url,
        organizer[1],
        [image(f"u{i}.webp", "image/webp") for i in range(3)],
        title="Delivered",
        content="All done",
    )
    assert resp.status_code == 200
    assert len(resp.get_json()["data"]["updates"][0]["images"]) == 3


def test_validators():
    assert validate_filename("photo.JPG") == (True, None)
    assert validate_filename("../etc/passwd.jpg")[0] is False
    assert validate_filename("clip.mp4") == (False, "Only images are allowed")
    assert validate_content_type("image/png; charset=binary") == (True, None)
    assert validate_content_type(None)[0] is False
    assert validate_size(0, 10)[0] is False
    assert validate_size(11, 10)[0] is False
    assert validate_size(10, 10) == (True, None)


def test_object_keys_and_urls(app):
    from gramasathi.utils.s3_helpers import make_key, public_url

    key = make_key("charity", "c1", "My Photo (1).JPG")
    assert key.startswith("charity/c1/")
    assert key.endswith("-my-photo-1.jpg")
    assert make_key("profiles", "u1", "noext").endswith("-noext")

    with app.app_context():
        app.config.update(S3_ENDPOINT="http://minio:9000/", S3_BUCKET="bkt")
        assert public_url("a/b.png") == "http://minio:9000/bkt/a/b.png"
        app.config["S3_USE_PATH_STYLE"] = False
        assert public_url("a/b.png") == "http://bkt.minio:9000/a/b.png"


def _fail_store_write(*args, **kwargs):
    raise RuntimeError("connection reset")


def _orphan_logs(caplog):
    messages = [r.getMessage() for r in caplog.records]
    return [m for m in messages if "orphaned uploads" in m]


def test_failed_campaign_insert_logs_uploaded_images(
    client, organizer, uploads, store, monkeypatch, caplog
):
    from gramasathi.models import campaign as campaign_model

    monkeypatch.setattr(campaign_model, "insert_campaign", _fail_store_write)
    resp = post_multipart(
        client,
        "/api/campaigns",
        organizer[1],
        [image("a.jpg"), image("b.png", "image/png")],
        **campaign_payload(),
    )
    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Server error"}
    assert store.campaigns == {}

    logged = _orphan_logs(caplog)
    assert len(logged) == 1
    assert len(uploads.objects) == 2
    for key in uploads.objects:
        assert key in logged[0]


def test_failed_update_insert_logs_uploaded_images(
    client, create_campaign, organizer, uploads, store, monkeypatch, caplog
):
    from gramasathi.models import campaign as campaign_model

    camp = create_campaign()
    monkeypatch.setattr(campaign_model, "insert_update", _fail_store_write)
    resp = post_multipart(
        client,
        f"/api/campaigns/{camp['id']}/update",
        organizer[1],
        [image("u.webp", "image/webp")],
        title="Delivered",
        content="All done",
    )
    assert resp.status_code == 500
    assert store.updates[camp["id"]] == []

    (key,) = uploads.objects
    assert any(key in message for message in _orphan_logs(caplog))


def test_failed_insert_without_images_logs_nothing(
    client, organizer, monkeypatch, caplog
):
    from gramasathi.models import campaign as campaign_model

    monkeypatch.setattr(campaign_model, "insert_campaign", _fail_store_write)
    resp = client.post("/api/campaigns", json=campaign_payload(), headers=organizer[1])
    assert resp.status_code == 500
    assert _orphan_logs(caplog) == []
