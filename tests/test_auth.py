from flask_jwt_extended import decode_token


def register(client, **overrides):
    body = {"name": "Asha Devi", "email": "asha@example.com", "password": "secret-pass"}
    body.update(overrides)
    return client.post("/api/auth/register", json=body)


def test_register_returns_user_and_tokens(client, app, store):
    resp = register(client, email="  Asha@Example.com ", village="Rampur")
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["user"]["email"] == "asha@example.com"
    assert body["user"]["role"] == "user"
    assert body["user"]["village"] == "Rampur"
    assert "password_hash" not in body["user"]

    with app.app_context():
        claims = decode_token(body["accessToken"])
    assert claims["sub"] == body["user"]["id"]
    assert claims["role"] == "user"
    assert store.users[body["user"]["id"]]["password_hash"] != "secret-pass"


def test_register_reports_invalid_fields(client):
    resp = client.post("/api/auth/register", json={"email": "nope", "password": "x"})
    assert resp.status_code == 400
    assert set(resp.get_json()["errors"]) == {"name", "email", "password"}


def test_register_rejects_non_text_fields(client, store):
    resp = register(client, name=5, email=["asha@example.com"], password=12345678)
    assert resp.status_code == 400
    assert set(resp.get_json()["errors"]) == {"name", "email", "password"}
    assert resp.get_json()["errors"]["password"] == "Password must be a string"
    assert store.users == {}


def test_register_body_must_be_an_object(client):
    resp = client.post("/api/auth/register", json=["asha@example.com"])
    assert resp.status_code == 400
    assert resp.get_json() == {
        "success": False,
        "message": "Request body must be a JSON object",
    }


def test_login_with_numeric_password(client):
    register(client, password="12345678")
    resp = client.post(
        "/api/auth/login", json={"email": "asha@example.com", "password": 12345678}
    )
    assert resp.status_code == 401


def test_register_rejects_duplicate_email(client):
    assert register(client).status_code == 201
    resp = register(client, email="ASHA@example.com")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Email already registered"


def test_login_with_correct_and_wrong_password(client):
    register(client)
    ok = client.post(
        "/api/auth/login", json={"email": "asha@example.com", "password": "secret-pass"}
    )
    assert ok.status_code == 200
    assert ok.get_json()["accessToken"]

    bad = client.post(
        "/api/auth/login", json={"email": "asha@example.com", "password": "wrong-pass"}
    )
    assert bad.status_code == 401
    assert bad.get_json() == {"success": False, "message": "Invalid credentials"}

    unknown = client.post(
        "/api/auth/login", json={"email": "who@example.com", "password": "secret-pass"}
    )
    assert unknown.status_code == 401


def test_me_returns_current_user(client, donor):
    resp = client.get("/api/auth/me", headers=donor[1])
    assert resp.status_code == 200
    assert resp.get_json()["user"]["id"] == donor[0]["id"]


def test_me_without_token(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "No token, authorization denied"


def test_refresh_issues_new_access_token(client, app):
    tokens = register(client).get_json()
    resp = client.post(
        "/api/auth/refresh",
        headers={"Authorization": f"Bearer {tokens['refreshToken']}"},
    )
    assert resp.status_code == 200
    with app.app_context():
        claims = decode_token(resp.get_json()["accessToken"])
    assert claims["sub"] == tokens["user"]["id"]
    assert claims["type"] == "access"


def test_access_token_cannot_refresh(client):
    tokens = register(client).get_json()
    resp = client.post(
        "/api/auth/refresh",
        headers={"Authorization": f"Bearer {tokens['accessToken']}"},
    )
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Token is not valid"}


def test_login_is_rate_limited(client, app):
    app.config["RATE_LIMIT_ENABLED"] = True
    app.config["RATE_LIMIT_AUTH_PER_MINUTE"] = 3
    body = {"email": "asha@example.com", "password": "wrong-pass"}
    codes = [client.post("/api/auth/login", json=body).status_code for _ in range(4)]
    assert codes == [401, 401, 401, 429]
    last = client.post("/api/auth/login", json=body).get_json()
    assert last["success"] is False
    assert last["retry_after"] == 60


def test_sliding_window_frees_old_hits():
    from gramasathi.utils.rate_limit import hit, reset
    reset()

    assert hit("k", 2, window=60, now=0.0)
    assert hit("k", 2, window=60, now=10.0)
    assert not hit("k", 2, window=60, now=59.0)
    # the first hit has left the window
    assert hit("k", 2, window=60, now=60.5)
    assert hit("other", 0, now=0.0)
