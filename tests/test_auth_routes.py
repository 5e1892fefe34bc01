from conftest import review_form

from reviewhub.config import get_settings


def test_current_user_requires_identity(client):
    resp = client.get("/api/auth/user")

    assert resp.status_code == 401
    assert resp.json()["reason"] == "unauthorized"


def test_current_user_with_bearer_token(client, user_headers):
    resp = client.get("/api/auth/user", headers=user_headers)

    assert resp.status_code == 200
    assert resp.json()["id"] == "reader"
    assert resp.json()["role"] == "regular"


def test_login_sets_cookie_and_redirects(client):
    settings = get_settings()

    resp = client.get("/api/login", follow_redirects=False)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/"
    assert settings.auth_cookie_name in resp.cookies

    me = client.get("/api/auth/user")
    assert me.status_code == 200
    assert me.json()["id"] == settings.dev_login_user_id
    assert me.json()["role"] == "admin"


def test_login_is_idempotent(client):
    client.get("/api/login", follow_redirects=False)
    first = client.get("/api/auth/user").json()

    client.get("/api/login", follow_redirects=False)
    second = client.get("/api/auth/user").json()

    assert first["id"] == second["id"]
    assert first["createdAt"] == second["createdAt"]


def test_cookie_session_can_create_reviews(client):
    client.get("/api/login", follow_redirects=False)

    resp = client.post("/api/reviews", data=review_form())

    assert resp.status_code == 201


def test_logout_clears_session(client):
    client.get("/api/login", follow_redirects=False)

    resp = client.post("/api/logout")

    assert resp.status_code == 200
    assert resp.json() == {"message": "Logged out"}
    assert client.get("/api/auth/user").status_code == 401
