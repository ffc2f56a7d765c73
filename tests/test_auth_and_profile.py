"""
Tests for registration, login and the profile endpoints.

Run: pytest tests/test_auth_and_profile.py -v
"""

from career_ai.api.routes import auth_routes

from tests.conftest import auth_headers, create_user, get_quota_row


def register(client, email="ada@example.com", password="s3cret-pass", full_name="Ada Lovelace"):
    return client.post("/api/auth/register", json={
        "email": email, "password": password, "full_name": full_name
    })


def login(client, email="ada@example.com", password="s3cret-pass"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


# ============================================================
# AUTH
# ============================================================

def test_register_login_and_me(client):
    assert register(client).status_code == 201

    response = login(client)
    assert response.status_code == 200
    token = response.json()["access_token"]
    user_id = response.json()["user_id"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["user_id"] == user_id
    assert me.json()["email"] == "ada@example.com"


def test_register_creates_free_quota_record(client):
    register(client)
    user_id = login(client).json()["user_id"]

    used, last_reset = get_quota_row(user_id)
    assert used == 0
    assert last_reset is not None

    quota = client.get("/api/guidance/quota", headers=auth_headers(user_id)).json()
    assert quota["plan"] == "free"
    assert quota["remaining"] == 5


def test_duplicate_email_is_rejected(client):
    register(client)

    response = register(client, email="ADA@example.com")

    assert response.status_code == 400


def test_email_taken_during_registration_is_400(client, monkeypatch):
    real_hash = auth_routes.hash_password

    def hash_after_competing_signup(password):
        create_user(email="ada@example.com")
        return real_hash(password)

    monkeypatch.setattr(auth_routes, "hash_password", hash_after_competing_signup)

    response = register(client)

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_wrong_password_is_401(client):
    register(client)

    assert login(client, password="wrong-password").status_code == 401
    assert login(client, email="nobody@example.com").status_code == 401


def test_short_password_is_400(client):
    assert register(client, password="short").status_code == 400


# ============================================================
# PROFILE
# ============================================================

def test_get_profile(client):
    user_id = create_user(plan="premium", queries_today=3)

    response = client.get("/api/profile", headers=auth_headers(user_id))

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == user_id
    assert data["subscription_plan"] == "premium"
    assert data["queries_today"] == 3
    assert data["interests"] == []


def test_update_profile_partial(client):
    user_id = create_user()
    headers = auth_headers(user_id)

    response = client.put("/api/profile", json={
        "location": "Lisbon",
        "experience_level": "mid",
        "interests": ["data", "  ", "design"],
    }, headers=headers)
    assert response.status_code == 200

    data = client.get("/api/profile", headers=headers).json()
    assert data["location"] == "Lisbon"
    assert data["experience_level"] == "mid"
    assert data["interests"] == ["data", "design"]
    assert data["full_name"] == "Test User"


def test_update_profile_cannot_touch_quota(client):
    user_id = create_user(plan="free", queries_today=4)

    response = client.put("/api/profile", json={
        "subscription_plan": "pro", "queries_today": 0
    }, headers=auth_headers(user_id))

    assert response.status_code == 400
    assert get_quota_row(user_id)[0] == 4


def test_profile_missing_is_404(client):
    user_id = create_user(with_profile=False)

    assert client.get("/api/profile", headers=auth_headers(user_id)).status_code == 404
