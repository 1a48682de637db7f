from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from school_portal.core.enums import Duty, Role
from school_portal.users.model import UserProfile


@pytest.fixture
def users(users_factory):
    return users_factory(
        [
            UserProfile(
                uid="t1",
                role=Role.STAFF,
                display_name="Bu Sari",
                email="sari@smapna.sch.id",
                duties=frozenset({Duty.PRINCIPAL}),
                password_hash=generate_password_hash("rahasia123"),
            ),
            UserProfile(uid="a1", role=Role.ADMIN, email="admin@smapna.sch.id", password_hash=generate_password_hash("admin")),
        ]
    )


@pytest.fixture
def client(make_app, users):
    return make_app(users=users).test_client()


def test_login_redirects_to_role_landing(client):
    response = client.post("/login", json={"email": "admin@smapna.sch.id", "password": "admin"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/admin")

    with client.session_transaction() as sess:
        assert sess["uid"] == "a1"
        assert sess["role"] == "admin"


def test_login_with_form_data(client):
    response = client.post("/login", data={"email": "sari@smapna.sch.id", "password": "rahasia123"})

    assert response.headers["Location"].endswith("/staff")
    with client.session_transaction() as sess:
        assert sess["duties"] == ["kepala_sekolah"]


def test_wrong_password_is_rejected(client):
    response = client.post("/login", json={"email": "sari@smapna.sch.id", "password": "nope"})

    assert response.status_code == 401
    assert response.get_json()["success"] is False


def test_signed_in_user_is_sent_to_landing_from_login(client, sign_in):
    sign_in(client, uid="t1")

    assert client.get("/login").headers["Location"].endswith("/staff")


def test_logout_clears_session(client, sign_in):
    sign_in(client, uid="t1")

    response = client.get("/logout")

    assert response.headers["Location"].endswith("/login")
    assert client.get("/staff").headers["Location"].endswith("/login")


def test_me_returns_profile(client, sign_in):
    sign_in(client, uid="t1")

    data = client.get("/api/me").get_json()

    assert data["display_name"] == "Bu Sari"
    assert data["duties"] == ["kepala_sekolah"]
    assert data["notifications_enabled"] is False


def test_push_token_register_and_clear(client, sign_in, users):
    sign_in(client, uid="t1")

    assert client.post("/api/push-token", json={"token": "tok-xyz"}).status_code == 200
    assert users.get_profile("t1").fcm_token == "tok-xyz"

    assert client.delete("/api/push-token").status_code == 200
    assert users.get_profile("t1").fcm_token is None


def test_push_token_requires_value(client, sign_in):
    sign_in(client, uid="t1")

    response = client.post("/api/push-token", json={"token": ""})

    assert response.status_code == 400
