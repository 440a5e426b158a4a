"""Profile registration, lookup, updates and promotion."""

from __future__ import annotations

from werkzeug.security import check_password_hash


def _register(client, **overrides):
    data = {"name": "Ana", "email": "ana@example.com", "biography": "Cinephile", "password": "pw-123"}
    data.update(overrides)
    return client.post("/profiles", data=data)


def test_register_profile_with_photo(client, seed):
    resp = client.post(
        "/profiles",
        data={"name": "Ana", "email": "ana@example.com", "password": "pw-123"},
        files={"photo": ("ana.jpg", b"\xff\xd8\xff-jpeg-bytes", "image/jpeg")},
    )

    assert resp.status_code == 201
    profile_id = resp.json()["profile_id"]
    photo = client.get(f"/profiles/{profile_id}/photo")
    assert photo.status_code == 200
    assert photo.content == b"\xff\xd8\xff-jpeg-bytes"
    assert photo.headers["content-type"] == "image/jpeg"


def test_password_is_hashed_and_never_returned(client, seed):
    resp = _register(client)
    profile_id = resp.json()["profile_id"]

    body = client.get(f"/profiles/{profile_id}").json()

    assert "password_hash" not in body and "password" not in body and "photo" not in body
    assert body["is_admin"] is False
    stored = seed.db.fetch_one("SELECT password_hash FROM profile WHERE profile_id = :p", {"p": profile_id})
    assert stored["password_hash"] != "pw-123"
    assert check_password_hash(stored["password_hash"], "pw-123")


def test_register_rejects_missing_fields(client):
    resp = client.post("/profiles", data={"biography": "no name"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert any("name" in e for e in body["errors"])
    assert any("email" in e for e in body["errors"])
    assert any("password" in e for e in body["errors"])


def test_register_rejects_duplicate_email(client, seed):
    seed.profile(email="taken@example.com")

    resp = _register(client, email="taken@example.com")

    assert resp.status_code == 400
    assert "email is already registered" in resp.json()["errors"]


def test_profile_without_photo_answers_image_not_found(client, seed):
    profile_id = seed.profile()

    resp = client.get(f"/profiles/{profile_id}/photo")

    assert resp.status_code == 404
    assert resp.json()["code"] == "IMAGE_NOT_FOUND"


def test_unknown_profile_answers_not_found(client):
    resp = client.get("/profiles/4242")

    assert resp.status_code == 404
    assert resp.json()["code"] == "PROFILE_NOT_FOUND"


def test_search_by_name_and_email(client, seed):
    seed.profile(name="Marta Souza", email="marta@example.com")
    seed.profile(name="Pedro", email="pedro@films.org")

    by_name = client.get("/profiles", params={"name": "Marta"}).json()
    by_email = client.get("/profiles/search-email", params={"email": "films.org"}).json()

    assert [p["name"] for p in by_name] == ["Marta Souza"]
    assert [p["email"] for p in by_email] == ["pedro@films.org"]
    assert len(client.get("/profiles").json()) == 2


def test_patch_me_updates_only_sent_fields(client, seed):
    me = seed.profile(name="Before", email="before@example.com")

    resp = client.patch("/profiles/me", data={"biography": "Now with a bio"}, headers=seed.headers(me))

    assert resp.status_code == 200
    body = client.get(f"/profiles/{me}").json()
    assert body["biography"] == "Now with a bio"
    assert body["name"] == "Before"


def test_patch_me_without_data_is_rejected(client, seed):
    me = seed.profile()

    resp = client.patch("/profiles/me", data={}, headers=seed.headers(me))

    assert resp.status_code == 400
    assert resp.json()["code"] == "NO_UPDATE_DATA"


def test_patch_with_empty_biography_clears_it(client, seed):
    me = seed.profile(name="Keeps Name")
    headers = seed.headers(me)
    client.patch("/profiles/me", data={"biography": "Temporary"}, headers=headers)

    resp = client.patch("/profiles/me", data={"biography": ""}, headers=headers)

    assert resp.status_code == 200
    body = client.get(f"/profiles/{me}").json()
    assert body["biography"] is None
    assert body["name"] == "Keeps Name"


def test_admin_clears_biography_by_id(client, seed):
    admin = seed.profile(is_admin=True)
    target = seed.profile()
    client.patch("/profiles/me", data={"biography": "Old bio"}, headers=seed.headers(target))

    resp = client.patch(f"/profiles/{target}", data={"biography": ""}, headers=seed.headers(admin, is_admin=True))

    assert resp.status_code == 200
    assert client.get(f"/profiles/{target}").json()["biography"] is None


def test_patch_cannot_grant_admin(client, seed):
    me = seed.profile()

    client.patch("/profiles/me", data={"name": "Sneaky", "is_admin": "1"}, headers=seed.headers(me))

    assert client.get(f"/profiles/{me}").json()["is_admin"] is False


def test_put_replaces_profile_for_owner(client, seed):
    me = seed.profile()

    resp = client.put(
        f"/profiles/{me}",
        data={"name": "Replaced", "email": "replaced@example.com", "password": "new-pw"},
        headers=seed.headers(me),
    )

    assert resp.status_code == 200
    body = client.get(f"/profiles/{me}").json()
    assert body["name"] == "Replaced"
    assert body["email"] == "replaced@example.com"
    assert body["biography"] is None


def test_admin_promotes_profile(client, seed):
    admin = seed.profile(is_admin=True)
    user = seed.profile()

    resp = client.patch("/profiles/admin", json={"profile_id": user}, headers=seed.headers(admin, is_admin=True))

    assert resp.status_code == 200
    assert client.get(f"/profiles/{user}").json()["is_admin"] is True


def test_promote_unknown_profile(client, seed):
    admin = seed.profile(is_admin=True)

    resp = client.patch("/profiles/admin", json={"profile_id": 999}, headers=seed.headers(admin, is_admin=True))

    assert resp.status_code == 404
