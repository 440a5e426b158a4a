"""Favorite films and favorite actors."""

from __future__ import annotations


def test_add_and_list_own_favorites(client, seed):
    me = seed.profile()
    film = seed.film(name="Favorite One")
    headers = seed.headers(me)

    resp = client.post("/favorite-films", json={"target_id": film}, headers=headers)

    assert resp.status_code == 201
    rows = client.get("/favorite-films/profile/me", headers=headers).json()
    assert rows == [{"profile_id": me, "target_id": film, "target_name": "Favorite One"}]


def test_duplicate_favorite_conflicts(client, seed):
    me = seed.profile()
    actor = seed.actor()
    headers = seed.headers(me)
    client.post("/favorite-actors", json={"target_id": actor}, headers=headers)

    resp = client.post("/favorite-actors", json={"target_id": actor}, headers=headers)

    assert resp.status_code == 409
    assert resp.json()["code"] == "RELATION_ALREADY_EXISTS"
    assert seed.count("favorite_actor") == 1


def test_favorite_of_unknown_target(client, seed):
    me = seed.profile()

    resp = client.post("/favorite-films", json={"target_id": 31337}, headers=seed.headers(me))

    assert resp.status_code == 404
    assert resp.json()["code"] == "FILM_NOT_FOUND"


def test_admin_adds_favorite_for_profile(client, seed):
    admin = seed.profile(is_admin=True)
    user = seed.profile()
    actor = seed.actor()

    resp = client.post(
        "/favorite-actors/admin",
        json={"target_id": actor, "profile_id": user},
        headers=seed.headers(admin, is_admin=True),
    )

    assert resp.status_code == 201
    assert client.get(f"/favorite-actors/profile/{user}/target/{actor}").status_code == 200


def test_remove_own_favorite(client, seed):
    me = seed.profile()
    film = seed.film()
    seed.favorite_film(me, film)

    first = client.delete(f"/favorite-films/{film}", headers=seed.headers(me))
    second = client.delete(f"/favorite-films/{film}", headers=seed.headers(me))

    assert first.status_code == 200
    assert second.status_code == 404


def test_clear_own_favorites(client, seed):
    me = seed.profile()
    seed.favorite_film(me, seed.film())
    seed.favorite_film(me, seed.film())
    headers = seed.headers(me)

    cleared = client.delete("/favorite-films/profile/me", headers=headers)
    again = client.delete("/favorite-films/profile/me", headers=headers)

    assert cleared.status_code == 200
    assert cleared.json()["deleted"] == 2
    assert again.status_code == 404
    assert again.json()["code"] == "FAVORITES_NOT_FOUND"


def test_admin_removes_target_from_every_list(client, seed):
    admin = seed.profile(is_admin=True)
    film = seed.film()
    seed.favorite_film(seed.profile(), film)
    seed.favorite_film(seed.profile(), film)

    user_attempt = client.delete(f"/favorite-films/target/{film}", headers=seed.headers(seed.profile()))
    resp = client.delete(f"/favorite-films/target/{film}", headers=seed.headers(admin, is_admin=True))

    assert user_attempt.status_code == 403
    assert resp.status_code == 200
    assert client.get(f"/favorite-films/target/{film}").json() == []
