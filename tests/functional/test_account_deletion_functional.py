"""Cascading profile deletion.

Covers the cascade at the logic boundary (`delete_profile_cascade`) and over
HTTP (`DELETE /profiles/me`, `DELETE /profiles/admin/{id}`): full removal of
dependents, rollback on an injected failure, idempotence and authorization.
"""

from __future__ import annotations

from typing import Dict, List

import pytest

from cinerate.logic import account_deletion
from cinerate.logic.account_deletion import CASCADE_STEPS, CascadeStep, delete_profile_cascade
from cinerate.logic.errors import ApiError, StorageError

TABLES = (
    "profile",
    "film_suggestion",
    "actor_suggestion",
    "film_suggestion_evaluation",
    "actor_suggestion_evaluation",
    "film_evaluation",
    "actor_evaluation",
    "comment",
    "comment_evaluation",
    "favorite_film",
    "favorite_actor",
)


def _snapshot(db) -> Dict[str, List[tuple]]:
    snap = {}
    for table in TABLES:
        rows = db.fetch_all(f"SELECT * FROM {table}")
        snap[table] = sorted(tuple(sorted(r.items())) for r in rows)
    return snap


def _populate(seed, owner: int, other: int) -> None:
    """Give `owner` at least one row in every dependent table, with cross references from `other`."""
    film = seed.film()
    actor = seed.actor()
    own_comment = seed.comment(owner, film)
    other_comment = seed.comment(other, film)
    seed.comment_evaluation(other, own_comment)
    seed.comment_evaluation(owner, other_comment, positive=False)
    fs = seed.film_suggestion(owner)
    as_ = seed.actor_suggestion(owner)
    seed.suggestion_evaluation("film_suggestion_evaluation", other, fs)
    seed.suggestion_evaluation("actor_suggestion_evaluation", owner, seed.actor_suggestion(other))
    seed.suggestion_evaluation("actor_suggestion_evaluation", other, as_, positive=False)
    seed.film_evaluation(owner, film)
    seed.actor_evaluation(owner, actor)
    seed.favorite_film(owner, film)
    seed.favorite_actor(owner, actor)
    # Rows of `other` that must survive
    seed.favorite_film(other, film)
    seed.film_evaluation(other, film, positive=False)


def test_cascade_steps_delete_children_before_parents():
    names = [step.name for step in CASCADE_STEPS]
    assert names[-1] == "profile"
    assert names.index("comment_evaluation") < names.index("comment")
    assert names.index("film_suggestion_evaluation") < names.index("film_suggestion")
    assert names.index("actor_suggestion_evaluation") < names.index("actor_suggestion")
    assert len(names) == 11


def test_cascade_removes_every_dependent_row(database, seed):
    owner = seed.profile()
    other = seed.profile()
    _populate(seed, owner, other)

    result = delete_profile_cascade(database, owner)

    assert result.deleted is True
    assert result.profile_deleted == 1
    assert result.dependents_deleted > 0
    assert seed.count("profile", "profile_id = :p", p=owner) == 0
    for table in TABLES[1:]:
        assert seed.count(table, "profile_id = :p", p=owner) == 0, table
    # Evaluations by others on the owner's content are gone too
    assert seed.count("comment_evaluation", "comment_profile_id = :p", p=owner) == 0
    assert seed.count("film_suggestion_evaluation") == 0
    assert seed.count("actor_suggestion_evaluation", "profile_id = :p", p=other) == 0
    # The other profile keeps its own rows
    assert seed.count("profile", "profile_id = :p", p=other) == 1
    assert seed.count("comment", "profile_id = :p", p=other) == 1
    assert seed.count("favorite_film", "profile_id = :p", p=other) == 1
    assert seed.count("film_evaluation", "profile_id = :p", p=other) == 1


def test_cascade_scenario_profile_seven(database, seed):
    seed.profile()
    seven = seed.profile(profile_id=7, email="seven@example.com")
    other = seed.profile(email="other@example.com")
    film_a, film_b = seed.film(), seed.film()
    actor = seed.actor()
    c1 = seed.comment(seven, film_a)
    c2 = seed.comment(seven, film_b)
    seed.comment_evaluation(other, c1)
    seed.comment_evaluation(other, c2, positive=False)
    seed.favorite_film(seven, film_a)
    seed.favorite_film(seven, film_b)
    seed.favorite_actor(seven, actor)
    seed.film_suggestion(seven)

    result = delete_profile_cascade(database, 7)

    assert result.deleted is True
    assert result.rows_deleted["comment"] == 2
    assert result.rows_deleted["favorite_film"] == 2
    assert result.rows_deleted["favorite_actor"] == 1
    assert result.rows_deleted["film_suggestion"] == 1
    assert result.rows_deleted["comment_evaluation"] == 2
    assert seed.count("comment", "profile_id = 7") == 0
    assert seed.count("favorite_film", "profile_id = 7") == 0
    assert seed.count("favorite_actor", "profile_id = 7") == 0
    assert seed.count("film_suggestion", "profile_id = 7") == 0
    assert seed.count("comment_evaluation", "comment_id IN (:a, :b)", a=c1, b=c2) == 0
    assert seed.count("profile", "profile_id = 7") == 0


def test_cascade_twice_is_a_no_op(database, seed):
    owner = seed.profile()
    other = seed.profile()
    _populate(seed, owner, other)

    first = delete_profile_cascade(database, owner)
    before = _snapshot(database)
    second = delete_profile_cascade(database, owner)

    assert first.deleted is True
    assert second.deleted is False
    assert second.profile_deleted == 0
    assert all(n == 0 for n in second.rows_deleted.values())
    assert _snapshot(database) == before


@pytest.mark.parametrize("fail_at", [0, 4, 9, 10])
def test_injected_failure_rolls_back_everything(database, seed, monkeypatch, fail_at):
    owner = seed.profile()
    other = seed.profile()
    _populate(seed, owner, other)
    before = _snapshot(database)

    steps = list(CASCADE_STEPS)
    steps.insert(fail_at, CascadeStep("boom", "DELETE FROM table_that_does_not_exist WHERE profile_id = :profile_id"))
    monkeypatch.setattr(account_deletion, "CASCADE_STEPS", tuple(steps))

    with pytest.raises(StorageError):
        delete_profile_cascade(database, owner)

    assert _snapshot(database) == before


def test_missing_step_surfaces_constraint_error_and_rolls_back(database, seed, monkeypatch):
    owner = seed.profile()
    other = seed.profile()
    _populate(seed, owner, other)
    before = _snapshot(database)

    monkeypatch.setattr(
        account_deletion,
        "CASCADE_STEPS",
        tuple(s for s in CASCADE_STEPS if s.name != "comment_evaluation"),
    )

    with pytest.raises(ApiError):
        delete_profile_cascade(database, owner)

    assert _snapshot(database) == before


def test_delete_own_profile_over_http(client, seed):
    owner = seed.profile()
    other = seed.profile()
    _populate(seed, owner, other)

    resp = client.delete("/profiles/me", headers=seed.headers(owner))

    assert resp.status_code == 200
    assert resp.json()["message"] == "Profile deleted."
    assert resp.json()["rows_deleted"]["profile"] == 1
    assert seed.count("profile", "profile_id = :p", p=owner) == 0


def test_delete_own_profile_twice_answers_not_found(client, seed):
    owner = seed.profile()
    headers = seed.headers(owner)

    assert client.delete("/profiles/me", headers=headers).status_code == 200
    resp = client.delete("/profiles/me", headers=headers)

    assert resp.status_code == 404
    assert resp.json()["code"] == "PROFILE_NOT_FOUND"


def test_admin_deletes_another_profile(client, seed):
    admin = seed.profile(is_admin=True)
    victim = seed.profile()
    _populate(seed, victim, admin)

    resp = client.delete(f"/profiles/admin/{victim}", headers=seed.headers(admin, is_admin=True))

    assert resp.status_code == 200
    assert seed.count("profile", "profile_id = :p", p=victim) == 0


def test_non_admin_cannot_use_admin_delete(client, seed):
    user = seed.profile()
    victim = seed.profile()

    resp = client.delete(f"/profiles/admin/{victim}", headers=seed.headers(user))

    assert resp.status_code == 403
    assert resp.json()["code"] == "ADMIN_REQUIRED"
    assert seed.count("profile", "profile_id = :p", p=victim) == 1


def test_delete_requires_authentication(client, seed):
    seed.profile()

    resp = client.delete("/profiles/me")

    assert resp.status_code == 401
    assert resp.json()["code"] == "TOKEN_MISSING"
    assert resp.headers["content-type"].startswith("application/problem+json")


def test_storage_failure_maps_to_delete_profile_error(client, seed, monkeypatch):
    owner = seed.profile()
    monkeypatch.setattr(
        account_deletion,
        "CASCADE_STEPS",
        (CascadeStep("boom", "DELETE FROM table_that_does_not_exist WHERE profile_id = :profile_id"),),
    )

    resp = client.delete("/profiles/me", headers=seed.headers(owner))

    assert resp.status_code == 500
    assert resp.json()["code"] == "DELETE_PROFILE_ERROR"
    assert seed.count("profile", "profile_id = :p", p=owner) == 1
