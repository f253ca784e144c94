from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from fitness_api import models
from fitness_api.repositories import UserRepository, WeightRepository

from .conftest import run_before_next_insert


def post_weight(client, user_id, weight, day):
    return client.post("/api/weight", json={"userId": user_id, "weight": weight, "date": day})


def test_second_entry_for_same_date_overwrites(client, db_session, user):
    first = post_weight(client, user.id, 80.0, "2024-03-01")
    second = post_weight(client, user.id, 79.4, "2024-03-01")
    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json()["entry"]["id"] == first.json()["entry"]["id"]

    rows = db_session.query(models.WeightEntry).filter(models.WeightEntry.user_id == user.id).all()
    assert len(rows) == 1
    assert rows[0].weight == 79.4


def test_entries_are_oldest_first(client, user):
    post_weight(client, user.id, 81.0, "2024-03-03")
    post_weight(client, user.id, 82.0, "2024-03-01")
    entries = client.get(f"/api/weight/{user.id}").json()["entries"]
    assert [(e["date"], e["weight"]) for e in entries] == [("2024-03-01", 82.0), ("2024-03-03", 81.0)]
    assert entries[0]["userId"] == user.id


def test_date_range_filter(client, user):
    for day in ("2024-02-28", "2024-03-01", "2024-03-10"):
        post_weight(client, user.id, 80.0, day)
    r = client.get(f"/api/weight/{user.id}", params={"startDate": "2024-03-01", "endDate": "2024-03-09"})
    assert [e["date"] for e in r.json()["entries"]] == ["2024-03-01"]


def test_missing_fields_are_rejected(client, user):
    r = client.post("/api/weight", json={"userId": user.id, "date": "2024-03-01"})
    assert r.status_code == 400
    assert r.json() == {"error": "userId, weight and date are required."}


def test_malformed_date_is_rejected(client, user):
    r = post_weight(client, user.id, 80.0, "yesterday")
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request."


def test_unknown_user_gets_generic_error(client, user):
    r = post_weight(client, user.id + 99, 80.0, "2024-03-01")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to save weight entry"}


def test_delete_entry(client, user):
    entry_id = post_weight(client, user.id, 80.0, "2024-03-01").json()["entry"]["id"]
    assert client.delete(f"/api/weight/entries/{entry_id}").status_code == 200
    assert client.get(f"/api/weight/{user.id}").json()["entries"] == []
    assert client.delete(f"/api/weight/entries/{entry_id}").status_code == 404


def test_simultaneous_first_writes_for_same_date_overwrite(two_sessions):
    first, second = two_sessions
    user_id = UserRepository(first).create("Sam", "sam@example.com", "not-a-real-hash").id

    fired = run_before_next_insert(
        first, lambda: WeightRepository(second).upsert(user_id, 80.0, date(2024, 3, 1))
    )
    entry = WeightRepository(first).upsert(user_id, 79.0, date(2024, 3, 1))

    assert fired == [True]
    assert entry.weight == 79.0
    rows = first.query(models.WeightEntry).all()
    assert [(r.date, r.weight) for r in rows] == [(date(2024, 3, 1), 79.0)]


def test_failed_delete_rolls_back(db_session, user, monkeypatch):
    repo = WeightRepository(db_session)
    entry_id = repo.upsert(user.id, 80.0, date(2024, 3, 1)).id

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "commit", failing_commit)
    with pytest.raises(OperationalError):
        repo.delete(entry_id)
    monkeypatch.undo()

    assert [e.id for e in repo.find_by_user(user.id)] == [entry_id]
