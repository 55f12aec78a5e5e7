"""History & Snapshot routes: undo/redo over HTTP and whole-book export/load."""

import pytest


async def test_undo_on_fresh_session_is_409(client):
    res = await client.post("/api/v1/history/undo")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "NOTHING_TO_UNDO"


async def test_undo_and_redo_cascade_delete(seeded):
    await seeded.delete("/api/v1/people/1")
    res = await seeded.post("/api/v1/history/undo")
    assert res.json() == {"command": "delete_person", "can_undo": True, "can_redo": True}
    assert len((await seeded.get("/api/v1/visits")).json()) == 3
    assert (await seeded.get("/api/v1/people/1")).status_code == 200

    res = await seeded.post("/api/v1/history/redo")
    assert res.json()["command"] == "delete_person"
    assert not res.json()["can_redo"]
    assert len((await seeded.get("/api/v1/visits")).json()) == 1


async def test_redo_without_undo_is_409(seeded):
    res = await seeded.post("/api/v1/history/redo")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "NOTHING_TO_REDO"


async def test_snapshot_export_then_load(seeded):
    exported = (await seeded.get("/api/v1/snapshot")).json()
    assert len(exported["visits"]) == 3
    assert exported["visits"][0]["dateOfVisit"] == "2020-09-01"

    await seeded.delete("/api/v1/people/1")
    res = await seeded.put("/api/v1/snapshot", json=exported)
    assert res.json() == {"persons": 2, "locations": 2, "visits": 3}
    assert (await seeded.post("/api/v1/history/undo")).status_code == 409


async def test_snapshot_with_missing_field_is_rejected(seeded):
    exported = (await seeded.get("/api/v1/snapshot")).json()
    del exported["visits"][0]["phone"]
    res = await seeded.put("/api/v1/snapshot", json=exported)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MISSING_FIELD"
    assert len((await seeded.get("/api/v1/visits")).json()) == 3


@pytest.mark.parametrize("body", [
    {"persons": None},
    {"persons": ["x"]},
])
async def test_malformed_snapshot_is_a_client_error(seeded, body):
    res = await seeded.put("/api/v1/snapshot", json=body)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_FORMAT"
    assert len((await seeded.get("/api/v1/people")).json()) == 2
