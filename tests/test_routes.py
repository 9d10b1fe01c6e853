"""Tests for the /api endpoints."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, patch

from backend import storage
from backend.app import create_app
from encounter_builder.importer import ImportFetchError, ImportSummary
from encounter_builder.models import AdversaryTemplate, EnvironmentTemplate

TEST_DATA_DIR = Path("data-tests")


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(TEST_DATA_DIR))


@pytest.fixture
def library():
    storage.replace_imported_templates("adversaries", {
        "Ogre": AdversaryTemplate(name="Ogre", tier=2, type="Bruiser"),
        "Rat": AdversaryTemplate(name="Rat", tier=2, type="Minion", hp=1),
        "Dragon": AdversaryTemplate(name="Dragon", tier=2, type="Solo", description="Hoards gold."),
    })
    storage.replace_imported_templates("environments", {
        "Tavern": EnvironmentTemplate(name="Tavern", type="Social"),
    })


# ── Settings ─────────────────────────────────────────────


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_settings_roundtrip(client):
    resp = client.patch("/api/settings", json={"battle_calculation": {"base_addition": 5}})
    assert resp.status_code == 200
    assert client.get("/api/settings").json()["battle_calculation"]["base_addition"] == 5


def test_settings_invalid(client):
    resp = client.patch("/api/settings", json={"import": {"concurrency": 0}})
    assert resp.status_code == 422


# ── Adversaries ──────────────────────────────────────────


def test_list_adversaries_filtered(client, library):
    resp = client.get("/api/adversaries", params={"type": "Solo"})
    assert resp.status_code == 200
    assert [a["name"] for a in resp.json()] == ["Dragon"]

    resp = client.get("/api/adversaries", params={"search": "gold"})
    assert [a["name"] for a in resp.json()] == ["Dragon"]


def test_get_adversary(client, library):
    resp = client.get("/api/adversaries/Ogre")
    assert resp.status_code == 200
    assert resp.json()["type"] == "Bruiser"
    assert resp.json()["thresholds"] == [5, 10]


def test_get_adversary_missing(client):
    assert client.get("/api/adversaries/Nobody").status_code == 404


def test_create_custom_adversary(client, library):
    resp = client.post("/api/adversaries", json={"name": "Ogre", "type": "Bruiser", "hp": 12})
    assert resp.status_code == 201
    assert resp.json()["is_custom"] is True
    assert client.get("/api/adversaries/Ogre").json()["hp"] == 12


def test_create_duplicate_custom_conflicts(client):
    client.post("/api/adversaries", json={"name": "Homebrew"})
    assert client.post("/api/adversaries", json={"name": "Homebrew"}).status_code == 409


def test_create_invalid_adversary(client):
    assert client.post("/api/adversaries", json={"name": "Ghost", "hp": 0}).status_code == 422


def test_update_adversary_rename(client):
    client.post("/api/adversaries", json={"name": "Homebrew"})
    resp = client.put("/api/adversaries/Homebrew", json={"name": "Homebrew II", "hp": 4})
    assert resp.status_code == 200
    assert client.get("/api/adversaries/Homebrew").status_code == 404
    assert client.get("/api/adversaries/Homebrew II").json()["hp"] == 4


def test_update_adversary_rename_conflict(client):
    client.post("/api/adversaries", json={"name": "A"})
    client.post("/api/adversaries", json={"name": "B"})
    assert client.put("/api/adversaries/A", json={"name": "B"}).status_code == 409


def test_delete_adversary(client, library):
    assert client.delete("/api/adversaries/Rat").json() == {"ok": True}
    assert client.delete("/api/adversaries/Rat").status_code == 404


# ── Environments ─────────────────────────────────────────


def test_environment_crud(client, library):
    assert [e["name"] for e in client.get("/api/environments").json()] == ["Tavern"]
    resp = client.post("/api/environments", json={"name": "Cliffside", "type": "Traversal"})
    assert resp.status_code == 201
    resp = client.get("/api/environments", params={"custom": True})
    assert [e["name"] for e in resp.json()] == ["Cliffside"]
    assert client.delete("/api/environments/Cliffside").status_code == 200
    assert client.get("/api/environments/Cliffside").status_code == 404


# ── Scoring ──────────────────────────────────────────────


def test_score_encounter(client, library):
    body = {
        "selection": [{"name": "Ogre", "count": 2}, {"name": "Rat", "count": 5}],
        "party": {"player_count": 4, "player_tier": 2},
    }
    resp = client.post("/api/encounters/score", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_points"] == 8 + 2
    assert data["difficulty"] == "Easy"
    assert data["thresholds"] == {"easy": 13, "normal_max": 14, "hard_max": 16}
    assert data["breakdown"][0] == "Base: (3 x 4 players) + 2 = 14"


def test_score_uses_stored_config(client, library):
    client.patch("/api/settings", json={"battle_values": {"Bruiser": 10}})
    body = {"selection": [{"name": "Ogre", "count": 1}], "party": {"player_count": 4, "player_tier": 2}}
    data = client.post("/api/encounters/score", json=body).json()
    assert data["total_points"] == 10


def test_score_unknown_adversary(client, library):
    body = {"selection": [{"name": "Beholder", "count": 1}]}
    resp = client.post("/api/encounters/score", json=body)
    assert resp.status_code == 404
    assert "Beholder" in resp.json()["detail"]


def test_score_empty_selection(client):
    data = client.post("/api/encounters/score", json={}).json()
    assert data["total_points"] == 0
    assert data["difficulty"] == "Easy"


# ── Import ───────────────────────────────────────────────


def test_parse_preview(client):
    md = "# Ogre\n\n***Tier 2 Bruiser*** *Big.*\n"
    resp = client.post("/api/import/adversaries/parse", json={"markdown": md, "file_name": "ogre.md"})
    assert resp.status_code == 200
    assert resp.json()["type"] == "Bruiser"
    assert storage.get_template("adversaries", "Ogre") is None


def test_parse_preview_environment(client):
    md = "# Cliffside\n\n***Tier 1 Traversal*** *Wind.*\n"
    resp = client.post("/api/import/environments/parse", json={"markdown": md})
    assert resp.json()["type"] == "Traversal"


def test_parse_preview_unparseable(client):
    resp = client.post("/api/import/adversaries/parse", json={"markdown": "**HP:** 0", "file_name": "x.md"})
    assert resp.status_code == 422


def test_parse_preview_bad_kind(client):
    resp = client.post("/api/import/spells/parse", json={"markdown": "# X"})
    assert resp.status_code == 422


def test_import_replaces_library(client, library):
    summary = ImportSummary(
        kind="adversaries", attempted=2, processed=1,
        templates={"Bandit": AdversaryTemplate(name="Bandit")},
        failures={"broken.md": "HTTP 500"},
    )
    with patch("backend.routes.imports.import_templates", AsyncMock(return_value=summary)):
        resp = client.post("/api/import/adversaries")
    assert resp.status_code == 200
    data = resp.json()
    assert data["attempted"] == 2
    assert data["processed"] == 1
    assert data["stored"] == 1
    assert data["failures"] == {"broken.md": "HTTP 500"}
    assert [a["name"] for a in client.get("/api/adversaries").json()] == ["Bandit"]


def test_import_with_nothing_parsed_keeps_library(client, library):
    summary = ImportSummary(kind="adversaries", attempted=1, skipped=["junk.md"])
    with patch("backend.routes.imports.import_templates", AsyncMock(return_value=summary)):
        data = client.post("/api/import/adversaries").json()
    assert data["stored"] == 0
    assert len(client.get("/api/adversaries").json()) == 3


def test_import_listing_failure(client):
    failing = AsyncMock(side_effect=ImportFetchError("rate limited"))
    with patch("backend.routes.imports.import_templates", failing):
        resp = client.post("/api/import/adversaries")
    assert resp.status_code == 502
    assert "rate limited" in resp.json()["detail"]
