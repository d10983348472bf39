import pytest

from apps.core.models import Card, Retrospective

from .conftest import post_json

pytestmark = pytest.mark.django_db


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["database"] == "ok"
    assert data["version"]


def test_health_only_get(client):
    resp = client.post("/api/health")
    assert resp.status_code == 405


def test_create_retro(client):
    resp = post_json(client, "/api/retro", {"name": "Sprint 1", "team": "Team A", "created_by": "alice"})
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Sprint 1"
    assert data["team"] == "Team A"
    assert data["created_by"] == "alice"
    assert data["is_anonymous"] is True
    assert Retrospective.objects.filter(id=data["id"]).exists()


def test_create_retro_with_client_id(client):
    payload = {"id": "retro-abc", "name": "Sprint 2", "team": "Team B", "created_by": "bob", "is_anonymous": False}
    resp = post_json(client, "/api/retro", payload)
    assert resp.status_code == 201
    assert resp.json()["id"] == "retro-abc"
    assert resp.json()["is_anonymous"] is False

    again = post_json(client, "/api/retro", payload)
    assert again.status_code == 400
    assert again.json()["success"] is False


@pytest.mark.parametrize("missing", ["name", "team", "created_by"])
def test_create_retro_missing_field(client, missing):
    payload = {"name": "Sprint 1", "team": "Team A", "created_by": "alice"}
    payload[missing] = ""
    resp = post_json(client, "/api/retro", payload)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": f"Campo obrigatório ausente: {missing}"}


def test_create_retro_invalid_json(client):
    resp = client.post("/api/retro", "{not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.json()["error"] == "JSON inválido"


def test_get_retro(client, retro):
    resp = client.get(f"/api/retro/{retro.id}")
    assert resp.status_code == 200
    assert resp.json()["id"] == retro.id
    assert resp.json()["name"] == "Sprint 1"


def test_get_missing_retro(client):
    resp = client.get("/api/retro/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Retrospectiva não encontrada"}


def test_delete_retro_does_not_cascade(client, retro, make_card):
    card = make_card(retro)

    resp = client.delete(f"/api/retro/{retro.id}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    assert not Retrospective.objects.filter(id=retro.id).exists()
    assert Card.objects.filter(id=card.id).exists()


def test_api_responses_are_not_cached(client, retro):
    resp = client.get(f"/api/retro/{retro.id}")
    assert resp["Cache-Control"] == "no-store"


def test_create_retro_with_non_text_name(client):
    resp = post_json(client, "/api/retro", {"name": ["x"], "team": "Team A", "created_by": "alice"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Campo name deve ser texto"}
    assert Retrospective.objects.count() == 0
