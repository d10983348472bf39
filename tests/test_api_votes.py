import pytest

from apps.core.models import Vote

from .conftest import post_json

pytestmark = pytest.mark.django_db


def test_toggle_vote_twice_restores_count(client, retro, make_card, make_vote):
    card = make_card(retro)
    make_vote(card, "bob")

    primeiro = post_json(client, f"/api/cards/{card.id}/vote", {"user_id": "alice"}).json()
    assert primeiro["hasVoted"] is True
    assert primeiro["votes"] == 2

    segundo = post_json(client, f"/api/cards/{card.id}/vote", {"user_id": "alice"}).json()
    assert segundo["hasVoted"] is False
    assert segundo["votes"] == 1

    assert list(Vote.objects.filter(card_id=card.id).values_list("user_id", flat=True)) == ["bob"]


def test_vote_is_per_user(client, retro, make_card):
    card = make_card(retro)
    post_json(client, f"/api/cards/{card.id}/vote", {"user_id": "alice"})
    resp = post_json(client, f"/api/cards/{card.id}/vote", {"user_id": "bob"})

    assert resp.json()["votes"] == 2
    assert resp.json()["hasVoted"] is True


def test_vote_user_from_header(client, retro, make_card):
    card = make_card(retro)
    resp = post_json(client, f"/api/cards/{card.id}/vote", {}, HTTP_X_RETRO_USER="dave")

    assert resp.status_code == 200
    assert Vote.objects.get(card_id=card.id).user_id == "dave"


def test_vote_without_user(client, retro, make_card):
    card = make_card(retro)
    resp = post_json(client, f"/api/cards/{card.id}/vote", {})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Campo obrigatório ausente: user_id"


def test_vote_missing_card(client):
    resp = post_json(client, "/api/cards/nope/vote", {"user_id": "alice"})
    assert resp.status_code == 404


def test_vote_with_non_text_user_id(client, retro, make_card):
    card = make_card(retro)
    resp = post_json(client, f"/api/cards/{card.id}/vote", {"user_id": 5})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Campo user_id deve ser texto"}
    assert not Vote.objects.exists()
