import json

import httpx
import pytest

from apps.client import RetroApiClient, RetroApiError


def cliente(handler):
    return RetroApiClient("http://retro.test", transport=httpx.MockTransport(handler))


def test_requests_are_prefixed_with_api():
    vistos = []

    def handler(request):
        vistos.append((request.method, request.url.path, request.url.params.get("user_id")))
        return httpx.Response(200, json=[])

    with cliente(handler) as api:
        api.list_cards("r1", user_id="alice")
        api.list_actions("r1")

    assert vistos == [
        ("GET", "/api/retro/r1/cards", "alice"),
        ("GET", "/api/retro/r1/actions", None),
    ]


def test_create_card_sends_type_key():
    corpos = []

    def handler(request):
        corpos.append(json.loads(request.content))
        return httpx.Response(201, json={"id": "c1", "type": "hot"})

    with cliente(handler) as api:
        card = api.create_card("r1", "hot", "Deploy went smoothly", "alice")

    assert card["id"] == "c1"
    assert corpos == [{"type": "hot", "content": "Deploy went smoothly", "author": "alice"}]


def test_error_body_becomes_api_error():
    def handler(request):
        return httpx.Response(404, json={"success": False, "error": "Card não encontrado"})

    with cliente(handler) as api:
        with pytest.raises(RetroApiError) as excinfo:
            api.edit_card("nope", "x")

    assert excinfo.value.status_code == 404
    assert excinfo.value.detail == "Card não encontrado"


def test_non_json_error_uses_text():
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    with cliente(handler) as api:
        with pytest.raises(RetroApiError) as excinfo:
            api.health()

    assert excinfo.value.status_code == 502
    assert excinfo.value.detail == "Bad Gateway"


def test_toggle_vote_payload():
    corpos = []

    def handler(request):
        corpos.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"success": True, "hasVoted": True, "votes": 1})

    with cliente(handler) as api:
        assert api.toggle_vote("c1", "alice")["votes"] == 1

    assert corpos == [("/api/cards/c1/vote", {"user_id": "alice"})]
