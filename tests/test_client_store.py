import json

import httpx
import pytest

from apps.client import AUTOR_ANONIMO, MutationResult, RetroApiClient, RetroStore, SessionContext


class FakeServer:
    """Servidor mínimo em memória para o MockTransport"""

    def __init__(self, is_anonymous=False):
        self.retro = {"id": "r1", "name": "Sprint 1", "team": "Team A", "is_anonymous": is_anonymous}
        self.cards = [
            {"id": "c1", "type": "hot", "content": "Deploy", "author": "alice", "group_id": "g1",
             "votes": 0, "hasVoted": False},
        ]
        self.actions = []
        self.groups = [{"id": "g1", "title": "Hot Group"}]
        self.falhar = set()
        self.chamadas = []
        self.usuarios = []

    def __call__(self, request):
        path = request.url.path
        self.chamadas.append((request.method, path))
        self.usuarios.append(request.url.params.get("user_id"))
        corpo = json.loads(request.content) if request.content else {}

        if path in self.falhar:
            return httpx.Response(500, json={"success": False, "error": "Erro interno do sistema"})

        if path == "/api/retro/r1":
            return httpx.Response(200, json=self.retro)
        if path == "/api/retro/r1/cards" and request.method == "GET":
            return httpx.Response(200, json=self.cards)
        if path == "/api/retro/r1/cards":
            card = {"id": f"c{len(self.cards) + 1}", "group_id": None, **corpo}
            self.cards.append(card)
            return httpx.Response(201, json=card)
        if path == "/api/retro/r1/actions":
            return httpx.Response(200, json=self.actions)
        if path == "/api/retro/r1/groups":
            return httpx.Response(200, json=self.groups)
        if path.endswith("/category"):
            card_id = path.split("/")[3]
            card = next(c for c in self.cards if c["id"] == card_id)
            card.update({"type": corpo["type"], "group_id": None})
            return httpx.Response(200, json=card)
        return httpx.Response(404, json={"success": False, "error": "não encontrado"})


@pytest.fixture
def servidor():
    return FakeServer()


@pytest.fixture
def notificacoes():
    return []


@pytest.fixture
def store(servidor, notificacoes):
    api = RetroApiClient("http://retro.test", transport=httpx.MockTransport(servidor))
    store = RetroStore(api, SessionContext(username="alice", retro_id="r1"),
                       notificar=lambda nivel, msg: notificacoes.append((nivel, msg)))
    assert store.load()
    return store


def test_load_fills_state(store):
    assert store.retro["name"] == "Sprint 1"
    assert [c["id"] for c in store.cards] == ["c1"]
    assert store.groups[0]["title"] == "Hot Group"
    assert store.actions == []


def test_cards_are_fetched_as_session_user(store, servidor):
    servidor.chamadas.clear()
    servidor.usuarios.clear()
    store.refetch_cards()
    assert servidor.chamadas == [("GET", "/api/retro/r1/cards")]
    assert servidor.usuarios == ["alice"]


def test_events_trigger_refetch_of_affected_collection(store, servidor):
    servidor.cards.append({"id": "c9", "type": "fantasy", "content": "Novo", "hasVoted": True})
    servidor.actions.append({"id": "a1", "text": "Ação"})

    assert store.handle_event({"type": "vote_changed", "payload": {"cardId": "c1"}}) == "cards"
    assert store.handle_frame(json.dumps({"type": "action_added", "payload": {"id": "a1"}})) == "actions"

    assert [c["id"] for c in store.cards] == ["c1", "c9"]
    assert store.voted_card_ids == {"c9"}
    assert store.actions == [{"id": "a1", "text": "Ação"}]


def test_control_frames_do_not_refetch(store, servidor):
    servidor.chamadas.clear()
    assert store.handle_frame('{"type": "pong", "timestamp": "x"}') is None
    assert store.handle_frame("lixo") is None
    assert servidor.chamadas == []


def test_refetch_failure_keeps_previous_state(store, servidor, notificacoes):
    anteriores = list(store.cards)
    servidor.falhar.add("/api/retro/r1/cards")

    assert store.refetch_cards() is False
    assert store.cards == anteriores
    assert notificacoes[-1][0] == "error"


def test_retro_deleted_event(store):
    assert store.handle_event({"type": "retro_deleted", "payload": {"id": "r1"}}) == "retro"
    assert store.retro_excluida is True


def test_add_card_uses_username(store, servidor):
    resultado = store.add_card("hot", "Bom sprint")

    assert resultado.ok
    assert resultado.tag == "ok"
    assert servidor.cards[-1]["author"] == "alice"


def test_add_card_anonymous_retro():
    servidor = FakeServer(is_anonymous=True)
    api = RetroApiClient("http://retro.test", transport=httpx.MockTransport(servidor))
    store = RetroStore(api, SessionContext(username="alice", retro_id="r1"))
    store.load()

    store.add_card("fantasy", "Ideia")
    assert servidor.cards[-1]["author"] == AUTOR_ANONIMO


def test_mutation_failure_returns_result(store, servidor, notificacoes):
    resultado = store.delete_card("c1")

    assert isinstance(resultado, MutationResult)
    assert not resultado
    assert resultado.tag == "failure"
    assert resultado.status_code == 404
    assert notificacoes[-1][0] == "error"


def test_optimistic_category_change_success(store):
    resultado = store.change_card_category("c1", "fantasy")

    assert resultado.ok
    assert store.card("c1")["type"] == "fantasy"
    assert store.card("c1")["group_id"] is None


def test_optimistic_category_change_reverts_exactly(store, servidor):
    servidor.falhar.add("/api/cards/c1/category")
    antes = dict(store.card("c1"))

    resultado = store.change_card_category("c1", "disappointment")

    assert resultado.tag == "failure"
    assert resultado.error == "Erro interno do sistema"
    assert store.card("c1") == antes


def test_category_change_to_same_category_is_noop(store, servidor):
    servidor.chamadas.clear()
    resultado = store.change_card_category("c1", "hot")

    assert resultado.ok
    assert servidor.chamadas == []


def test_category_change_unknown_card(store):
    resultado = store.change_card_category("zzz", "hot")
    assert resultado.tag == "failure"
    assert resultado.status_code == 404
