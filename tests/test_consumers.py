import pytest
from asgiref.sync import sync_to_async
from channels.db import database_sync_to_async
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator

from apps.board import broadcast
from apps.board.broadcast import publicar_evento
from apps.board.routing import websocket_urlpatterns
from apps.core.models import Retrospective

pytestmark = [pytest.mark.asyncio, pytest.mark.django_db(transaction=True)]

application = URLRouter(websocket_urlpatterns)


@database_sync_to_async
def criar_retro(name="Sprint 1"):
    return Retrospective.objects.create(name=name, team="Team A", created_by="alice")


async def conectar(path):
    communicator = WebsocketCommunicator(application, path)
    connected, _ = await communicator.connect()
    return communicator, connected


async def test_connect_joins_url_room():
    retro = await criar_retro()
    communicator, connected = await conectar(f"/ws/retro/{retro.id}/")
    assert connected

    boas_vindas = await communicator.receive_json_from()
    assert boas_vindas["type"] == "connected"
    assert boas_vindas["rooms"] == [retro.id]
    assert boas_vindas["heartbeat"] == 30

    await communicator.disconnect()


async def test_connect_to_missing_retro_is_rejected():
    communicator, connected = await conectar("/ws/retro/nao-existe/")
    assert not connected


async def test_event_is_forwarded_to_room():
    retro = await criar_retro()
    communicator, _ = await conectar(f"/ws/retro/{retro.id}/")
    await communicator.receive_json_from()

    await sync_to_async(publicar_evento)(retro.id, broadcast.VOTE_CHANGED, {"cardId": "c1"})

    frame = await communicator.receive_json_from()
    assert frame == {"type": "vote_changed", "payload": {"cardId": "c1"}}

    await communicator.disconnect()


async def test_events_of_other_rooms_are_not_delivered():
    retro = await criar_retro()
    outra = await criar_retro(name="Outra")
    communicator, _ = await conectar(f"/ws/retro/{retro.id}/")
    await communicator.receive_json_from()

    await sync_to_async(publicar_evento)(outra.id, broadcast.CARD_ADDED, {"id": "x"})

    assert await communicator.receive_nothing()
    await communicator.disconnect()


async def test_join_and_leave_retro():
    retro = await criar_retro()
    communicator, connected = await conectar("/ws/retro/")
    assert connected
    assert (await communicator.receive_json_from())["rooms"] == []

    await communicator.send_json_to({"type": "join_retro", "retro_id": retro.id})
    assert await communicator.receive_json_from() == {"type": "joined", "retro_id": retro.id}

    await sync_to_async(publicar_evento)(retro.id, broadcast.ACTION_ADDED, {"id": "a1"})
    assert (await communicator.receive_json_from())["type"] == "action_added"

    await communicator.send_json_to({"type": "leave_retro", "retro_id": retro.id})
    assert await communicator.receive_json_from() == {"type": "left", "retro_id": retro.id}

    await sync_to_async(publicar_evento)(retro.id, broadcast.ACTION_DELETED, {"id": "a1"})
    assert await communicator.receive_nothing()

    await communicator.disconnect()


async def test_join_missing_retro():
    communicator, _ = await conectar("/ws/retro/")
    await communicator.receive_json_from()

    await communicator.send_json_to({"type": "join_retro", "retro_id": "nope"})
    frame = await communicator.receive_json_from()
    assert frame["type"] == "error"

    await communicator.disconnect()


async def test_ping_pong():
    communicator, _ = await conectar("/ws/retro/")
    await communicator.receive_json_from()

    await communicator.send_json_to({"type": "ping"})
    frame = await communicator.receive_json_from()
    assert frame["type"] == "pong"
    assert frame["timestamp"]

    await communicator.disconnect()


async def test_invalid_frames():
    communicator, _ = await conectar("/ws/retro/")
    await communicator.receive_json_from()

    await communicator.send_to(text_data="{quebrado")
    assert (await communicator.receive_json_from())["type"] == "error"

    await communicator.send_json_to({"type": "dance"})
    frame = await communicator.receive_json_from()
    assert frame == {"type": "error", "error": "Tipo de mensagem desconhecido: dance"}

    await communicator.disconnect()


async def test_room_frames_with_non_text_retro_id():
    communicator, _ = await conectar("/ws/retro/")
    await communicator.receive_json_from()

    await communicator.send_json_to({"type": "leave_retro", "retro_id": {"id": "x"}})
    assert await communicator.receive_json_from() == {"type": "error", "error": "retro_id inválido"}

    await communicator.send_json_to({"type": "join_retro", "retro_id": ["x"]})
    assert (await communicator.receive_json_from())["type"] == "error"

    # Conexão continua viva
    await communicator.send_json_to({"type": "ping"})
    assert (await communicator.receive_json_from())["type"] == "pong"

    await communicator.disconnect()
