import pytest
from channels.layers import channel_layers

from apps.core.models import ActionItem, Card, CardGroup, Comment, Retrospective, Vote


@pytest.fixture(autouse=True)
def fresh_channel_layer():
    # InMemoryChannelLayer guarda filas presas ao event loop; um por teste
    channel_layers.backends = {}
    yield
    channel_layers.backends = {}


@pytest.fixture
def make_retro(db):
    def _make(name="Sprint 1", team="Team A", created_by="alice", **extra):
        return Retrospective.objects.create(name=name, team=team, created_by=created_by, **extra)
    return _make


@pytest.fixture
def retro(make_retro):
    return make_retro()


@pytest.fixture
def make_card(db):
    def _make(retro, category="hot", content="Deploy went smoothly", author="alice", **extra):
        return Card.objects.create(retro=retro, category=category, content=content, author=author, **extra)
    return _make


@pytest.fixture
def make_comment(db):
    def _make(card, content="Concordo", author="bob"):
        return Comment.objects.create(card=card, content=content, author=author)
    return _make


@pytest.fixture
def make_vote(db):
    def _make(card, user_id="alice"):
        return Vote.objects.create(card=card, user_id=user_id)
    return _make


@pytest.fixture
def make_group(db):
    def _make(retro, title="Hot Group"):
        return CardGroup.objects.create(retro=retro, title=title)
    return _make


@pytest.fixture
def make_action(db):
    def _make(retro, text="Automatizar deploy", **extra):
        return ActionItem.objects.create(retro=retro, text=text, **extra)
    return _make


def post_json(client, url, payload=None, **extra):
    return client.post(url, payload or {}, content_type="application/json", **extra)


def put_json(client, url, payload=None, **extra):
    return client.put(url, payload or {}, content_type="application/json", **extra)
