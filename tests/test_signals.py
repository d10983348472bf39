import pytest

from apps.core.models import ActionItem

pytestmark = pytest.mark.django_db


def test_orm_created_action_gets_snapshot(retro, make_card):
    card = make_card(retro, content="Reunião longa", category="disappointment")

    acao = ActionItem.objects.create(retro=retro, text="Timebox", linked_card_id=card.id)

    assert acao.linked_card_content == "Reunião longa"
    assert acao.linked_card_type == "disappointment"


def test_snapshot_not_refreshed_on_update(retro, make_card):
    card = make_card(retro, content="Antes")
    acao = ActionItem.objects.create(retro=retro, text="Timebox", linked_card_id=card.id)

    card.content = "Depois"
    card.save()
    acao.text = "Timebox de 15 min"
    acao.save()

    acao.refresh_from_db()
    assert acao.linked_card_content == "Antes"


def test_action_linked_to_missing_card_logs_warning(retro, caplog):
    acao = ActionItem.objects.create(retro=retro, text="x", linked_card_id="fantasma")

    assert acao.linked_card_content is None
    assert "card inexistente" in caplog.text


def test_deleting_retro_logs_orphans(retro, make_card, caplog):
    make_card(retro)
    retro.delete()

    assert "deixando órfãos" in caplog.text
