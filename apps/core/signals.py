# apps/core/signals.py

import logging

from django.db.models.signals import post_delete, pre_save
from django.dispatch import receiver

from .models import ActionItem, Card, CardGroup, Comment, Retrospective, Vote

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=ActionItem)
def capturar_snapshot_card(sender, instance, **kwargs):
    """
    Completa o snapshot de ações criadas direto pelo ORM ou pelo admin

    Só age na criação: depois disso o snapshot nunca acompanha o card.
    """
    if not instance._state.adding or not instance.linked_card_id or instance.tem_snapshot:
        return

    card = Card.objects.filter(id=instance.linked_card_id).first()
    if card:
        instance.capturar_card(card)
    else:
        logger.warning(f"⚠️  Ação vinculada a card inexistente: {instance.linked_card_id}")


# Sem cascade: apenas registra o que ficou órfão

@receiver(post_delete, sender=Retrospective)
def avisar_orfaos_retro(sender, instance, **kwargs):
    cards = Card.objects.filter(retro_id=instance.id).count()
    acoes = ActionItem.objects.filter(retro_id=instance.id).count()
    grupos = CardGroup.objects.filter(retro_id=instance.id).count()

    if cards or acoes or grupos:
        logger.warning(
            f"🗑️  Retrospectiva {instance.id} excluída deixando órfãos: "
            f"{cards} cards, {acoes} ações, {grupos} grupos"
        )


@receiver(post_delete, sender=Card)
def avisar_orfaos_card(sender, instance, **kwargs):
    votos = Vote.objects.filter(card_id=instance.id).count()
    comentarios = Comment.objects.filter(card_id=instance.id).count()

    if votos or comentarios:
        logger.warning(
            f"🗑️  Card {instance.id} excluído deixando órfãos: "
            f"{votos} votos, {comentarios} comentários"
        )
