# apps/board/broadcast.py

"""
Broadcast de eventos da retrospectiva

Depois de cada mutação bem-sucedida a view publica um evento pequeno no
grupo do channel layer da retrospectiva. É fire-and-forget: sem ack, sem
ordem global, sem replay. Falha na publicação é registrada no log e nunca
muda a resposta HTTP.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from apps.core.utils import nome_grupo_retro

logger = logging.getLogger(__name__)

# Eventos enviados aos clientes
CARD_ADDED = 'card_added'
CARD_UPDATED = 'card_updated'
CARD_DELETED = 'card_deleted'
VOTE_CHANGED = 'vote_changed'
COMMENT_ADDED = 'comment_added'
COMMENT_UPDATED = 'comment_updated'
COMMENT_DELETED = 'comment_deleted'
ACTION_ADDED = 'action_added'
ACTION_UPDATED = 'action_updated'
ACTION_DELETED = 'action_deleted'
GROUP_ADDED = 'group_added'
GROUP_UPDATED = 'group_updated'
RETRO_DELETED = 'retro_deleted'

EVENTOS = {
    CARD_ADDED, CARD_UPDATED, CARD_DELETED,
    VOTE_CHANGED,
    COMMENT_ADDED, COMMENT_UPDATED, COMMENT_DELETED,
    ACTION_ADDED, ACTION_UPDATED, ACTION_DELETED,
    GROUP_ADDED, GROUP_UPDATED,
    RETRO_DELETED,
}

# Handler do consumer que recebe as mensagens do grupo
TIPO_MENSAGEM = 'retro.event'


def publicar_evento(retro_id, evento, payload) -> bool:
    """
    Publica evento para todos os inscritos na sala da retrospectiva

    Returns:
        True se o channel layer aceitou a mensagem. O retorno é informativo:
        as views não mudam a resposta por causa dele.
    """
    if evento not in EVENTOS:
        raise ValueError(f"Evento desconhecido: {evento}")

    if not retro_id:
        logger.warning(f"⚠️  Evento {evento} sem retrospectiva - broadcast ignorado")
        return False

    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning(f"⚠️  CHANNEL_LAYERS não configurado - evento {evento} descartado")
        return False

    try:
        async_to_sync(channel_layer.group_send)(
            nome_grupo_retro(retro_id),
            {
                'type': TIPO_MENSAGEM,
                'event': evento,
                'payload': payload,
            }
        )
    except Exception:
        logger.exception(f"❌ Falha ao publicar {evento} na retrospectiva {retro_id}")
        return False

    logger.debug(f"📣 {evento} publicado na retrospectiva {retro_id}")
    return True
