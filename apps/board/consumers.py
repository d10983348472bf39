# apps/board/consumers.py

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings
from django.utils import timezone

from apps.core.models import Retrospective
from apps.core.utils import nome_grupo_retro

logger = logging.getLogger(__name__)


class RetroConsumer(AsyncWebsocketConsumer):
    """
    Consumer WebSocket que entrega os eventos das retrospectivas

    Funcionalidades:
    - Entrada na sala da retrospectiva da URL (ws/retro/<id>/)
    - join_retro / leave_retro para entrar e sair de outras salas
    - Heartbeat (ping/pong)
    - Repasse dos eventos publicados pelas views

    Não há replay: quem entra só recebe eventos publicados a partir daí.
    """

    async def connect(self):
        """
        Aceita a conexão e entra na sala da URL, se houver
        Rejeita se a retrospectiva não existir
        """
        self.salas = set()
        retro_id = self.scope['url_route']['kwargs'].get('retro_id')

        if retro_id:
            if not await self.retro_existe(retro_id):
                logger.warning(f"❌ Conexão WebSocket rejeitada - retrospectiva {retro_id} não existe")
                await self.close()
                return
            await self.entrar_na_sala(retro_id)

        await self.accept()

        await self.send_json({
            'type': 'connected',
            'rooms': sorted(self.salas),
            'heartbeat': getattr(settings, 'RETRO_WS_HEARTBEAT_INTERVAL', 30),
            'timestamp': self.get_timestamp()
        })

        logger.info(f"✅ WebSocket conectado - {self.channel_name} em {sorted(self.salas) or 'nenhuma sala'}")

    async def disconnect(self, close_code):
        """
        Sai de todas as salas
        """
        for retro_id in list(getattr(self, 'salas', ())):
            await self.channel_layer.group_discard(nome_grupo_retro(retro_id), self.channel_name)

        logger.info(f"🔌 WebSocket desconectado - {self.channel_name} (código {close_code})")

    async def receive(self, text_data=None, bytes_data=None):
        """
        Recebe mensagens do cliente WebSocket
        """
        try:
            data = json.loads(text_data or '')
        except json.JSONDecodeError:
            logger.error(f"❌ JSON inválido recebido via WebSocket de {self.channel_name}")
            await self.send_json({'type': 'error', 'error': 'JSON inválido'})
            return

        if not isinstance(data, dict):
            await self.send_json({'type': 'error', 'error': 'Mensagem deve ser um objeto JSON'})
            return

        message_type = data.get('type')

        # Heartbeat/Ping
        if message_type == 'ping':
            await self.send_json({'type': 'pong', 'timestamp': self.get_timestamp()})

        elif message_type == 'join_retro':
            retro_id = data.get('retro_id')
            if not isinstance(retro_id, str) or not await self.retro_existe(retro_id):
                await self.send_json({'type': 'error', 'error': 'Retrospectiva não encontrada'})
                return
            await self.entrar_na_sala(retro_id)
            await self.send_json({'type': 'joined', 'retro_id': retro_id})
            logger.info(f"👥 {self.channel_name} entrou na retrospectiva {retro_id}")

        elif message_type == 'leave_retro':
            retro_id = data.get('retro_id')
            if not isinstance(retro_id, str):
                await self.send_json({'type': 'error', 'error': 'retro_id inválido'})
                return
            if retro_id in self.salas:
                self.salas.discard(retro_id)
                await self.channel_layer.group_discard(nome_grupo_retro(retro_id), self.channel_name)
            await self.send_json({'type': 'left', 'retro_id': retro_id})

        else:
            await self.send_json({'type': 'error', 'error': f'Tipo de mensagem desconhecido: {message_type}'})

    # === Handler dos eventos publicados pelas views ===

    async def retro_event(self, event):
        """
        Repassa evento da retrospectiva ao cliente
        """
        await self.send_json({
            'type': event['event'],
            'payload': event['payload']
        })

    # === Métodos auxiliares ===

    async def entrar_na_sala(self, retro_id):
        await self.channel_layer.group_add(nome_grupo_retro(retro_id), self.channel_name)
        self.salas.add(retro_id)

    async def send_json(self, content):
        await self.send(text_data=json.dumps(content))

    @database_sync_to_async
    def retro_existe(self, retro_id):
        return Retrospective.objects.filter(id=retro_id).exists()

    def get_timestamp(self):
        """
        Retorna timestamp atual em formato ISO
        """
        return timezone.now().isoformat()
