# apps/client/store.py

"""
Store do cliente da retrospectiva

Estado explícito (retro, cards, ações, grupos) mais um SessionContext
injetado com o participante e a retrospectiva. A reconciliação é por
refetch: cada evento recebido pelo WebSocket dispara uma nova leitura da
coleção afetada, que substitui a local por inteiro.

O store não abre o WebSocket. Quem tiver a conexão repassa cada frame
para handle_frame (texto) ou handle_event (dict já decodificado).
"""

import json
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import httpx

from .api import RetroApiClient, RetroApiError
from .results import MutationResult

logger = logging.getLogger(__name__)

# Autor enviado nos cards de retrospectivas anônimas
AUTOR_ANONIMO = 'Anonymous'

EVENTOS_CARDS = {
    'card_added', 'card_updated', 'card_deleted',
    'vote_changed',
    'comment_added', 'comment_updated', 'comment_deleted',
}
EVENTOS_ACOES = {'action_added', 'action_updated', 'action_deleted'}
EVENTOS_GRUPOS = {'group_added', 'group_updated'}

# Frames de controle do consumer; não pedem refetch
FRAMES_CONTROLE = {'connected', 'pong', 'joined', 'left', 'error'}

# Falhas que uma mutação converte em MutationResult.failure
ERROS_API = (RetroApiError, httpx.HTTPError)


@dataclass(frozen=True)
class SessionContext:
    """Participante atual e retrospectiva aberta"""

    username: str
    retro_id: str


def _notificar_nada(nivel, mensagem):
    return None


class RetroStore:
    """
    Estado local de uma retrospectiva

    Args:
        api: cliente HTTP
        sessao: participante e retrospectiva
        notificar: callable(nivel, mensagem) chamado em sucessos e falhas,
            nivel 'info' ou 'error'
    """

    def __init__(self, api: RetroApiClient, sessao: SessionContext,
                 notificar: Optional[Callable[[str, str], None]] = None):
        self.api = api
        self.sessao = sessao
        self.notificar = notificar or _notificar_nada

        self.retro: Optional[Dict] = None
        self.cards: List[Dict] = []
        self.actions: List[Dict] = []
        self.groups: List[Dict] = []
        self.retro_excluida = False

    # === Leitura ===

    def load(self) -> bool:
        """Carrega retrospectiva e todas as coleções"""
        try:
            self.retro = self.api.get_retro(self.sessao.retro_id)
        except ERROS_API as e:
            self._falha_leitura('retrospectiva', e)
            return False

        return all([self.refetch_cards(), self.refetch_actions(), self.refetch_groups()])

    def refetch_cards(self) -> bool:
        try:
            self.cards = self.api.list_cards(self.sessao.retro_id, user_id=self.sessao.username)
        except ERROS_API as e:
            self._falha_leitura('cards', e)
            return False
        return True

    def refetch_actions(self) -> bool:
        try:
            self.actions = self.api.list_actions(self.sessao.retro_id)
        except ERROS_API as e:
            self._falha_leitura('ações', e)
            return False
        return True

    def refetch_groups(self) -> bool:
        try:
            self.groups = self.api.list_groups(self.sessao.retro_id)
        except ERROS_API as e:
            self._falha_leitura('grupos', e)
            return False
        return True

    def _falha_leitura(self, colecao, erro):
        # Estado anterior permanece intacto
        logger.warning(f"⚠️  Falha ao carregar {colecao} da retrospectiva {self.sessao.retro_id}: {erro}")
        self.notificar('error', f'Não foi possível carregar {colecao}')

    @property
    def is_anonymous(self) -> bool:
        return bool(self.retro and self.retro.get('is_anonymous'))

    @property
    def voted_card_ids(self):
        return {card['id'] for card in self.cards if card.get('hasVoted')}

    def card(self, card_id) -> Optional[Dict]:
        return next((card for card in self.cards if card['id'] == card_id), None)

    def cards_by_category(self, category) -> List[Dict]:
        return [card for card in self.cards if card.get('type') == category]

    def cards_in_group(self, group_id) -> List[Dict]:
        return [card for card in self.cards if card.get('group_id') == group_id]

    # === Eventos ===

    def handle_frame(self, texto: str) -> Optional[str]:
        """Decodifica um frame do WebSocket e o trata como evento"""
        try:
            evento = json.loads(texto)
        except json.JSONDecodeError:
            logger.error(f"❌ Frame inválido recebido: {texto[:80]!r}")
            return None

        if not isinstance(evento, dict):
            return None
        return self.handle_event(evento)

    def handle_event(self, evento: Dict) -> Optional[str]:
        """
        Refetch da coleção afetada pelo evento

        Returns:
            Nome da coleção relida ('cards', 'actions', 'groups', 'retro')
            ou None para frames de controle e eventos desconhecidos
        """
        tipo = evento.get('type')

        if tipo in EVENTOS_CARDS:
            self.refetch_cards()
            return 'cards'

        if tipo in EVENTOS_ACOES:
            self.refetch_actions()
            return 'actions'

        if tipo in EVENTOS_GRUPOS:
            self.refetch_groups()
            return 'groups'

        if tipo == 'retro_deleted':
            self.retro_excluida = True
            self.notificar('error', 'A retrospectiva foi excluída')
            return 'retro'

        if tipo not in FRAMES_CONTROLE:
            logger.debug(f"Evento ignorado: {tipo}")
        return None

    # === Mutações ===

    def _executar(self, operacao, *args, sucesso=None, erro='Operação falhou', **kwargs) -> MutationResult:
        try:
            valor = operacao(*args, **kwargs)
        except ERROS_API as e:
            logger.warning(f"⚠️  {erro}: {e}")
            self.notificar('error', f"{erro}: {getattr(e, 'detail', None) or e}")
            return MutationResult.failure(getattr(e, 'detail', None) or e, getattr(e, 'status_code', None))

        if sucesso:
            self.notificar('info', sucesso)
        return MutationResult.success(valor)

    def add_card(self, category: str, content: str) -> MutationResult:
        autor = AUTOR_ANONIMO if self.is_anonymous else self.sessao.username
        return self._executar(
            self.api.create_card, self.sessao.retro_id, category, content, autor,
            sucesso='Card adicionado', erro='Não foi possível adicionar o card'
        )

    def edit_card(self, card_id: str, content: str) -> MutationResult:
        return self._executar(self.api.edit_card, card_id, content, erro='Não foi possível editar o card')

    def delete_card(self, card_id: str) -> MutationResult:
        return self._executar(self.api.delete_card, card_id, erro='Não foi possível excluir o card')

    def toggle_vote(self, card_id: str) -> MutationResult:
        return self._executar(
            self.api.toggle_vote, card_id, self.sessao.username,
            erro='Não foi possível atualizar o voto'
        )

    def change_card_category(self, card_id: str, category: str) -> MutationResult:
        """
        Mudança de categoria otimista

        Aplica a mudança localmente antes da chamada; se ela falhar, aplica
        o inverso exato capturado antes da mudança.
        """
        card = self.card(card_id)
        if card is None:
            return MutationResult.failure('Card não encontrado', 404)

        if card.get('type') == category:
            self.notificar('info', 'O card já está nesta categoria')
            return MutationResult.success(card)

        inverso = {'type': card.get('type'), 'group_id': card.get('group_id')}
        card.update({'type': category, 'group_id': None})

        resultado = self._executar(
            self.api.change_category, card_id, category,
            sucesso='Categoria alterada', erro='Não foi possível mudar a categoria'
        )

        if resultado.ok:
            card.update({'type': resultado.value.get('type', category),
                         'group_id': resultado.value.get('group_id')})
        else:
            card.update(inverso)

        return resultado

    def add_comment(self, card_id: str, content: str) -> MutationResult:
        return self._executar(
            self.api.add_comment, card_id, self.sessao.username, content,
            erro='Não foi possível adicionar o comentário'
        )

    def edit_comment(self, comment_id: str, content: str) -> MutationResult:
        return self._executar(self.api.edit_comment, comment_id, content, erro='Não foi possível editar o comentário')

    def delete_comment(self, comment_id: str) -> MutationResult:
        return self._executar(self.api.delete_comment, comment_id, erro='Não foi possível excluir o comentário')

    def add_action(self, text: str, assignee: Optional[str] = None,
                   linked_card_id: Optional[str] = None) -> MutationResult:
        return self._executar(
            self.api.create_action, self.sessao.retro_id, text, assignee, linked_card_id,
            sucesso='Ação adicionada', erro='Não foi possível adicionar a ação'
        )

    def edit_action(self, action_id: str, **campos) -> MutationResult:
        return self._executar(self.api.edit_action, action_id, erro='Não foi possível editar a ação', **campos)

    def toggle_action(self, action_id: str) -> MutationResult:
        return self._executar(self.api.toggle_action, action_id, erro='Não foi possível atualizar a ação')

    def delete_action(self, action_id: str) -> MutationResult:
        return self._executar(self.api.delete_action, action_id, erro='Não foi possível excluir a ação')

    def group_cards(self, card_id: str, target_card_id: str, title: Optional[str] = None) -> MutationResult:
        return self._executar(
            self.api.group_cards, self.sessao.retro_id, card_id, target_card_id, title,
            erro='Não foi possível agrupar os cards'
        )

    def move_to_group(self, card_id: str, group_id: str) -> MutationResult:
        return self._executar(self.api.move_to_group, card_id, group_id, erro='Não foi possível mover o card')

    def remove_from_group(self, card_id: str) -> MutationResult:
        return self._executar(self.api.remove_from_group, card_id, erro='Não foi possível remover o card do grupo')

    def edit_group_title(self, group_id: str, title: str) -> MutationResult:
        return self._executar(self.api.edit_group_title, group_id, title, erro='Não foi possível renomear o grupo')
