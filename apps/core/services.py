# apps/core/services.py

"""
Serviço de Retrospectiva - Encapsula as regras de negócio do board

As views cuidam apenas de HTTP e do broadcast; toda leitura e escrita no
banco passa por aqui. Nenhuma operação usa transação envolvendo várias
tabelas: criar um grupo e reatribuir dois cards são comandos independentes.
"""

import logging
from typing import Dict, Optional, Tuple

from django.conf import settings
from django.db.models import Prefetch

from .exceptions import DadosInvalidos, NaoEncontrado
from .models import ActionItem, Card, CardGroup, Comment, Retrospective, Vote
from .utils import exigir_campos, texto_opcional, titulo_grupo_padrao

logger = logging.getLogger(__name__)


def _como_bool(valor, padrao=False):
    if valor is None:
        return padrao
    if isinstance(valor, str):
        return valor.strip().lower() in ('1', 'true', 'yes', 'sim', 'on')
    return bool(valor)


class RetroService:
    """
    Serviço encapsulado para as operações da retrospectiva

    Cada método público corresponde a uma operação da API e devolve
    instâncias de model; erros de domínio sobem como DadosInvalidos ou
    NaoEncontrado.
    """

    @property
    def _sufixo_grupo(self):
        return getattr(settings, 'RETRO_GROUP_TITLE_SUFFIX', 'Group')

    # === BUSCAS INTERNAS ===

    def _obter(self, model, pk, mensagem):
        try:
            return model.objects.get(pk=pk)
        except model.DoesNotExist:
            raise NaoEncontrado(mensagem)

    def obter_retro(self, retro_id) -> Retrospective:
        return self._obter(Retrospective, retro_id, 'Retrospectiva não encontrada')

    def obter_card(self, card_id) -> Card:
        return self._obter(Card, card_id, 'Card não encontrado')

    def obter_comentario(self, comentario_id) -> Comment:
        return self._obter(Comment, comentario_id, 'Comentário não encontrado')

    def obter_acao(self, acao_id) -> ActionItem:
        return self._obter(ActionItem, acao_id, 'Ação não encontrada')

    def obter_grupo(self, grupo_id) -> CardGroup:
        return self._obter(CardGroup, grupo_id, 'Grupo não encontrado')

    def _excluir(self, instancia):
        pk = instancia.pk
        instancia.delete()
        # delete() zera a pk; as views ainda publicam o id excluído
        instancia.pk = pk
        return instancia

    def _validar_categoria(self, categoria):
        if not Card.categoria_valida(categoria):
            raise DadosInvalidos(
                f"Categoria inválida: {categoria!r}. Use uma de: {', '.join(Card.CATEGORIAS)}"
            )

    # === RETROSPECTIVAS ===

    def criar_retro(self, dados: Dict) -> Retrospective:
        """Cria retrospectiva; o ID pode vir do cliente"""
        exigir_campos(dados, 'name', 'team', 'created_by')

        retro_id = texto_opcional(dados.get('id'))
        if retro_id and Retrospective.objects.filter(id=retro_id).exists():
            raise DadosInvalidos('Já existe uma retrospectiva com este ID')

        retro = Retrospective(
            name=dados['name'].strip(),
            team=dados['team'].strip(),
            created_by=dados['created_by'].strip(),
            is_anonymous=_como_bool(dados.get('is_anonymous'), padrao=True),
        )
        if retro_id:
            retro.id = retro_id
        retro.save(force_insert=True)

        logger.info(f"📝 Retrospectiva criada: {retro.id} ({retro.name})")
        return retro

    def excluir_retro(self, retro_id) -> Retrospective:
        """
        Exclusão física sem cascade

        Cards, ações e grupos da retrospectiva permanecem no banco.
        """
        return self._excluir(self.obter_retro(retro_id))

    # === CARDS ===

    def listar_cards(self, retro_id):
        """Cards da retrospectiva com votos e comentários pré-carregados"""
        self.obter_retro(retro_id)
        return (
            Card.objects.filter(retro_id=retro_id)
            .prefetch_related(
                Prefetch('votes', queryset=Vote.objects.order_by('created_at')),
                Prefetch('comments', queryset=Comment.objects.order_by('created_at')),
            )
            .order_by('created_at')
        )

    def criar_card(self, retro_id, dados: Dict) -> Card:
        exigir_campos(dados, 'content', 'author')
        categoria = dados.get('type') or dados.get('category')
        self._validar_categoria(categoria)

        retro = self.obter_retro(retro_id)
        return Card.objects.create(
            retro_id=retro.id,
            category=categoria,
            content=dados['content'].strip(),
            author=dados['author'].strip(),
        )

    def editar_card(self, card_id, dados: Dict) -> Card:
        exigir_campos(dados, 'content')
        card = self.obter_card(card_id)
        card.content = dados['content'].strip()
        card.save(update_fields=['content'])
        return card

    def mudar_categoria(self, card_id, categoria) -> Card:
        """
        Move o card para outra categoria

        Um card agrupado sai do grupo: grupos só contêm uma categoria.
        """
        self._validar_categoria(categoria)
        card = self.obter_card(card_id)
        if card.category == categoria:
            return card

        card.category = categoria
        card.group = None
        card.save(update_fields=['category', 'group'])
        return card

    def excluir_card(self, card_id) -> Card:
        """Exclusão sem cascade: votos e comentários ficam órfãos"""
        return self._excluir(self.obter_card(card_id))

    # === VOTOS ===

    def alternar_voto(self, card_id, user_id) -> Tuple[Card, bool, int]:
        """
        Adiciona ou remove o voto do usuário no card

        A checagem de existência e o insert são comandos separados: dois
        toggles concorrentes podem duplicar o voto.

        Returns:
            Tuple[card, votou_agora, total_votos]
        """
        exigir_campos({'user_id': user_id}, 'user_id')
        user_id = user_id.strip()

        card = self.obter_card(card_id)
        existente = Vote.objects.filter(card_id=card.id, user_id=user_id).first()

        if existente:
            existente.delete()
            votou = False
        else:
            Vote.objects.create(card=card, user_id=user_id)
            votou = True

        total = Vote.objects.filter(card_id=card.id).count()
        return card, votou, total

    # === COMENTÁRIOS ===

    def criar_comentario(self, card_id, dados: Dict) -> Comment:
        exigir_campos(dados, 'author', 'content')
        card = self.obter_card(card_id)
        return Comment.objects.create(
            card=card,
            author=dados['author'].strip(),
            content=dados['content'].strip(),
        )

    def editar_comentario(self, comentario_id, dados: Dict) -> Comment:
        exigir_campos(dados, 'content')
        comentario = self.obter_comentario(comentario_id)
        comentario.content = dados['content'].strip()
        comentario.save(update_fields=['content'])
        return comentario

    def excluir_comentario(self, comentario_id) -> Comment:
        return self._excluir(self.obter_comentario(comentario_id))

    def retro_do_card(self, card_id) -> Optional[str]:
        """retro_id do card (None se o card não existe mais)"""
        return Card.objects.filter(id=card_id).values_list('retro_id', flat=True).first()

    # === AÇÕES ===

    def listar_acoes(self, retro_id):
        self.obter_retro(retro_id)
        return ActionItem.objects.filter(retro_id=retro_id).order_by('created_at')

    def criar_acao(self, retro_id, dados: Dict) -> ActionItem:
        """
        Cria ação, opcionalmente vinculada a um card

        O snapshot do card vem sempre do banco, não do payload.
        """
        exigir_campos(dados, 'text')
        retro = self.obter_retro(retro_id)

        acao = ActionItem(
            retro_id=retro.id,
            text=dados['text'].strip(),
            assignee=texto_opcional(dados.get('assignee')),
        )

        card_id = texto_opcional(dados.get('linked_card_id'))
        if card_id:
            acao.capturar_card(self.obter_card(card_id))

        acao.save(force_insert=True)
        return acao

    def editar_acao(self, acao_id, dados: Dict) -> ActionItem:
        acao = self.obter_acao(acao_id)
        campos = []

        if 'text' in dados:
            exigir_campos(dados, 'text')
            acao.text = dados['text'].strip()
            campos.append('text')
        if 'assignee' in dados:
            acao.assignee = texto_opcional(dados.get('assignee'))
            campos.append('assignee')
        if 'completed' in dados:
            acao.completed = _como_bool(dados.get('completed'))
            campos.append('completed')

        if not campos:
            raise DadosInvalidos('Nada para atualizar: envie text, assignee ou completed')

        acao.save(update_fields=campos)
        return acao

    def alternar_acao(self, acao_id) -> ActionItem:
        acao = self.obter_acao(acao_id)
        acao.completed = not acao.completed
        acao.save(update_fields=['completed'])
        return acao

    def excluir_acao(self, acao_id) -> ActionItem:
        return self._excluir(self.obter_acao(acao_id))

    # === GRUPOS ===

    def listar_grupos(self, retro_id):
        self.obter_retro(retro_id)
        return CardGroup.objects.filter(retro_id=retro_id).order_by('created_at')

    def agrupar_cards(self, retro_id, card_id, alvo_id, titulo=None) -> Tuple[CardGroup, bool]:
        """
        Agrupa card com o card alvo

        Regras:
        1. Se já estão no mesmo grupo nada muda
        2. Se o alvo tem grupo, o card entra nele (todos os membros devem ter
           a categoria do card)
        3. Senão os dois precisam ter a mesma categoria e um grupo novo é
           criado; as duas reatribuições não são atômicas

        Returns:
            Tuple[grupo, grupo_foi_criado]
        """
        if card_id == alvo_id:
            raise DadosInvalidos('Não é possível agrupar um card com ele mesmo')

        retro = self.obter_retro(retro_id)
        card = self._card_da_retro(retro.id, card_id)
        alvo = self._card_da_retro(retro.id, alvo_id)

        if card.group_id and card.group_id == alvo.group_id:
            return self.obter_grupo(card.group_id), False

        if alvo.group_id:
            grupo = self.obter_grupo(alvo.group_id)
            self._validar_entrada_no_grupo(grupo, card)
            Card.objects.filter(id=card.id).update(group=grupo)
            logger.info(f"🧲 Card {card.id} entrou no grupo {grupo.id}")
            return grupo, False

        if card.category != alvo.category:
            raise DadosInvalidos('Só é possível agrupar cards da mesma categoria')

        grupo = CardGroup.objects.create(
            retro_id=retro.id,
            title=texto_opcional(titulo) or titulo_grupo_padrao(card.category, self._sufixo_grupo),
        )
        Card.objects.filter(id=card.id).update(group=grupo)
        Card.objects.filter(id=alvo.id).update(group=grupo)

        logger.info(f"🧲 Grupo {grupo.id} criado com os cards {card.id} e {alvo.id}")
        return grupo, True

    def mover_para_grupo(self, card_id, grupo_id) -> Card:
        card = self.obter_card(card_id)
        grupo = self.obter_grupo(grupo_id)

        if grupo.retro_id != card.retro_id:
            raise DadosInvalidos('O grupo pertence a outra retrospectiva')
        self._validar_entrada_no_grupo(grupo, card)

        card.group = grupo
        card.save(update_fields=['group'])
        return card

    def remover_do_grupo(self, card_id) -> Card:
        card = self.obter_card(card_id)
        card.group = None
        card.save(update_fields=['group'])
        return card

    def editar_titulo_grupo(self, grupo_id, dados: Dict) -> CardGroup:
        exigir_campos(dados, 'title')
        grupo = self.obter_grupo(grupo_id)
        grupo.title = dados['title'].strip()
        grupo.save(update_fields=['title'])
        return grupo

    def _card_da_retro(self, retro_id, card_id) -> Card:
        card = self.obter_card(card_id)
        if card.retro_id != retro_id:
            raise NaoEncontrado('Card não encontrado nesta retrospectiva')
        return card

    def _validar_entrada_no_grupo(self, grupo, card):
        if grupo.categorias_membros() - {card.category}:
            raise DadosInvalidos('Só é possível agrupar cards da mesma categoria')


# Instância única usada pelas views
retro_service = RetroService()
