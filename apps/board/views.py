# apps/board/views.py

"""
API JSON do Retro Board

Cada view delega a regra de negócio ao RetroService e, depois de uma
mutação bem-sucedida, publica o evento correspondente na sala da
retrospectiva. Erros sobem como exceções e o RetroApiMiddleware os
converte em {"success": false, "error": "..."}.
"""

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps.core.services import retro_service
from apps.core.utils import (
    exigir_campos,
    ler_json,
    serializar_acao,
    serializar_card,
    serializar_comentario,
    serializar_grupo,
    serializar_retro,
)

from . import broadcast
from .broadcast import publicar_evento


def _sucesso(**extra):
    return JsonResponse({'success': True, **extra})


# === RETROSPECTIVAS ===

@csrf_exempt
@require_http_methods(["POST"])
def criar_retro(request):
    """
    Cria retrospectiva
    """
    retro = retro_service.criar_retro(ler_json(request))
    return JsonResponse(serializar_retro(retro), status=201)


@csrf_exempt
@require_http_methods(["GET", "DELETE"])
def retro_detalhe(request, retro_id):
    """
    GET - dados da retrospectiva
    DELETE - exclusão sem cascade
    """
    if request.method == 'DELETE':
        retro = retro_service.excluir_retro(retro_id)
        publicar_evento(retro.id, broadcast.RETRO_DELETED, {'id': retro.id})
        return _sucesso()

    return JsonResponse(serializar_retro(retro_service.obter_retro(retro_id)))


# === CARDS ===

@csrf_exempt
@require_http_methods(["GET", "POST"])
def cards_retro(request, retro_id):
    """
    GET - cards com comentários, votos e hasVoted do participante
    POST - novo card
    """
    if request.method == 'POST':
        card = retro_service.criar_card(retro_id, ler_json(request))
        dados = serializar_card(card)
        publicar_evento(card.retro_id, broadcast.CARD_ADDED, dados)
        return JsonResponse(dados, status=201)

    cards = retro_service.listar_cards(retro_id)
    participante = request.participante
    return JsonResponse(
        [serializar_card(card, participante, com_relacoes=True) for card in cards],
        safe=False
    )


@csrf_exempt
@require_http_methods(["PUT", "PATCH", "DELETE"])
def card_detalhe(request, card_id):
    """
    PUT/PATCH - edita conteúdo
    DELETE - exclui card (votos e comentários ficam órfãos)
    """
    if request.method == 'DELETE':
        card = retro_service.excluir_card(card_id)
        publicar_evento(card.retro_id, broadcast.CARD_DELETED, {'id': card.id})
        return _sucesso()

    card = retro_service.editar_card(card_id, ler_json(request))
    dados = serializar_card(card)
    publicar_evento(card.retro_id, broadcast.CARD_UPDATED, dados)
    return JsonResponse(dados)


@csrf_exempt
@require_http_methods(["PUT", "PATCH"])
def mudar_categoria_card(request, card_id):
    """
    Muda a categoria do card
    """
    dados = ler_json(request)
    card = retro_service.mudar_categoria(card_id, dados.get('type') or dados.get('category'))
    resposta = serializar_card(card)
    publicar_evento(card.retro_id, broadcast.CARD_UPDATED, resposta)
    return JsonResponse(resposta)


@csrf_exempt
@require_http_methods(["POST"])
def alternar_voto(request, card_id):
    """
    Adiciona ou remove o voto do usuário
    """
    dados = ler_json(request)
    user_id = dados.get('user_id') or request.participante

    card, votou, total = retro_service.alternar_voto(card_id, user_id)
    publicar_evento(card.retro_id, broadcast.VOTE_CHANGED, {'cardId': card.id})

    return _sucesso(hasVoted=votou, votes=total)


# === COMENTÁRIOS ===

@csrf_exempt
@require_http_methods(["POST"])
def adicionar_comentario(request, card_id):
    """
    Adiciona comentário ao card
    """
    comentario = retro_service.criar_comentario(card_id, ler_json(request))
    retro_id = retro_service.retro_do_card(comentario.card_id)
    publicar_evento(retro_id, broadcast.COMMENT_ADDED, {'cardId': comentario.card_id})
    return JsonResponse(serializar_comentario(comentario), status=201)


@csrf_exempt
@require_http_methods(["PUT", "PATCH", "DELETE"])
def comentario_detalhe(request, comment_id):
    """
    PUT/PATCH - edita comentário
    DELETE - remove comentário
    """
    if request.method == 'DELETE':
        comentario = retro_service.excluir_comentario(comment_id)
        evento = broadcast.COMMENT_DELETED
        resposta = _sucesso()
    else:
        comentario = retro_service.editar_comentario(comment_id, ler_json(request))
        evento = broadcast.COMMENT_UPDATED
        resposta = JsonResponse(serializar_comentario(comentario))

    retro_id = retro_service.retro_do_card(comentario.card_id)
    publicar_evento(retro_id, evento, {'cardId': comentario.card_id, 'id': comentario.id})
    return resposta


# === AÇÕES ===

@csrf_exempt
@require_http_methods(["GET", "POST"])
def acoes_retro(request, retro_id):
    """
    GET - ações da retrospectiva
    POST - nova ação (snapshot do card vinculado)
    """
    if request.method == 'POST':
        acao = retro_service.criar_acao(retro_id, ler_json(request))
        dados = serializar_acao(acao)
        publicar_evento(acao.retro_id, broadcast.ACTION_ADDED, dados)
        return JsonResponse(dados, status=201)

    acoes = retro_service.listar_acoes(retro_id)
    return JsonResponse([serializar_acao(acao) for acao in acoes], safe=False)


@csrf_exempt
@require_http_methods(["PUT", "PATCH", "DELETE"])
def acao_detalhe(request, action_id):
    """
    PUT/PATCH - edita texto, responsável ou conclusão
    DELETE - remove ação
    """
    if request.method == 'DELETE':
        acao = retro_service.excluir_acao(action_id)
        publicar_evento(acao.retro_id, broadcast.ACTION_DELETED, {'id': acao.id})
        return _sucesso()

    acao = retro_service.editar_acao(action_id, ler_json(request))
    dados = serializar_acao(acao)
    publicar_evento(acao.retro_id, broadcast.ACTION_UPDATED, dados)
    return JsonResponse(dados)


@csrf_exempt
@require_http_methods(["PUT", "POST"])
def alternar_acao(request, action_id):
    """
    Alterna conclusão da ação
    """
    acao = retro_service.alternar_acao(action_id)
    publicar_evento(acao.retro_id, broadcast.ACTION_UPDATED, {'id': acao.id, 'completed': acao.completed})
    return _sucesso(completed=acao.completed)


# === GRUPOS ===

@csrf_exempt
@require_http_methods(["GET", "POST"])
def grupos_retro(request, retro_id):
    """
    GET - grupos da retrospectiva
    POST - agrupa card_id com target_card_id
    """
    if request.method == 'POST':
        dados = ler_json(request)
        exigir_campos(dados, 'card_id', 'target_card_id')
        grupo, criado = retro_service.agrupar_cards(
            retro_id,
            dados.get('card_id'),
            dados.get('target_card_id'),
            dados.get('title'),
        )
        resposta = serializar_grupo(grupo)
        if criado:
            publicar_evento(grupo.retro_id, broadcast.GROUP_ADDED, resposta)
        # Grupo novo recebe os dois cards; nos demais casos só o card movido
        afetados = [dados['card_id'], dados['target_card_id']] if criado else [dados['card_id']]
        for afetado in afetados:
            publicar_evento(grupo.retro_id, broadcast.CARD_UPDATED, {'id': afetado, 'group_id': grupo.id})
        return JsonResponse({**resposta, 'created': criado}, status=201 if criado else 200)

    grupos = retro_service.listar_grupos(retro_id)
    return JsonResponse([serializar_grupo(grupo) for grupo in grupos], safe=False)


@csrf_exempt
@require_http_methods(["PUT", "PATCH"])
def grupo_detalhe(request, group_id):
    """
    Edita título do grupo
    """
    grupo = retro_service.editar_titulo_grupo(group_id, ler_json(request))
    dados = serializar_grupo(grupo)
    publicar_evento(grupo.retro_id, broadcast.GROUP_UPDATED, dados)
    return JsonResponse(dados)


@csrf_exempt
@require_http_methods(["PUT", "DELETE"])
def grupo_do_card(request, card_id):
    """
    PUT - move card para o grupo informado em group_id
    DELETE - remove card do grupo
    """
    if request.method == 'DELETE':
        card = retro_service.remover_do_grupo(card_id)
    else:
        dados = ler_json(request)
        exigir_campos(dados, 'group_id')
        card = retro_service.mover_para_grupo(card_id, dados['group_id'])

    dados = serializar_card(card)
    publicar_evento(card.retro_id, broadcast.CARD_UPDATED, dados)
    return JsonResponse(dados)
