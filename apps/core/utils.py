# apps/core/utils.py

import hashlib
import json
import re
from typing import Dict, Optional

from .exceptions import DadosInvalidos

# Nomes de grupo do channel layer: ASCII, até 100 caracteres
_ID_SEGURO = re.compile(r'^[A-Za-z0-9_.\-]{1,90}$')


def nome_grupo_retro(retro_id: str) -> str:
    """
    Nome do grupo (sala) do channel layer para uma retrospectiva

    IDs fornecidos pelo cliente podem conter caracteres que o channel layer
    não aceita; nesses casos usa o hash do ID.
    """
    retro_id = str(retro_id)
    if _ID_SEGURO.match(retro_id):
        return f'retro_{retro_id}'
    return f'retro_{hashlib.md5(retro_id.encode()).hexdigest()}'


def ler_json(request) -> Dict:
    """Lê o corpo JSON da requisição, sempre como dict"""
    if not request.body:
        return {}

    try:
        dados = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise DadosInvalidos('JSON inválido')

    if not isinstance(dados, dict):
        raise DadosInvalidos('O corpo da requisição deve ser um objeto JSON')
    return dados


def exigir_campos(dados: Dict, *campos: str) -> None:
    """Campos obrigatórios são strings não vazias"""
    for campo in campos:
        valor = dados.get(campo)
        if valor is None or (isinstance(valor, str) and not valor.strip()):
            raise DadosInvalidos(f'Campo obrigatório ausente: {campo}')
        if not isinstance(valor, str):
            raise DadosInvalidos(f'Campo {campo} deve ser texto')


def texto_opcional(valor) -> Optional[str]:
    """Normaliza strings opcionais: vazio vira None"""
    if valor is None:
        return None
    valor = str(valor).strip()
    return valor or None


def titulo_grupo_padrao(categoria: str, sufixo: str = 'Group') -> str:
    """
    Título padrão de um grupo novo
    Ex: 'hot' -> 'Hot Group'
    """
    return f"{categoria[:1].upper()}{categoria[1:]} {sufixo}"


def _iso(data):
    return data.isoformat() if data else None


# === Serialização para JSON / channel layer ===

def serializar_retro(retro) -> Dict:
    return {
        'id': retro.id,
        'name': retro.name,
        'team': retro.team,
        'created_by': retro.created_by,
        'is_anonymous': retro.is_anonymous,
        'created_at': _iso(retro.created_at),
    }


def serializar_comentario(comentario) -> Dict:
    return {
        'id': comentario.id,
        'card_id': comentario.card_id,
        'author': comentario.author,
        'content': comentario.content,
        'created_at': _iso(comentario.created_at),
    }


def serializar_card(card, participante: Optional[str] = None, com_relacoes: bool = False) -> Dict:
    """
    Serializa um card

    Com com_relacoes=True inclui comentários, votos e hasVoted; espera que
    votes e comments tenham sido carregados com prefetch_related.
    """
    dados = {
        'id': card.id,
        'retro_id': card.retro_id,
        'type': card.category,
        'content': card.content,
        'author': card.author,
        'group_id': card.group_id,
        'created_at': _iso(card.created_at),
    }

    if com_relacoes:
        votos = list(card.votes.all())
        comentarios = list(card.comments.all())
        dados.update({
            'votes': len(votos),
            'hasVoted': bool(participante) and any(v.user_id == participante for v in votos),
            'retro_card_votes': [{'id': v.id, 'user_id': v.user_id} for v in votos],
            'retro_comments': [serializar_comentario(c) for c in comentarios],
        })

    return dados


def serializar_acao(acao) -> Dict:
    return {
        'id': acao.id,
        'retro_id': acao.retro_id,
        'text': acao.text,
        'assignee': acao.assignee,
        'completed': acao.completed,
        'linked_card_id': acao.linked_card_id,
        'linked_card_content': acao.linked_card_content,
        'linked_card_type': acao.linked_card_type,
        'created_at': _iso(acao.created_at),
    }


def serializar_grupo(grupo) -> Dict:
    return {
        'id': grupo.id,
        'retro_id': grupo.retro_id,
        'title': grupo.title,
        'created_at': _iso(grupo.created_at),
    }
