# apps/client/api.py

"""
Cliente HTTP da API do Retro Board

Um método por endpoint. Qualquer resposta fora de 2xx vira RetroApiError
com a mensagem do campo "error" do servidor; não há retry.
"""

import logging
from typing import Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class RetroApiError(Exception):
    """Resposta não-2xx da API"""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Retro API error {status_code}: {detail}")


def _detalhe(response: httpx.Response) -> str:
    try:
        dados = response.json()
    except ValueError:
        return response.text
    if isinstance(dados, dict) and dados.get('error'):
        return str(dados['error'])
    return response.text


class RetroApiClient:
    """
    Cliente síncrono sobre httpx.Client

    Args:
        base_url: raiz do servidor (ex: http://localhost:8000); o prefixo
            /api é adicionado aqui
        transport: transporte httpx alternativo (testes usam MockTransport)
    """

    def __init__(self, base_url: str, transport: Optional[httpx.BaseTransport] = None, timeout=None):
        opcoes = {'base_url': base_url.rstrip('/') + '/api'}
        if transport is not None:
            opcoes['transport'] = transport
        if timeout is not None:
            opcoes['timeout'] = timeout
        self._http = httpx.Client(**opcoes)

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, path: str, **kwargs):
        response = self._http.request(method, path, **kwargs)
        if not response.is_success:
            detalhe = _detalhe(response)
            logger.warning(f"⚠️  {method} {path} -> {response.status_code}: {detalhe}")
            raise RetroApiError(response.status_code, detalhe)
        return response.json()

    # === Saúde ===

    def health(self) -> Dict:
        return self._request('GET', '/health')

    # === Retrospectivas ===

    def create_retro(self, name: str, team: str, created_by: str,
                     is_anonymous: bool = True, retro_id: Optional[str] = None) -> Dict:
        payload = {
            'name': name,
            'team': team,
            'created_by': created_by,
            'is_anonymous': is_anonymous,
        }
        if retro_id:
            payload['id'] = retro_id
        return self._request('POST', '/retro', json=payload)

    def get_retro(self, retro_id: str) -> Dict:
        return self._request('GET', f'/retro/{retro_id}')

    def delete_retro(self, retro_id: str) -> Dict:
        return self._request('DELETE', f'/retro/{retro_id}')

    # === Cards ===

    def list_cards(self, retro_id: str, user_id: Optional[str] = None) -> List[Dict]:
        params = {'user_id': user_id} if user_id else None
        return self._request('GET', f'/retro/{retro_id}/cards', params=params)

    def create_card(self, retro_id: str, category: str, content: str, author: str) -> Dict:
        return self._request('POST', f'/retro/{retro_id}/cards', json={
            'type': category,
            'content': content,
            'author': author,
        })

    def edit_card(self, card_id: str, content: str) -> Dict:
        return self._request('PUT', f'/cards/{card_id}', json={'content': content})

    def change_category(self, card_id: str, category: str) -> Dict:
        return self._request('PUT', f'/cards/{card_id}/category', json={'type': category})

    def delete_card(self, card_id: str) -> Dict:
        return self._request('DELETE', f'/cards/{card_id}')

    def toggle_vote(self, card_id: str, user_id: str) -> Dict:
        return self._request('POST', f'/cards/{card_id}/vote', json={'user_id': user_id})

    # === Comentários ===

    def add_comment(self, card_id: str, author: str, content: str) -> Dict:
        return self._request('POST', f'/cards/{card_id}/comments', json={
            'author': author,
            'content': content,
        })

    def edit_comment(self, comment_id: str, content: str) -> Dict:
        return self._request('PUT', f'/comments/{comment_id}', json={'content': content})

    def delete_comment(self, comment_id: str) -> Dict:
        return self._request('DELETE', f'/comments/{comment_id}')

    # === Ações ===

    def list_actions(self, retro_id: str) -> List[Dict]:
        return self._request('GET', f'/retro/{retro_id}/actions')

    def create_action(self, retro_id: str, text: str, assignee: Optional[str] = None,
                      linked_card_id: Optional[str] = None) -> Dict:
        payload = {'text': text, 'assignee': assignee}
        if linked_card_id:
            payload['linked_card_id'] = linked_card_id
        return self._request('POST', f'/retro/{retro_id}/actions', json=payload)

    def edit_action(self, action_id: str, **campos) -> Dict:
        """Campos aceitos: text, assignee, completed"""
        return self._request('PUT', f'/actions/{action_id}', json=campos)

    def toggle_action(self, action_id: str) -> Dict:
        return self._request('PUT', f'/actions/{action_id}/toggle')

    def delete_action(self, action_id: str) -> Dict:
        return self._request('DELETE', f'/actions/{action_id}')

    # === Grupos ===

    def list_groups(self, retro_id: str) -> List[Dict]:
        return self._request('GET', f'/retro/{retro_id}/groups')

    def group_cards(self, retro_id: str, card_id: str, target_card_id: str,
                    title: Optional[str] = None) -> Dict:
        payload = {'card_id': card_id, 'target_card_id': target_card_id}
        if title:
            payload['title'] = title
        return self._request('POST', f'/retro/{retro_id}/groups', json=payload)

    def move_to_group(self, card_id: str, group_id: str) -> Dict:
        return self._request('PUT', f'/cards/{card_id}/group', json={'group_id': group_id})

    def remove_from_group(self, card_id: str) -> Dict:
        return self._request('DELETE', f'/cards/{card_id}/group')

    def edit_group_title(self, group_id: str, title: str) -> Dict:
        return self._request('PUT', f'/groups/{group_id}', json={'title': title})
