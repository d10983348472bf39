# apps/core/middleware.py

import logging

from django.conf import settings
from django.http import Http404, JsonResponse

from .exceptions import RetroError

logger = logging.getLogger(__name__)


class RetroApiMiddleware:
    """
    Middleware da API JSON

    - Identifica o participante da requisição (header X-Retro-User ou
      parâmetro user_id) e o injeta em request.participante
    - Converte qualquer exceção das views /api/ no formato único
      {"success": false, "error": "..."}
    - Reescreve no mesmo formato os erros HTML do próprio Django (405, 404)
    - Desliga cache HTTP das respostas da API: o refetch após um evento
      precisa sempre chegar ao servidor
    """

    API_PREFIX = '/api/'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        participante = request.headers.get('X-Retro-User') or request.GET.get('user_id') or ''
        request.participante = participante.strip() or None

        response = self.get_response(request)

        if self._is_api(request):
            response = self._como_json(request, response)
            response['Cache-Control'] = 'no-store'

        return response

    def _is_api(self, request):
        return request.path.startswith(self.API_PREFIX)

    def _como_json(self, request, response):
        """
        Respostas de erro geradas pelo Django (405 dos decorators, 404 de
        rota inexistente) saem em HTML; converte para o formato da API
        """
        if response.status_code < 400 or response.get('Content-Type', '').startswith('application/json'):
            return response

        if response.status_code == 405:
            mensagem = f"Método não permitido: {request.method}"
        elif response.status_code == 404:
            mensagem = 'Endpoint não encontrado'
        else:
            mensagem = response.reason_phrase

        convertida = JsonResponse({'success': False, 'error': mensagem}, status=response.status_code)
        if response.has_header('Allow'):
            convertida['Allow'] = response['Allow']
        return convertida

    def process_exception(self, request, exception):
        """
        Achata validação, not-found e erros de backend no mesmo formato
        """
        if not self._is_api(request):
            return None  # Deixar o Django tratar normalmente

        if isinstance(exception, RetroError):
            status = exception.status_code
            mensagem = exception.mensagem
            if status >= 500:
                logger.error(f"❌ Erro na API {request.method} {request.path}: {mensagem}")
            else:
                logger.warning(f"⚠️  {request.method} {request.path} -> {status}: {mensagem}")

        elif isinstance(exception, Http404):
            status = 404
            mensagem = str(exception) or 'Registro não encontrado'

        else:
            status = 500
            logger.exception(f"❌ Erro inesperado na API {request.method} {request.path}")
            # Em produção, mensagem genérica por segurança
            mensagem = str(exception) if settings.DEBUG else 'Erro interno do sistema. Tente novamente.'

        return JsonResponse({'success': False, 'error': mensagem}, status=status)
