# apps/core/exceptions.py

"""
Taxonomia de erros da API

Todas as classes viram o mesmo formato JSON na borda (ver middleware):
{"success": false, "error": "<mensagem>"} com o status HTTP da classe.
"""


class RetroError(Exception):
    """Erro base da aplicação (falha genérica de backend)"""

    status_code = 500
    mensagem_padrao = 'Erro interno do sistema'

    def __init__(self, mensagem=None):
        self.mensagem = mensagem or self.mensagem_padrao
        super().__init__(self.mensagem)


class DadosInvalidos(RetroError):
    """Campo obrigatório ausente ou valor fora do domínio"""

    status_code = 400
    mensagem_padrao = 'Dados inválidos'


class NaoEncontrado(RetroError):
    """Busca por identificador não retornou nada"""

    status_code = 404
    mensagem_padrao = 'Registro não encontrado'
