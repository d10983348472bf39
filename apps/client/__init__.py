"""
Cliente Python do Retro Board

- RetroApiClient: chamadas HTTP à API JSON
- RetroStore: estado local com refetch a cada evento do WebSocket
- MutationResult: resultado ok/failure das mutações
"""

from .api import RetroApiClient, RetroApiError
from .results import MutationResult
from .store import AUTOR_ANONIMO, RetroStore, SessionContext

__all__ = [
    'AUTOR_ANONIMO',
    'MutationResult',
    'RetroApiClient',
    'RetroApiError',
    'RetroStore',
    'SessionContext',
]
