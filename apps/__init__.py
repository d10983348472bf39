# apps/__init__.py

"""
Retro Board - Aplicações Django

Este pacote contém todas as aplicações do sistema:
- core: Models da retrospectiva, serviços, erros e middleware da API
- board: API REST, broadcast de eventos e WebSockets
- client: Cliente Python (HTTP + store local com refetch-on-notify)
"""

__version__ = '0.1.0'
__author__ = 'Equipe Retro Board'
