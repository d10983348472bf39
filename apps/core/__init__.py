# apps/core/__init__.py

"""
Core - Aplicação principal do Retro Board

Contém:
- Models da retrospectiva (Retrospective, Card, Vote, Comment, ActionItem, CardGroup)
- Serviço encapsulado com as regras de negócio (votos, agrupamento, snapshots)
- Taxonomia de erros e middleware que achata erros em JSON
- Comando de verificação de integridade referencial
"""
