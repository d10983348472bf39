# apps/board/__init__.py

"""
Board - API e tempo real do Retro Board

Funcionalidades:
- Endpoints JSON para retrospectivas, cards, votos, comentários, ações e grupos
- Broadcast fire-and-forget de eventos por retrospectiva
- WebSockets (Channels) para entregar os eventos aos participantes
"""
