# apps/board/routing.py

from django.urls import re_path

from . import consumers

# Rotas WebSocket da aplicação board
websocket_urlpatterns = [
    # Sala de uma retrospectiva específica
    re_path(r'ws/retro/(?P<retro_id>[^/]+)/$', consumers.RetroConsumer.as_asgi()),

    # Conexão sem sala inicial - o cliente envia join_retro
    re_path(r'ws/retro/$', consumers.RetroConsumer.as_asgi()),
]
