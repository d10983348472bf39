# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # Retrospectivas
    path('retro', views.criar_retro, name='criar_retro'),
    path('retro/<str:retro_id>', views.retro_detalhe, name='retro'),

    # Cards
    path('retro/<str:retro_id>/cards', views.cards_retro, name='cards'),
    path('cards/<str:card_id>', views.card_detalhe, name='card'),
    path('cards/<str:card_id>/category', views.mudar_categoria_card, name='card_categoria'),

    # Votos
    path('cards/<str:card_id>/vote', views.alternar_voto, name='votar'),

    # Comentários
    path('cards/<str:card_id>/comments', views.adicionar_comentario, name='comentarios'),
    path('comments/<str:comment_id>', views.comentario_detalhe, name='comentario'),

    # Ações
    path('retro/<str:retro_id>/actions', views.acoes_retro, name='acoes'),
    path('actions/<str:action_id>', views.acao_detalhe, name='acao'),
    path('actions/<str:action_id>/toggle', views.alternar_acao, name='alternar_acao'),

    # Grupos
    path('retro/<str:retro_id>/groups', views.grupos_retro, name='grupos'),
    path('groups/<str:group_id>', views.grupo_detalhe, name='grupo'),
    path('cards/<str:card_id>/group', views.grupo_do_card, name='card_grupo'),
]
