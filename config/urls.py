# config/urls.py

from django.contrib import admin
from django.urls import path, include
from django.conf import settings

from apps.core.views import health_check

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # Monitoramento
    path('api/health', health_check, name='health'),

    # API da retrospectiva
    path('api/', include('apps.board.urls')),
]

if settings.DEBUG:
    # Debug Toolbar se disponível
    try:
        import debug_toolbar

        urlpatterns = [
                          path('__debug__/', include(debug_toolbar.urls)),
                      ] + urlpatterns
    except ImportError:
        pass

# Customizar títulos do admin
admin.site.site_header = 'Retro Board Admin'
admin.site.site_title = 'Retro Board'
admin.site.index_title = 'Administração das Retrospectivas'
