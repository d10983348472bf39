# apps/core/admin.py

from django.contrib import admin
from django.utils.html import format_html

from .models import ActionItem, Card, CardGroup, Comment, Retrospective, Vote


@admin.register(Retrospective)
class RetrospectiveAdmin(admin.ModelAdmin):
    """Admin para retrospectivas"""

    list_display = [
        'name', 'team', 'created_by', 'is_anonymous',
        'cards_count', 'acoes_count', 'created_at'
    ]
    list_filter = ['is_anonymous', 'created_at', 'team']
    search_fields = ['id', 'name', 'team', 'created_by']
    readonly_fields = ['created_at']

    def cards_count(self, obj):
        """Conta cards da retrospectiva"""
        return Card.objects.filter(retro_id=obj.id).count()

    cards_count.short_description = 'Cards'

    def acoes_count(self, obj):
        """Conta ações (concluídas/total)"""
        acoes = ActionItem.objects.filter(retro_id=obj.id)
        return f"{acoes.filter(completed=True).count()}/{acoes.count()}"

    acoes_count.short_description = 'Ações'


class CommentInline(admin.TabularInline):
    """Inline para comentários (apenas leitura)"""
    model = Comment
    extra = 0
    fields = ['author', 'content', 'created_at']
    readonly_fields = ['created_at']

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Card)
class CardAdmin(admin.ModelAdmin):
    """Admin para cards"""

    list_display = ['content_resumo', 'categoria_badge', 'author', 'retro_id', 'group_id', 'votos', 'created_at']
    list_filter = ['category', 'created_at']
    search_fields = ['content', 'author', 'retro__name']
    readonly_fields = ['created_at']
    inlines = [CommentInline]

    def content_resumo(self, obj):
        return obj.content[:60]

    content_resumo.short_description = 'Conteúdo'

    def categoria_badge(self, obj):
        """Exibe a categoria com badge colorido"""
        cores = {
            'hot': '#EF4444',  # vermelho
            'disappointment': '#6B7280',  # cinza
            'fantasy': '#8B5CF6',  # roxo
        }
        cor = cores.get(obj.category, '#6B7280')
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
            cor, obj.get_category_display()
        )

    categoria_badge.short_description = 'Categoria'

    def votos(self, obj):
        return Vote.objects.filter(card_id=obj.id).count()

    votos.short_description = 'Votos'


@admin.register(CardGroup)
class CardGroupAdmin(admin.ModelAdmin):
    list_display = ['title', 'retro_id', 'membros', 'created_at']
    search_fields = ['title']

    def membros(self, obj):
        return Card.objects.filter(group_id=obj.id).count()


@admin.register(Vote)
class VoteAdmin(admin.ModelAdmin):
    list_display = ['user_id', 'card_id', 'created_at']
    search_fields = ['user_id', 'card__content']


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ['author', 'card_id', 'created_at']
    search_fields = ['author', 'content']


@admin.register(ActionItem)
class ActionItemAdmin(admin.ModelAdmin):
    """Admin para ações; o snapshot do card é somente leitura"""

    list_display = ['text', 'assignee', 'completed', 'linked_card_type', 'retro_id', 'created_at']
    list_filter = ['completed', 'linked_card_type', 'created_at']
    search_fields = ['text', 'assignee', 'linked_card_content']
    readonly_fields = ['linked_card_content', 'linked_card_type', 'created_at']
    actions = ['marcar_concluidas']

    @admin.action(description='Marcar como concluídas')
    def marcar_concluidas(self, request, queryset):
        atualizadas = queryset.update(completed=True)
        self.message_user(request, f'{atualizadas} ações concluídas.')
