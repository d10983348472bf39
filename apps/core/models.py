# apps/core/models.py

import uuid

from django.db import models


def gerar_id():
    """Gera identificador opaco (texto) para qualquer entidade"""
    return str(uuid.uuid4())


def _referencia(model, related_name, **kwargs):
    """
    FK declarada mas não imposta pelo banco

    Sem constraint e sem cascade: excluir o pai deixa os filhos órfãos.
    O comando verificar_integridade lista e limpa esses registros.
    """
    return models.ForeignKey(
        model,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name=related_name,
        **kwargs
    )


class Retrospective(models.Model):
    """
    Sessão de retrospectiva de um time

    Raiz do agregado: cards, ações e grupos referenciam a retrospectiva.
    """

    id = models.CharField(primary_key=True, max_length=64, default=gerar_id)
    name = models.CharField(max_length=200)
    team = models.CharField(max_length=200)
    created_by = models.CharField(max_length=200)
    is_anonymous = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'retrospectives'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.team})"


class CardGroup(models.Model):
    """
    Agrupamento de cards da mesma categoria

    Os membros não ficam numa tabela de junção: cada card aponta para o
    grupo pelo campo group.
    """

    id = models.CharField(primary_key=True, max_length=64, default=gerar_id)
    retro = _referencia(Retrospective, 'groups')
    title = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'retro_card_groups'
        ordering = ['created_at']

    def __str__(self):
        return self.title

    def categorias_membros(self):
        """Categorias distintas dos cards que apontam para o grupo"""
        return set(
            Card.objects.filter(group_id=self.id).values_list('category', flat=True)
        )


class Card(models.Model):
    """Card de feedback em uma das três categorias fixas"""

    CATEGORIA_CHOICES = [
        ('hot', '🔥 Hot Moments'),
        ('disappointment', '😞 Disappointments'),
        ('fantasy', '✨ Team Fantasy'),
    ]
    CATEGORIAS = [valor for valor, _ in CATEGORIA_CHOICES]

    id = models.CharField(primary_key=True, max_length=64, default=gerar_id)
    retro = _referencia(Retrospective, 'cards')
    category = models.CharField(max_length=20, choices=CATEGORIA_CHOICES, db_column='type')
    author = models.CharField(max_length=200)
    content = models.TextField()
    group = _referencia(CardGroup, 'cards', null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'retro_cards'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['retro', 'created_at']),
        ]

    def __str__(self):
        return f"{self.get_category_display()} - {self.content[:40]}"

    @classmethod
    def categoria_valida(cls, categoria):
        return categoria in cls.CATEGORIAS


class Vote(models.Model):
    """
    Voto de um usuário em um card

    A unicidade (card, usuário) é garantida apenas pela aplicação.
    """

    id = models.CharField(primary_key=True, max_length=64, default=gerar_id)
    card = _referencia(Card, 'votes')
    user_id = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'retro_card_votes'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['card', 'user_id']),
        ]

    def __str__(self):
        return f"{self.user_id} → {self.card_id}"


class Comment(models.Model):
    """Comentário em um card"""

    id = models.CharField(primary_key=True, max_length=64, default=gerar_id)
    card = _referencia(Card, 'comments')
    author = models.CharField(max_length=200)
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'retro_comments'
        ordering = ['created_at']

    def __str__(self):
        return f"Comentário de {self.author} em {self.created_at:%d/%m/%Y}"


class ActionItem(models.Model):
    """
    Ação de acompanhamento da retrospectiva

    Quando vinculada a um card guarda uma cópia (snapshot) do conteúdo e da
    categoria do card no momento da criação. Edições posteriores do card não
    alteram essa cópia.
    """

    id = models.CharField(primary_key=True, max_length=64, default=gerar_id)
    retro = _referencia(Retrospective, 'actions')
    text = models.TextField()
    assignee = models.CharField(max_length=200, null=True, blank=True)
    completed = models.BooleanField(default=False)
    linked_card_id = models.CharField(max_length=64, null=True, blank=True)
    linked_card_content = models.TextField(null=True, blank=True)
    linked_card_type = models.CharField(max_length=20, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'retro_actions'
        ordering = ['created_at']

    def __str__(self):
        status = '✅' if self.completed else '⏳'
        return f"{status} {self.text[:40]}"

    @property
    def tem_snapshot(self):
        return self.linked_card_content is not None

    def capturar_card(self, card):
        """Copia conteúdo e categoria do card (snapshot desnormalizado)"""
        self.linked_card_id = card.id
        self.linked_card_content = card.content
        self.linked_card_type = card.category
