# apps/core/management/commands/verificar_integridade.py

from django.core.management.base import BaseCommand, CommandError
from django.db import connection
from django.db.models import Count

from apps.core.models import ActionItem, Card, CardGroup, Comment, Retrospective, Vote


class Command(BaseCommand):
    help = 'Verifica integridade do banco da retrospectiva (órfãos e votos duplicados)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--corrigir',
            action='store_true',
            help='Remove órfãos, limpa referências de grupo e colapsa votos duplicados'
        )

    def handle(self, *args, **options):
        """
        Exclusões não fazem cascade, então órfãos são esperados com o tempo;
        este comando apenas os reporta ou, com --corrigir, os remove
        """
        corrigir = options['corrigir']

        self.stdout.write('🔍 Executando verificação de integridade...')

        # Teste 1: Conectividade básica
        self._testar_conectividade_banco()

        # Teste 2: Tabelas dos models
        self._verificar_estrutura_tabelas()

        # Teste 3: Órfãos e duplicados
        problemas = self._levantar_problemas()

        total = sum(len(ids) for ids in problemas.values())
        for descricao, ids in problemas.items():
            marcador = '⚠️ ' if ids else '✅'
            self.stdout.write(f'    {marcador} {descricao}: {len(ids)}')

        if not total:
            self.stdout.write(self.style.SUCCESS('\n✅ Nenhum problema de integridade encontrado'))
            return

        if not corrigir:
            self.stdout.write(
                self.style.WARNING(
                    f'\n⚠️  {total} registros com problema. '
                    'Execute com --corrigir para limpar.'
                )
            )
            return

        self._corrigir(problemas)
        self.stdout.write(self.style.SUCCESS(f'\n✅ {total} registros corrigidos'))

    def _testar_conectividade_banco(self):
        """Testa conectividade básica"""
        self.stdout.write('  🔗 Testando conectividade do banco...')

        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            result = cursor.fetchone()

        if result[0] != 1:
            raise CommandError("Banco não está respondendo corretamente")

    def _verificar_estrutura_tabelas(self):
        """
        Confere se a tabela de cada model existe

        Usa a introspecção do Django, que funciona em PostgreSQL e SQLite.
        """
        self.stdout.write('  🏗️  Verificando estrutura das tabelas...')

        existentes = set(connection.introspection.table_names())
        faltando = []

        for model in (Retrospective, Card, Vote, Comment, ActionItem, CardGroup):
            tabela = model._meta.db_table
            if tabela in existentes:
                self.stdout.write(f'    ✅ Tabela encontrada: {tabela} ({model.__name__})')
            else:
                faltando.append(tabela)

        if faltando:
            raise CommandError(
                f"Tabelas ausentes: {', '.join(faltando)}. "
                "Execute: python manage.py migrate --run-syncdb"
            )

    def _levantar_problemas(self):
        self.stdout.write('  🧹 Procurando registros órfãos...')

        retros = Retrospective.objects.values('id')
        cards = Card.objects.values('id')
        grupos = CardGroup.objects.values('id')

        return {
            'Cards sem retrospectiva': list(
                Card.objects.exclude(retro_id__in=retros).values_list('id', flat=True)
            ),
            'Votos sem card': list(
                Vote.objects.exclude(card_id__in=cards).values_list('id', flat=True)
            ),
            'Comentários sem card': list(
                Comment.objects.exclude(card_id__in=cards).values_list('id', flat=True)
            ),
            'Ações sem retrospectiva': list(
                ActionItem.objects.exclude(retro_id__in=retros).values_list('id', flat=True)
            ),
            'Grupos sem retrospectiva': list(
                CardGroup.objects.exclude(retro_id__in=retros).values_list('id', flat=True)
            ),
            'Cards com grupo inexistente': list(
                Card.objects.filter(group_id__isnull=False)
                .exclude(group_id__in=grupos)
                .values_list('id', flat=True)
            ),
            'Votos duplicados': self._votos_duplicados(),
        }

    def _votos_duplicados(self):
        """IDs dos votos excedentes (mantém o mais antigo de cada par card/usuário)"""
        repetidos = (
            Vote.objects.values('card_id', 'user_id')
            .annotate(total=Count('id'))
            .filter(total__gt=1)
        )

        excedentes = []
        for par in repetidos:
            votos = list(
                Vote.objects.filter(card_id=par['card_id'], user_id=par['user_id'])
                .order_by('created_at', 'id')
                .values_list('id', flat=True)
            )
            excedentes.extend(votos[1:])
        return excedentes

    def _corrigir(self, problemas):
        self.stdout.write('  🔧 Corrigindo...')

        # Referências de grupo são limpas; o card continua existindo
        Card.objects.filter(id__in=problemas['Cards com grupo inexistente']).update(group=None)

        Vote.objects.filter(id__in=problemas['Votos sem card'] + problemas['Votos duplicados']).delete()
        Comment.objects.filter(id__in=problemas['Comentários sem card']).delete()
        ActionItem.objects.filter(id__in=problemas['Ações sem retrospectiva']).delete()
        CardGroup.objects.filter(id__in=problemas['Grupos sem retrospectiva']).delete()
        Card.objects.filter(id__in=problemas['Cards sem retrospectiva']).delete()
