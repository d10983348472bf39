#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Retro Board - Retrospectivas colaborativas em tempo real
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Configuração padrão para desenvolvimento
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # Comandos customizados do Retro Board
    if len(sys.argv) > 1:
        command = sys.argv[1]

        # Comando de setup inicial
        if command == 'setup':
            print("🚀 Configurando Retro Board...")

            # Os apps não têm migrações: as tabelas saem direto dos models
            print("📊 Criando tabelas...")
            if os.system('python manage.py migrate --run-syncdb') != 0:
                print("❌ Erro ao criar as tabelas")
                return

            print("🔍 Verificando integridade...")
            os.system('python manage.py verificar_integridade')

            print("✅ Setup concluído!")
            return

        # Comando de configuração do banco
        elif command == 'setup-db':
            print("🐘 Configurando PostgreSQL...")

            # Comandos SQL para executar
            commands = [
                "CREATE USER retro_user WITH PASSWORD 'retro123';",
                "CREATE DATABASE retro_board OWNER retro_user;",
                "GRANT ALL PRIVILEGES ON DATABASE retro_board TO retro_user;",
                "GRANT CREATE ON SCHEMA public TO retro_user;",
            ]

            for cmd in commands:
                print(f"Executando: {cmd}")
                exit_code = os.system(f'psql -U postgres -h localhost -c "{cmd}"')
                if exit_code != 0:
                    print("⚠️  Comando pode ter falhado (normal se já existir)")

            # Testar conexão
            print("🧪 Testando conexão...")
            test_result = os.system('psql -U retro_user -h localhost -d retro_board -c "SELECT version();"')

            if test_result == 0:
                print("✅ PostgreSQL configurado com sucesso!")
                print("📊 Execute agora: python manage.py setup")
            else:
                print("❌ Erro na configuração. Verifique:")
                print("   1. PostgreSQL está instalado?")
                print("   2. Serviço postgresql está rodando?")
                print("   3. psql está no PATH?")
            return

        elif command == 'backup':
            print("💾 Criando backup das retrospectivas...")
            from datetime import datetime
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            backup_file = f"backup_retro_{timestamp}.json"
            os.system(f'python manage.py dumpdata core --indent 2 > {backup_file}')
            print(f"✅ Backup criado: {backup_file}")
            return

        # Comando de reset
        elif command == 'reset':
            confirm = input("⚠️  Isso irá apagar TODAS as retrospectivas. Continuar? (y/N): ")
            if confirm.lower() == 'y':
                print("🗑️  Resetando banco de dados...")
                os.system('python manage.py flush --noinput')
                os.system('python manage.py migrate --run-syncdb')
                print("✅ Reset concluído!")
            return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
