"""
Script simples para criar o primeiro supervisor do sistema
Uso: python create_admin.py
Telefone e senha vêm de ADMIN_TELEFONE / ADMIN_SENHA (ver config.py)
"""

import os
import sys

# Adiciona o diretório atual ao path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))


def criar_supervisor(app, db, nome='Administrador'):
    """Cria o supervisor inicial se ainda não existir; retorna (funcionario, criado).

    Deve ser chamada dentro de um contexto da aplicação: o funcionário
    retornado pertence à sessão desse contexto.
    """
    from models import Funcionario

    telefone = app.config['ADMIN_TELEFONE']
    db.create_all()
    admin = Funcionario.query.filter_by(telefone=telefone).first()
    if admin:
        return admin, False

    admin = Funcionario(nome=nome, telefone=telefone, tipo='supervisor', ativo=True)
    admin.set_password(app.config['ADMIN_SENHA'])
    db.session.add(admin)
    db.session.commit()
    app.logger.info('Supervisor inicial criado (telefone %s)', telefone)
    return admin, True


def main():
    try:
        from app import app, db
    except ImportError as e:
        print(f"❌ Erro de importação: {e}")
        print("Certifique-se de que todas as dependências estão instaladas")
        sys.exit(1)

    print("🚀 Criando supervisor do sistema...")
    with app.app_context():
        admin, criado = criar_supervisor(app, db)
        if not criado:
            print("ℹ️  Supervisor já existe")
            print(f"   Telefone: {admin.telefone}")
            print(f"   Nome: {admin.nome}")
            return

        print("✅ Supervisor criado com sucesso!")
        print(f"   📞 Telefone: {admin.telefone}")
        print("   🔑 Senha: a definida em ADMIN_SENHA")
        print("\n⚠️  IMPORTANTE: Altere a senha após o primeiro login!")


if __name__ == '__main__':
    main()
