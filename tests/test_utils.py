"""
Utilitários de teste: fábrica de dados e caso base com banco em memória
"""
import random
import string
import unittest

from flask import g, url_for
from flask.testing import FlaskClient

from app import app
from models import db, Funcionario, Categoria, Prateleira, Produto, Movimentacao

SENHA_PADRAO = 'senha123'


class TestDataFactory:
    """Cria registros de teste já gravados no banco"""
    __test__ = False

    @staticmethod
    def random_string(length=6):
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def random_telefone():
        return '9' + ''.join(random.choices(string.digits, k=8))

    @staticmethod
    def create_funcionario(nome=None, telefone=None, senha=SENHA_PADRAO, tipo='funcionario', ativo=True):
        funcionario = Funcionario(
            nome=nome or f'Funcionario {TestDataFactory.random_string()}',
            telefone=telefone or TestDataFactory.random_telefone(),
            tipo=tipo,
            ativo=ativo,
        )
        funcionario.set_password(senha)
        db.session.add(funcionario)
        db.session.commit()
        return funcionario

    @staticmethod
    def create_supervisor(**kwargs):
        kwargs.setdefault('tipo', 'supervisor')
        return TestDataFactory.create_funcionario(**kwargs)

    @staticmethod
    def create_categoria(nome=None, ativo=True):
        categoria = Categoria(nome=nome or f'Categoria {TestDataFactory.random_string()}', ativo=ativo)
        db.session.add(categoria)
        db.session.commit()
        return categoria

    @staticmethod
    def create_prateleira(numero=None, ativo=True):
        prateleira = Prateleira(numero=numero or TestDataFactory.random_string(4).upper(), ativo=ativo)
        db.session.add(prateleira)
        db.session.commit()
        return prateleira

    @staticmethod
    def create_produto(codigo=None, nome=None, categoria=None, prateleira=None, preco_venda=10.0,
                       estoque_loja=0, estoque_armazem=0, estoque_minimo=0, ativo=True):
        if codigo is None:
            codigo = ''.join(random.choices(string.ascii_uppercase, k=3)) + ''.join(random.choices(string.digits, k=2))
        produto = Produto(
            codigo=codigo,
            nome=nome or f'Produto {codigo}',
            categoria=categoria or TestDataFactory.create_categoria(),
            prateleira=prateleira,
            preco_venda=preco_venda,
            estoque_loja=estoque_loja,
            estoque_armazem=estoque_armazem,
            estoque_minimo=estoque_minimo,
            ativo=ativo,
        )
        db.session.add(produto)
        db.session.commit()
        return produto

    @staticmethod
    def create_movimentacao(produto, funcionario, tipo='saida', local='loja', quantidade=1,
                            valor_unitario=None, transferencia_id=None, created_at=None):
        mov = Movimentacao(
            produto=produto,
            funcionario=funcionario,
            tipo=tipo,
            local=local,
            quantidade=quantidade,
            valor_unitario=valor_unitario,
            transferencia_id=transferencia_id,
        )
        if created_at is not None:
            mov.created_at = created_at
        db.session.add(mov)
        db.session.commit()
        return mov


class ClienteTeste(FlaskClient):
    """As requisições reaproveitam o contexto da aplicação aberto no setUp;
    o usuário carregado pelo Flask-Login em g precisa ser descartado a cada uma."""

    def open(self, *args, **kwargs):
        g.pop('_login_user', None)
        return super().open(*args, **kwargs)


class AppTestCase(unittest.TestCase):
    """Caso base: contexto da aplicação e tabelas recriadas a cada teste"""

    def setUp(self):
        self.app = app
        self.ctx = app.app_context()
        self.ctx.push()
        db.create_all()
        app.test_client_class = ClienteTeste
        self.client = app.test_client()

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.ctx.pop()

    def login(self, funcionario, senha=SENHA_PADRAO):
        return self.client.post('/login', data={'telefone': funcionario.telefone, 'senha': senha})

    def url(self, endpoint, **values):
        with self.app.test_request_context():
            return url_for(endpoint, **values)
