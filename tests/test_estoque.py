from unittest import mock

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import estoque
from estoque import MovimentacaoInvalida, MovimentacaoErro
from models import db, Produto, Movimentacao
from tests.test_utils import AppTestCase, TestDataFactory


class EstoqueTestCase(AppTestCase):

    def setUp(self):
        super().setUp()
        self.funcionario = TestDataFactory.create_funcionario()
        self.produto = TestDataFactory.create_produto(
            codigo='CAN01', preco_venda=250.0, estoque_loja=10, estoque_armazem=4
        )

    def recarregar(self):
        return db.session.get(Produto, self.produto.id, populate_existing=True)


class EntradaSaidaTest(EstoqueTestCase):

    def test_entrada_soma_exatamente_a_quantidade(self):
        mov = estoque.registrar_entrada(self.produto.id, 'armazem', 6, self.funcionario.id, motivo='Compra')
        produto = self.recarregar()
        self.assertEqual(produto.estoque_armazem, 10)
        self.assertEqual(produto.estoque_loja, 10)
        self.assertEqual(mov.tipo, 'entrada')
        self.assertEqual(mov.quantidade, 6)
        self.assertIsNone(mov.valor_unitario)

    def test_saida_debita_e_grava_preco(self):
        mov = estoque.registrar_saida(self.produto.id, 'loja', 3, self.funcionario.id)
        self.assertEqual(self.recarregar().estoque_loja, 7)
        self.assertEqual(mov.valor_unitario, 250.0)

    def test_saida_maior_que_estoque_zera(self):
        with self.assertLogs('estoque', level='WARNING'):
            estoque.registrar_saida(self.produto.id, 'armazem', 9, self.funcionario.id)
        self.assertEqual(self.recarregar().estoque_armazem, 0)

    def test_quantidade_invalida_nao_grava(self):
        for quantidade in (0, -2, 1.5, True, '3'):
            with self.assertRaises(MovimentacaoInvalida):
                estoque.registrar_entrada(self.produto.id, 'loja', quantidade, self.funcionario.id)
        self.assertEqual(Movimentacao.query.count(), 0)

    def test_local_invalido(self):
        with self.assertRaises(MovimentacaoInvalida):
            estoque.registrar_saida(self.produto.id, 'deposito', 1, self.funcionario.id)

    def test_produto_inativo(self):
        self.produto.ativo = False
        db.session.commit()
        with self.assertRaises(MovimentacaoInvalida):
            estoque.registrar_entrada(self.produto.id, 'loja', 1, self.funcionario.id)
        self.assertEqual(Movimentacao.query.count(), 0)

    def test_tipo_desconhecido(self):
        with self.assertRaises(MovimentacaoInvalida):
            estoque.registrar_movimentacao('ajuste', self.produto.id, 'loja', 1, self.funcionario.id)


class TransferenciaTest(EstoqueTestCase):

    def test_estado_final_e_dois_registros(self):
        saida, entrada = estoque.transferir(self.produto.id, 'loja', 4, self.funcionario.id)
        produto = self.recarregar()
        self.assertEqual((produto.estoque_loja, produto.estoque_armazem), (6, 8))

        movs = Movimentacao.query.filter_by(produto_id=self.produto.id).all()
        self.assertEqual(len(movs), 2)
        self.assertEqual((saida.tipo, saida.local), ('saida', 'loja'))
        self.assertEqual((entrada.tipo, entrada.local), ('entrada', 'armazem'))
        self.assertEqual(saida.quantidade, 4)
        self.assertEqual(entrada.quantidade, 4)
        self.assertIsNotNone(saida.transferencia_id)
        self.assertEqual(saida.transferencia_id, entrada.transferencia_id)
        self.assertEqual(saida.motivo, estoque.MOTIVO_TRANSFERENCIA)

    def test_origem_insuficiente_zera_origem_e_credita_destino(self):
        estoque.transferir(self.produto.id, 'armazem', 7, self.funcionario.id)
        produto = self.recarregar()
        self.assertEqual((produto.estoque_armazem, produto.estoque_loja), (0, 17))

    def test_despacho_do_formulario(self):
        resultado = estoque.registrar_movimentacao('transferencia', self.produto.id, 'armazem', 2, self.funcionario.id)
        self.assertEqual(len(resultado), 2)
        self.assertEqual(estoque.local_destino('armazem'), 'loja')
        self.assertEqual(estoque.local_destino('loja'), 'armazem')

    def test_falha_no_commit_desfaz_tudo(self):
        with mock.patch.object(Session, 'commit', side_effect=SQLAlchemyError('falha simulada')):
            with self.assertRaises(MovimentacaoErro):
                estoque.transferir(self.produto.id, 'loja', 4, self.funcionario.id)
        produto = self.recarregar()
        self.assertEqual((produto.estoque_loja, produto.estoque_armazem), (10, 4))
        self.assertEqual(Movimentacao.query.count(), 0)
