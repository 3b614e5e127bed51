import unittest
from datetime import date, datetime
from unittest import mock

import relatorio_financeiro as rf
from tests.test_utils import AppTestCase, TestDataFactory


class PeriodoTest(unittest.TestCase):

    def test_semana_de_domingo_a_sabado(self):
        # 16/10/2026 é uma sexta-feira
        self.assertEqual(rf.periodo('semana', date(2026, 10, 16)), (date(2026, 10, 11), date(2026, 10, 17)))
        # Domingo abre a própria semana
        self.assertEqual(rf.periodo('semana', date(2026, 10, 11)), (date(2026, 10, 11), date(2026, 10, 17)))

    def test_mes_ano_e_hoje(self):
        self.assertEqual(rf.periodo('mes', date(2024, 2, 10)), (date(2024, 2, 1), date(2024, 2, 29)))
        self.assertEqual(rf.periodo('ano', date(2026, 5, 3)), (date(2026, 1, 1), date(2026, 12, 31)))
        self.assertEqual(rf.periodo('hoje', date(2026, 5, 3)), (date(2026, 5, 3), date(2026, 5, 3)))
        self.assertEqual(rf.periodo('qualquer', date(2026, 5, 3)), (date(2026, 5, 3), date(2026, 5, 3)))

    def test_limites_inclusivos(self):
        de, ate = rf.limites(date(2026, 1, 1), date(2026, 1, 31))
        self.assertEqual(de, datetime(2026, 1, 1, 0, 0, 0))
        self.assertEqual(ate, datetime(2026, 1, 31, 23, 59, 59))


class FormatacaoTest(unittest.TestCase):

    def test_formatar_moeda(self):
        self.assertEqual(rf.formatar_moeda(1234.56), 'Kz 1.234,56')
        self.assertEqual(rf.formatar_moeda(0), 'Kz 0,00')
        self.assertEqual(rf.formatar_moeda(None), 'Kz 0,00')
        self.assertEqual(rf.formatar_moeda(1000000), 'Kz 1.000.000,00')

    def test_nome_arquivo(self):
        self.assertEqual(
            rf.nome_arquivo(date(2026, 1, 1), date(2026, 1, 31)),
            'relatorio-financeiro-2026-01-01-a-2026-01-31.pdf',
        )

    def test_truncar(self):
        self.assertEqual(rf.truncar('curto', 10), 'curto')
        self.assertEqual(rf.truncar('a' * 30, 25), 'a' * 22 + '...')

    def test_gerar_pdf_usa_caminho_configurado(self):
        with mock.patch.object(rf.pdfkit, 'configuration') as configuracao, \
                mock.patch.object(rf.pdfkit, 'from_string', return_value=b'%PDF') as from_string:
            self.assertEqual(rf.gerar_pdf('<p>x</p>', '/usr/bin/wkhtmltopdf'), b'%PDF')
        configuracao.assert_called_once_with(wkhtmltopdf='/usr/bin/wkhtmltopdf')
        self.assertEqual(from_string.call_args.kwargs['options']['page-size'], 'A4')


class ResumoVendasTest(AppTestCase):

    def setUp(self):
        super().setUp()
        self.funcionario = TestDataFactory.create_funcionario()
        self.produto = TestDataFactory.create_produto(preco_venda=100.0)

    def venda(self, quando, quantidade, valor_unitario=None, transferencia_id=None):
        return TestDataFactory.create_movimentacao(
            self.produto, self.funcionario, quantidade=quantidade, valor_unitario=valor_unitario,
            transferencia_id=transferencia_id, created_at=quando,
        )

    def test_soma_saidas_no_intervalo_inclusivo(self):
        self.venda(datetime(2026, 3, 1, 0, 0, 0), 2, valor_unitario=50.0)
        self.venda(datetime(2026, 3, 31, 23, 59, 59), 1)  # sem preço gravado: usa o atual
        self.venda(datetime(2026, 2, 28, 23, 59, 59), 5, valor_unitario=50.0)
        self.venda(datetime(2026, 4, 1, 0, 0, 0), 5, valor_unitario=50.0)
        TestDataFactory.create_movimentacao(
            self.produto, self.funcionario, tipo='entrada', quantidade=9, created_at=datetime(2026, 3, 10),
        )

        vendas = rf.consulta_vendas(date(2026, 3, 1), date(2026, 3, 31)).all()
        resumo = rf.calcular_resumo(vendas)
        self.assertEqual(resumo, {'total_vendas': 200.0, 'total_quantidade': 3, 'total_transacoes': 2})

    def test_saida_de_transferencia_conta_por_padrao(self):
        self.venda(datetime(2026, 3, 5, 12, 0), 4, transferencia_id='3f2b8c1e-9d4a-4b6f-a1c2-7e8d9f0a1b2c')
        self.venda(datetime(2026, 3, 6, 12, 0), 1, valor_unitario=100.0)

        vendas = rf.consulta_vendas(date(2026, 3, 1), date(2026, 3, 31)).all()
        self.assertEqual(rf.calcular_resumo(vendas)['total_vendas'], 500.0)
        self.assertEqual([linha['tipo'] for linha in rf.linhas_relatorio(vendas)], ['Venda', 'Transferência'])

        avulsas = rf.consulta_vendas(date(2026, 3, 1), date(2026, 3, 31), excluir_transferencias=True).all()
        self.assertEqual(len(avulsas), 1)
        self.assertEqual(rf.calcular_resumo(avulsas)['total_vendas'], 100.0)

    def test_linhas_mais_recentes_primeiro(self):
        self.venda(datetime(2026, 3, 1, 9, 0), 1, valor_unitario=10.0)
        self.venda(datetime(2026, 3, 2, 9, 0), 3, valor_unitario=10.0)
        linhas = rf.linhas_relatorio(rf.consulta_vendas(date(2026, 3, 1), date(2026, 3, 2)).all())
        self.assertEqual([linha['quantidade'] for linha in linhas], [3, 1])
        self.assertEqual(linhas[0]['valor_total'], 30.0)
        self.assertEqual(linhas[0]['data'], '02/03/2026 09:00')
        self.assertEqual(linhas[0]['tipo'], 'Venda')
