import calendar
from datetime import date, datetime, time, timedelta

import pdfkit

from models import Movimentacao

PERIODOS = ('hoje', 'semana', 'mes', 'ano')
MAX_NOME_PRODUTO = 25
MAX_NOME_RESPONSAVEL = 20

OPCOES_PDF = {
    'encoding': 'UTF-8',
    'page-size': 'A4',
    'margin-top': '10mm',
    'margin-bottom': '15mm',
    'margin-left': '10mm',
    'margin-right': '10mm',
    'footer-center': 'Página [page] de [topage] - CPB Stock',
    'footer-font-size': '7',
    'no-outline': None,
    'print-media-type': None,
}


# Função para calcular o intervalo de datas de um período pré-definido
# Parâmetros:
#   nome: 'hoje', 'semana', 'mes' ou 'ano' (qualquer outro valor vale 'hoje')
#   hoje: data de referência (padrão: data atual)
# Retorna: tupla (inicio, fim) de objetos date

def periodo(nome, hoje=None):
    """Semana vai de domingo a sábado, como no calendário local."""
    hoje = hoje or date.today()
    if nome == 'semana':
        inicio = hoje - timedelta(days=(hoje.weekday() + 1) % 7)
        return inicio, inicio + timedelta(days=6)
    if nome == 'mes':
        ultimo_dia = calendar.monthrange(hoje.year, hoje.month)[1]
        return hoje.replace(day=1), hoje.replace(day=ultimo_dia)
    if nome == 'ano':
        return date(hoje.year, 1, 1), date(hoje.year, 12, 31)
    return hoje, hoje


def limites(inicio, fim):
    """Converte as datas em [inicio 00:00:00, fim 23:59:59], inclusivo nas duas pontas."""
    return datetime.combine(inicio, time.min), datetime.combine(fim, time(23, 59, 59))


def consulta_vendas(inicio, fim, excluir_transferencias=False):
    """Saídas do período, mais recentes primeiro.

    Por padrão a saída de uma transferência entra no relatório como qualquer
    outra saída; excluir_transferencias=True deixa só as vendas avulsas.
    """
    de, ate = limites(inicio, fim)
    query = Movimentacao.query.filter(
        Movimentacao.tipo == 'saida',
        Movimentacao.created_at >= de,
        Movimentacao.created_at <= ate,
    )
    if excluir_transferencias:
        query = query.filter(Movimentacao.transferencia_id.is_(None))
    return query.order_by(Movimentacao.created_at.desc())


def valor_unitario(mov):
    """Preço gravado na saída; sem ele, o preço de venda atual do produto."""
    if mov.valor_unitario is not None:
        return mov.valor_unitario
    if mov.produto is not None and mov.produto.preco_venda is not None:
        return mov.produto.preco_venda
    return 0.0


def calcular_resumo(movimentacoes):
    total_vendas = 0.0
    total_quantidade = 0
    total_transacoes = 0
    for mov in movimentacoes:
        total_vendas += valor_unitario(mov) * mov.quantidade
        total_quantidade += mov.quantidade
        total_transacoes += 1
    return {
        'total_vendas': total_vendas,
        'total_quantidade': total_quantidade,
        'total_transacoes': total_transacoes,
    }


def truncar(texto, limite):
    texto = texto or ''
    return texto if len(texto) <= limite else texto[:limite - 3] + '...'


def linhas_relatorio(movimentacoes):
    """Linhas da tabela de detalhamento (tela e PDF)."""
    linhas = []
    for mov in movimentacoes:
        unitario = valor_unitario(mov)
        linhas.append({
            'id': mov.id,
            'data': formatar_data(mov.created_at),
            'produto_codigo': mov.produto.codigo if mov.produto else 'N/A',
            'produto': truncar(mov.produto.nome if mov.produto else 'Produto não encontrado', MAX_NOME_PRODUTO),
            'tipo': 'Transferência' if mov.transferencia_id else 'Venda',
            'responsavel': truncar(mov.funcionario.nome if mov.funcionario else 'N/A', MAX_NOME_RESPONSAVEL),
            'quantidade': mov.quantidade,
            'valor_unitario': unitario,
            'valor_total': unitario * mov.quantidade,
        })
    return linhas


def formatar_moeda(valor):
    """Formata em kwanza no padrão brasileiro de separadores: Kz 1.234,56"""
    texto = f'{valor or 0:,.2f}'
    return 'Kz ' + texto.replace(',', '_').replace('.', ',').replace('_', '.')


def formatar_data(valor):
    return valor.strftime('%d/%m/%Y %H:%M') if valor else ''


def nome_arquivo(inicio, fim):
    return f'relatorio-financeiro-{inicio.isoformat()}-a-{fim.isoformat()}.pdf'


def gerar_pdf(html, wkhtmltopdf=None):
    """Converte o HTML do relatório em PDF (bytes) usando wkhtmltopdf.

    Sem caminho explícito, o pdfkit procura o executável no PATH e levanta
    OSError se não encontrar.
    """
    config = pdfkit.configuration(wkhtmltopdf=wkhtmltopdf) if wkhtmltopdf else None
    return pdfkit.from_string(html, False, configuration=config, options=OPCOES_PDF)
