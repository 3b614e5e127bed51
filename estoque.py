"""Operações de estoque: entradas, saídas e transferências entre loja e armazém.

Cada operação grava as movimentações e atualiza os contadores do produto na
mesma transação do banco. Se qualquer passo falhar, nada é persistido e o
chamador recebe uma única exceção.
"""
import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError

from models import db, Produto, Movimentacao
from models.movimentacao import LOCAIS

logger = logging.getLogger(__name__)

MOTIVO_TRANSFERENCIA = 'Transferência entre locais'
TIPOS_FORMULARIO = ('entrada', 'saida', 'transferencia')


class MovimentacaoInvalida(ValueError):
    """Dados da movimentação rejeitados antes de qualquer gravação."""


class MovimentacaoErro(Exception):
    """Falha ao gravar a movimentação; a transação foi desfeita."""


def campo_estoque(local):
    """Nome da coluna de estoque do produto para o local informado."""
    if local == 'loja':
        return 'estoque_loja'
    if local == 'armazem':
        return 'estoque_armazem'
    raise MovimentacaoInvalida(f'Local inválido: {local!r}')


def local_destino(origem):
    """Numa transferência o destino é sempre o outro local."""
    campo_estoque(origem)
    return 'armazem' if origem == 'loja' else 'loja'


def _validar_quantidade(quantidade):
    # bool é subclasse de int
    if isinstance(quantidade, bool) or not isinstance(quantidade, int) or quantidade <= 0:
        raise MovimentacaoInvalida('A quantidade deve ser um número inteiro positivo.')


def _carregar_produto(produto_id):
    # Relê o produto dentro da transação (FOR UPDATE onde o banco suporta)
    produto = db.session.get(Produto, produto_id, with_for_update=True, populate_existing=True)
    if produto is None or not produto.ativo:
        raise MovimentacaoInvalida('Produto não encontrado ou inativo.')
    return produto


def _creditar(produto, local, quantidade):
    campo = campo_estoque(local)
    setattr(produto, campo, (getattr(produto, campo) or 0) + quantidade)


def _debitar(produto, local, quantidade):
    campo = campo_estoque(local)
    atual = getattr(produto, campo) or 0
    if quantidade > atual:
        logger.warning(
            'Saída de %s unidade(s) do produto %s em %s maior que o estoque (%s); contador zerado',
            quantidade, produto.codigo, local, atual,
        )
    setattr(produto, campo, max(0, atual - quantidade))


def _executar(operacao):
    try:
        resultado = operacao()
        db.session.commit()
    except MovimentacaoInvalida:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Erro ao gravar movimentação; transação desfeita')
        raise MovimentacaoErro('Ocorreu um erro ao registrar a movimentação.') from e
    return resultado


def registrar_entrada(produto_id, local, quantidade, funcionario_id, motivo=None, observacoes=None):
    """Registra uma entrada e soma a quantidade ao estoque do local."""
    _validar_quantidade(quantidade)
    campo_estoque(local)

    def operacao():
        produto = _carregar_produto(produto_id)
        mov = Movimentacao(
            produto_id=produto.id,
            funcionario_id=funcionario_id,
            tipo='entrada',
            local=local,
            quantidade=quantidade,
            motivo=motivo or None,
            observacoes=observacoes or None,
        )
        db.session.add(mov)
        _creditar(produto, local, quantidade)
        return mov

    mov = _executar(operacao)
    logger.info('Entrada de %s unidade(s) do produto %s em %s', quantidade, produto_id, local)
    return mov


def registrar_saida(produto_id, local, quantidade, funcionario_id, motivo=None, observacoes=None):
    """Registra uma saída e debita o estoque do local (nunca abaixo de zero).

    O preço de venda do produto é gravado na movimentação para o relatório
    financeiro não depender de alterações futuras de preço.
    """
    _validar_quantidade(quantidade)
    campo_estoque(local)

    def operacao():
        produto = _carregar_produto(produto_id)
        mov = Movimentacao(
            produto_id=produto.id,
            funcionario_id=funcionario_id,
            tipo='saida',
            local=local,
            quantidade=quantidade,
            motivo=motivo or None,
            observacoes=observacoes or None,
            valor_unitario=produto.preco_venda,
        )
        db.session.add(mov)
        _debitar(produto, local, quantidade)
        return mov

    mov = _executar(operacao)
    logger.info('Saída de %s unidade(s) do produto %s em %s', quantidade, produto_id, local)
    return mov


def transferir(produto_id, origem, quantidade, funcionario_id, motivo=None, observacoes=None):
    """Transfere a quantidade da origem para o outro local.

    Grava uma saída na origem e uma entrada no destino, ligadas pelo mesmo
    transferencia_id, e atualiza os dois contadores numa única transação.
    Retorna a tupla (saida, entrada).
    """
    _validar_quantidade(quantidade)
    destino = local_destino(origem)
    motivo = motivo or MOTIVO_TRANSFERENCIA

    def operacao():
        produto = _carregar_produto(produto_id)
        transferencia_id = str(uuid.uuid4())
        saida = Movimentacao(
            produto_id=produto.id,
            funcionario_id=funcionario_id,
            tipo='saida',
            local=origem,
            quantidade=quantidade,
            motivo=motivo,
            observacoes=observacoes or None,
            transferencia_id=transferencia_id,
        )
        entrada = Movimentacao(
            produto_id=produto.id,
            funcionario_id=funcionario_id,
            tipo='entrada',
            local=destino,
            quantidade=quantidade,
            motivo=motivo,
            observacoes=observacoes or None,
            transferencia_id=transferencia_id,
        )
        db.session.add_all([saida, entrada])
        _debitar(produto, origem, quantidade)
        _creditar(produto, destino, quantidade)
        return saida, entrada

    saida, entrada = _executar(operacao)
    logger.info(
        'Transferência %s: %s unidade(s) do produto %s de %s para %s',
        saida.transferencia_id, quantidade, produto_id, origem, destino,
    )
    return saida, entrada


def registrar_movimentacao(tipo, produto_id, local, quantidade, funcionario_id, motivo=None, observacoes=None):
    """Despacha o tipo escolhido no formulário (entrada, saída ou transferência)."""
    if tipo == 'entrada':
        return registrar_entrada(produto_id, local, quantidade, funcionario_id, motivo, observacoes)
    if tipo == 'saida':
        return registrar_saida(produto_id, local, quantidade, funcionario_id, motivo, observacoes)
    if tipo == 'transferencia':
        return transferir(produto_id, local, quantidade, funcionario_id, motivo, observacoes)
    raise MovimentacaoInvalida(f'Tipo de movimentação inválido: {tipo!r}')
