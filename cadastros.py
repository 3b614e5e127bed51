"""Funções de apoio às telas de cadastro (listas paginadas, buscas e exclusões).

Concentra as regras que não dependem da requisição: unicidade do número da
prateleira, exclusões permanentes protegidas por vínculos e soft delete.
"""
import logging

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from models import db, Prateleira, Produto
from validators import sanitize_search_term

logger = logging.getLogger(__name__)


class RegistroDuplicado(Exception):
    """Violação de unicidade (pré-verificação ou restrição do banco)."""


class PrateleiraDuplicada(RegistroDuplicado):
    pass


class RegistroEmUso(Exception):
    """Exclusão recusada porque outros registros dependem deste."""


def paginar(query, pagina=1, por_pagina=None):
    """Pagina a consulta; por_pagina fica entre 5 e 100 (padrão ITEMS_PER_PAGE)."""
    por_pagina = por_pagina or current_app.config.get('ITEMS_PER_PAGE', 10)
    por_pagina = min(max(por_pagina, 5), 100)
    return query.paginate(page=max(pagina or 1, 1), per_page=por_pagina, error_out=False)


def filtrar_por_busca(query, termo, *colunas):
    termo = sanitize_search_term(termo)
    if not termo:
        return query
    padrao = f'%{termo}%'
    return query.filter(or_(*[coluna.ilike(padrao) for coluna in colunas]))


def salvar(registro, mensagem_duplicado):
    """Grava o registro; violação de unicidade vira RegistroDuplicado."""
    db.session.add(registro)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.warning('Violação de unicidade ao salvar %r: %s', registro, e.orig)
        raise RegistroDuplicado(mensagem_duplicado) from e
    return registro


# ---------------------- Prateleiras ----------------------

def numero_prateleira_disponivel(numero, ignorar_id=None):
    """Verificação antecipada; a restrição única do banco continua valendo."""
    with db.session.no_autoflush:
        query = Prateleira.query.filter(Prateleira.numero == (numero or '').strip())
        if ignorar_id:
            query = query.filter(Prateleira.id != ignorar_id)
        return query.first() is None


def salvar_prateleira(prateleira):
    prateleira.numero = (prateleira.numero or '').strip()
    mensagem = f'Já existe uma prateleira com o número "{prateleira.numero}".'
    if not numero_prateleira_disponivel(prateleira.numero, prateleira.id):
        db.session.rollback()
        raise PrateleiraDuplicada(mensagem)
    try:
        return salvar(prateleira, mensagem)
    except RegistroDuplicado as e:
        raise PrateleiraDuplicada(str(e)) from e


def excluir_prateleira(prateleira):
    """Exclusão permanente, recusada se algum produto usa a prateleira."""
    vinculados = Produto.query.filter_by(prateleira_id=prateleira.id).count()
    if vinculados:
        raise RegistroEmUso(
            f'Não é possível excluir: {vinculados} produto(s) vinculado(s) à prateleira "{prateleira.numero}".'
        )
    db.session.delete(prateleira)
    db.session.commit()
    logger.info('Prateleira %s excluída permanentemente', prateleira.numero)


def resumo_prateleiras():
    """Agrupa os produtos ativos por prateleira para o dashboard.

    Retorna uma lista ordenada pelo número com o total de produtos e quantos
    estão abaixo do estoque mínimo.
    """
    produtos = (
        Produto.query.join(Prateleira, Produto.prateleira_id == Prateleira.id)
        .filter(Produto.ativo.is_(True), Prateleira.ativo.is_(True))
        .all()
    )
    grupos = {}
    for produto in produtos:
        item = grupos.setdefault(produto.prateleira_id, {
            'prateleira': produto.prateleira,
            'total_produtos': 0,
            'abaixo_minimo': 0,
        })
        item['total_produtos'] += 1
        if produto.abaixo_do_minimo:
            item['abaixo_minimo'] += 1
    return sorted(grupos.values(), key=lambda item: item['prateleira'].numero)


# ---------------------- Soft delete ----------------------

def desativar(registro):
    registro.ativo = False
    db.session.commit()


def reativar(registro):
    registro.ativo = True
    db.session.commit()


# ---------------------- Funcionários ----------------------

def excluir_funcionario(funcionario, atual):
    """Exclusão permanente; recusada para o próprio usuário ou com movimentações."""
    if funcionario.id == atual.id:
        raise RegistroEmUso('Você não pode excluir o seu próprio usuário.')
    if funcionario.movimentacoes.count():
        raise RegistroEmUso(
            f'O funcionário "{funcionario.nome}" possui movimentações registradas; desative-o em vez de excluir.'
        )
    db.session.delete(funcionario)
    db.session.commit()
    logger.info('Funcionário %s excluído permanentemente por %s', funcionario.nome, atual.nome)
