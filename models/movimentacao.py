"""Modelo Movimentacao: registro de auditoria de uma alteração de estoque.

Cada linha é uma entrada ou saída de um produto em um local (loja ou
armazém). Transferências geram duas linhas ligadas pelo mesmo
transferencia_id.
"""
from datetime import datetime

from . import db, gerar_uuid

TIPOS_MOVIMENTACAO = ('entrada', 'saida')
LOCAIS = ('loja', 'armazem')


class Movimentacao(db.Model):
    __tablename__ = 'movimentacoes'  # Nome da tabela no banco de dados
    id = db.Column(db.String(36), primary_key=True, default=gerar_uuid)  # Identificador único da movimentação
    produto_id = db.Column(db.String(36), db.ForeignKey('produtos.id'), nullable=False)  # Produto movimentado
    funcionario_id = db.Column(db.String(36), db.ForeignKey('funcionarios.id'), nullable=False)  # Responsável
    tipo = db.Column(db.String(10), nullable=False)  # 'entrada' ou 'saida'
    local = db.Column(db.String(10), nullable=False)  # 'loja' ou 'armazem'
    quantidade = db.Column(db.Integer, nullable=False)  # Quantidade movimentada (sempre positiva)
    motivo = db.Column(db.String(200), nullable=True)  # Ex.: Compra, Venda, Ajuste de estoque
    observacoes = db.Column(db.Text, nullable=True)
    valor_unitario = db.Column(db.Float, nullable=True)  # Preço de venda no momento da saída
    transferencia_id = db.Column(db.String(36), nullable=True, index=True)  # Liga as duas pernas de uma transferência
    created_at = db.Column(db.DateTime, default=datetime.now, index=True)  # Hora local: o relatório filtra por dia local

    produto = db.relationship('Produto', back_populates='movimentacoes')
    funcionario = db.relationship('Funcionario', backref=db.backref('movimentacoes', lazy='dynamic'))

    @property
    def is_transferencia(self):
        return self.transferencia_id is not None
