"""Modelo Prateleira: local de armazenamento que agrupa produtos.

O número da prateleira é único via UniqueConstraint; a verificação feita no
formulário antes de salvar é apenas um aviso antecipado.
"""
from datetime import datetime

from . import db, gerar_uuid


class Prateleira(db.Model):
    __tablename__ = 'prateleiras'
    id = db.Column(db.String(36), primary_key=True, default=gerar_uuid)
    numero = db.Column(db.String(20), nullable=False)  # Número/código da prateleira (ex.: A1)
    descricao = db.Column(db.Text, nullable=True)
    ativo = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    produtos = db.relationship('Produto', back_populates='prateleira', lazy=True)

    __table_args__ = (
        db.UniqueConstraint('numero', name='uq_prateleiras_numero'),
    )

    def __repr__(self):
        return f'<Prateleira {self.numero} ativo={self.ativo}>'
