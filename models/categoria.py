from datetime import datetime

from . import db, gerar_uuid


class Categoria(db.Model):
    """Modelo Categoria: agrupa produtos por tipo.

    Usa soft delete via coluna 'ativo'; produtos continuam apontando para a
    categoria desativada, preservando o histórico.
    """
    __tablename__ = 'categorias'
    id = db.Column(db.String(36), primary_key=True, default=gerar_uuid)
    nome = db.Column(db.String(100), nullable=False)
    descricao = db.Column(db.Text, nullable=True)
    ativo = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    produtos = db.relationship('Produto', back_populates='categoria', lazy=True)

    @property
    def total_produtos_ativos(self):
        return sum(1 for produto in self.produtos if produto.ativo)

    def __repr__(self):
        return f'<Categoria {self.nome} ativo={self.ativo}>'
