# Modelo Produto: representa um item do estoque, com contadores na loja e no armazém
from datetime import datetime

from . import db, gerar_uuid


class Produto(db.Model):
    __tablename__ = 'produtos'  # Nome da tabela no banco de dados
    id = db.Column(db.String(36), primary_key=True, default=gerar_uuid)  # Identificador único do produto
    codigo = db.Column(db.String(5), unique=True, nullable=False)  # Código: 3 letras + 2 números (ex.: CAN01)
    nome = db.Column(db.String(150), nullable=False)  # Nome do produto
    categoria_id = db.Column(db.String(36), db.ForeignKey('categorias.id'), nullable=False)  # Categoria
    marca = db.Column(db.String(100), nullable=True)
    fornecedor = db.Column(db.String(150), nullable=True)
    preco_custo = db.Column(db.Float, nullable=True, default=0.0)  # Preço de custo
    preco_venda = db.Column(db.Float, nullable=False, default=0.0)  # Preço de venda
    estoque_loja = db.Column(db.Integer, nullable=False, default=0)  # Quantidade na loja
    estoque_armazem = db.Column(db.Integer, nullable=False, default=0)  # Quantidade no armazém
    estoque_minimo = db.Column(db.Integer, nullable=False, default=0)  # Limite para alerta de estoque baixo
    prateleira_id = db.Column(db.String(36), db.ForeignKey('prateleiras.id'), nullable=True)  # Prateleira
    codigo_barras = db.Column(db.String(50), nullable=True)
    ativo = db.Column(db.Boolean, nullable=False, default=True)  # Soft delete
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    categoria = db.relationship('Categoria', back_populates='produtos')
    prateleira = db.relationship('Prateleira', back_populates='produtos')
    movimentacoes = db.relationship(
        'Movimentacao', back_populates='produto', lazy='dynamic',
        order_by='Movimentacao.created_at.desc()'
    )

    @property
    def estoque_total(self):
        return (self.estoque_loja or 0) + (self.estoque_armazem or 0)

    @property
    def abaixo_do_minimo(self):
        """Estoque baixo: total estritamente menor que o mínimo."""
        return self.estoque_total < (self.estoque_minimo or 0)

    def __repr__(self):
        return f'<Produto {self.codigo} {self.nome}>'  # Representação legível para debug
