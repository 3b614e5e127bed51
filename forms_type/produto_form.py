# Formulário para cadastro e edição de produtos
from flask_wtf import FlaskForm
from wtforms import StringField, DecimalField, IntegerField, SubmitField, SelectField, BooleanField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Length, Optional

from validators import CodigoProduto

class ProdutoForm(FlaskForm):
    codigo = StringField('Código do Produto', validators=[DataRequired(), CodigoProduto()], render_kw={"placeholder": "Ex: CAN01", "maxlength": 5})  # 3 letras + 2 números
    nome = StringField('Nome do Produto', validators=[DataRequired(), Length(max=150)])  # Nome do produto
    categoria_id = SelectField('Categoria', validators=[DataRequired(message='Selecione uma categoria.')])  # Opções carregadas na rota
    marca = StringField('Marca', validators=[Optional(), Length(max=100)])
    fornecedor = StringField('Fornecedor', validators=[Optional(), Length(max=150)])
    preco_custo = DecimalField('Preço de Custo', validators=[Optional(), NumberRange(min=0)], default=0)  # Preço de custo
    preco_venda = DecimalField('Preço de Venda', validators=[InputRequired(), NumberRange(min=0)], default=0)  # Preço de venda
    estoque_loja = IntegerField('Estoque na Loja', validators=[Optional(), NumberRange(min=0)], default=0)
    estoque_armazem = IntegerField('Estoque no Armazém', validators=[Optional(), NumberRange(min=0)], default=0)
    estoque_minimo = IntegerField('Estoque Mínimo', validators=[Optional(), NumberRange(min=0)], default=0)
    prateleira_id = SelectField('Prateleira', validators=[Optional()])  # '' = sem prateleira
    codigo_barras = StringField('Código de Barras', validators=[Optional(), Length(max=50)])
    ativo = BooleanField('Ativo', default=True)
    submit = SubmitField('Salvar')
