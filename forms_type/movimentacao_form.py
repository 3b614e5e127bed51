# Formulário para registrar movimentações de estoque (entrada/saída/transferência)
from flask_wtf import FlaskForm
from wtforms import SelectField, IntegerField, StringField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, NumberRange, Optional, Length

class MovimentacaoForm(FlaskForm):
    produto_id = SelectField('Produto', validators=[DataRequired(message='Selecione um produto.')])  # Produto selecionado
    tipo = SelectField('Tipo', choices=[('entrada', 'Entrada'), ('saida', 'Saída'), ('transferencia', 'Transferência')], default='entrada')  # Tipo de movimentação
    local = SelectField('Local', choices=[('loja', 'Loja'), ('armazem', 'Armazém')], default='loja')  # Na transferência: local de origem
    quantidade = IntegerField('Quantidade', validators=[DataRequired(), NumberRange(min=1)], default=1)  # Quantidade movimentada
    motivo = StringField('Motivo', validators=[Optional(), Length(max=200)], render_kw={"placeholder": "Ex: Compra, Venda, Ajuste de estoque"})
    observacoes = TextAreaField('Observações', render_kw={"rows": 3})
    submit = SubmitField('Registrar')
