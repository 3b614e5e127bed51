# Formulário de prateleira (restrito a supervisores)
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SubmitField, BooleanField
from wtforms.validators import DataRequired, Length

class PrateleiraForm(FlaskForm):
    numero = StringField('Número da Prateleira', validators=[
        DataRequired(message='O número da prateleira é obrigatório'),
        Length(min=2, max=20, message='O número da prateleira deve ter pelo menos 2 caracteres'),
    ], render_kw={"placeholder": "Ex: A1"})
    descricao = TextAreaField('Descrição', render_kw={"rows": 3})
    ativo = BooleanField('Ativa', default=True)
    submit = SubmitField('Salvar')
