from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Length

class CategoriaForm(FlaskForm):
    nome = StringField('Nome', validators=[DataRequired(), Length(min=2, max=100)])
    descricao = TextAreaField('Descrição', render_kw={"rows": 3})
    submit = SubmitField('Salvar')
