# Formulário de login do funcionário (telefone + senha)
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField
from wtforms.validators import DataRequired

class LoginForm(FlaskForm):
    telefone = StringField('Telefone', validators=[DataRequired()])  # Telefone do funcionário
    senha = PasswordField('Senha', validators=[DataRequired()])  # Senha do funcionário
    submit = SubmitField('Entrar')  # Botão de login
