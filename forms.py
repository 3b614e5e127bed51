# Formulários de funcionários (cadastro e edição) e reexportação dos demais formulários
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField, SelectField, BooleanField
from wtforms.validators import DataRequired, EqualTo, Length, Optional

from forms_type import LoginForm, ProdutoForm, CategoriaForm, PrateleiraForm, MovimentacaoForm

TIPOS = [('funcionario', 'Funcionário'), ('supervisor', 'Supervisor')]

class FuncionarioForm(FlaskForm):
    """Formulário para cadastro de novo funcionário"""
    nome = StringField('Nome', validators=[DataRequired(), Length(min=2, max=150)])  # Nome completo
    telefone = StringField('Telefone', validators=[DataRequired(), Length(min=6, max=30)])  # Usado no login
    senha = PasswordField('Senha', validators=[DataRequired(), Length(min=6)])  # Senha (mínimo 6 caracteres)
    confirmar_senha = PasswordField('Confirmar Senha', validators=[DataRequired(), EqualTo('senha', message='As senhas devem coincidir.')])  # Confirmação
    tipo = SelectField('Tipo', choices=TIPOS, default='funcionario')
    ativo = BooleanField('Ativo', default=True)
    submit = SubmitField('Salvar')

class EditarFuncionarioForm(FlaskForm):
    """Edição de funcionário: senha em branco mantém a atual"""
    nome = StringField('Nome', validators=[DataRequired(), Length(min=2, max=150)])
    telefone = StringField('Telefone', validators=[DataRequired(), Length(min=6, max=30)])
    senha = PasswordField('Nova Senha', validators=[Optional(), Length(min=6)])  # Nova senha (opcional)
    confirmar_senha = PasswordField('Confirmar Nova Senha', validators=[EqualTo('senha', message='As senhas devem coincidir.')])
    tipo = SelectField('Tipo', choices=TIPOS)
    ativo = BooleanField('Ativo')
    submit = SubmitField('Salvar Alterações')
