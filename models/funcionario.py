# Modelo Funcionario: representa um funcionário do sistema (login, permissões, etc)
from datetime import datetime

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from . import db, gerar_uuid

TIPOS_FUNCIONARIO = ('supervisor', 'funcionario')


class Funcionario(UserMixin, db.Model):
    __tablename__ = 'funcionarios'  # Nome da tabela no banco de dados
    id = db.Column(db.String(36), primary_key=True, default=gerar_uuid)  # Identificador único (UUID v4)
    nome = db.Column(db.String(150), nullable=False)  # Nome completo do funcionário
    telefone = db.Column(db.String(30), unique=True, nullable=False)  # Telefone (login)
    senha_hash = db.Column(db.String(255), nullable=False)  # Hash da senha do funcionário
    tipo = db.Column(db.String(20), nullable=False, default='funcionario')  # Papel: supervisor ou funcionario
    ativo = db.Column(db.Boolean, nullable=False, default=True)  # Funcionários inativos não fazem login
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def set_password(self, senha):
        """Define a senha do funcionário (armazenando o hash)"""
        self.senha_hash = generate_password_hash(senha)

    def check_password(self, senha):
        """Verifica se a senha informada confere com o hash armazenado"""
        return check_password_hash(self.senha_hash, senha)

    @property
    def is_supervisor(self):
        return self.tipo == 'supervisor'

    @property
    def is_active(self):
        # Flask-Login recusa sessões de funcionários desativados
        return bool(self.ativo)

    def __repr__(self):
        return f'<Funcionario {self.nome} tipo={self.tipo} ativo={self.ativo}>'
