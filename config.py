# Configuração da aplicação (carregada com app.config.from_object)
import os
from datetime import timedelta

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'cpb-stock-dev-key')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///' + os.path.join(BASE_DIR, 'cpb_stock.db'))
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Sessão: expira após SESSION_HOURS mesmo com o navegador aberto
    PERMANENT_SESSION_LIFETIME = timedelta(hours=int(os.getenv('SESSION_HOURS', '8')))
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    ITEMS_PER_PAGE = int(os.getenv('ITEMS_PER_PAGE', '10'))

    # Caminho do wkhtmltopdf; vazio = procurar no PATH
    WKHTMLTOPDF_PATH = os.getenv('WKHTMLTOPDF_PATH') or None

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', os.path.join(BASE_DIR, 'logs'))

    # Supervisor criado por create_admin.py
    ADMIN_TELEFONE = os.getenv('ADMIN_TELEFONE', '900000000')
    ADMIN_SENHA = os.getenv('ADMIN_SENHA', 'admin123')


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    LOG_DIR = None  # sem arquivo de log nos testes
