# Inicialização do SQLAlchemy e importação dos modelos do sistema
import uuid

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()  # Instância global do banco de dados


def gerar_uuid():
    """Identificadores são UUID v4 em texto, gerados no servidor."""
    return str(uuid.uuid4())


# Importação dos modelos para registro no SQLAlchemy
from .funcionario import Funcionario
from .categoria import Categoria
from .prateleira import Prateleira
from .produto import Produto
from .movimentacao import Movimentacao
