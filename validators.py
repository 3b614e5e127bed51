# Validadores para parâmetros de URL e entrada de dados
import re

from wtforms.validators import ValidationError

UUID_V4_RE = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$',
    re.IGNORECASE,
)
CODIGO_PRODUTO_RE = re.compile(r'^[A-Za-z]{3}[0-9]{2}$')
CARACTERES_PERIGOSOS_RE = re.compile(r'[<>\'"]')

PAGINA_PADRAO = 'dashboard'
PAGINAS_VALIDAS = (
    'dashboard',
    'produtos',
    'produto-form',
    'produto-detalhes',
    'prateleiras',
    'prateleira-form',
    'categorias',
    'funcionarios',
    'funcionario-form',
    'movimentacoes',
    'movimentacao-form',
    'movimentacao-detalhes',
    'financeiro',
)


def validate_uuid(valor):
    """Retorna o próprio valor se for um UUID v4, senão None."""
    if not valor or not isinstance(valor, str):
        return None
    return valor if UUID_V4_RE.match(valor) else None


def validate_page_name(nome):
    """Nomes de página fora da lista permitida caem no dashboard."""
    return nome if nome in PAGINAS_VALIDAS else PAGINA_PADRAO


def validate_product_code(codigo):
    # Formato: 3 letras + 2 números
    if not isinstance(codigo, str):
        return False
    return CODIGO_PRODUTO_RE.match(codigo) is not None


def sanitize_search_term(termo):
    if not termo:
        return ''
    return CARACTERES_PERIGOSOS_RE.sub('', termo).strip()[:100]


def validate_numeric_input(valor):
    """Converte para número; valores inválidos ou negativos viram 0."""
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        return 0
    if numero != numero or numero < 0:  # NaN
        return 0
    return numero


class CodigoProduto:
    """Validador WTForms para o código do produto (ex.: CAN01)."""

    def __init__(self, message=None):
        self.message = message or 'O código deve ter 3 letras seguidas de 2 números (ex.: CAN01).'

    def __call__(self, form, field):
        if not validate_product_code(field.data or ''):
            raise ValidationError(self.message)


class Uuid:
    def __init__(self, message=None):
        self.message = message or 'Identificador inválido.'

    def __call__(self, form, field):
        if field.data and validate_uuid(field.data) is None:
            raise ValidationError(self.message)
