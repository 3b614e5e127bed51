# Formulários específicos de cada tela
from .login_form import LoginForm
from .produto_form import ProdutoForm
from .categoria_form import CategoriaForm
from .prateleira_form import PrateleiraForm
from .movimentacao_form import MovimentacaoForm
