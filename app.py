import os
import time
from datetime import date, datetime
from functools import wraps

from flask import Flask, render_template, redirect, url_for, flash, request, session, abort, make_response
from flask_login import LoginManager, login_user, logout_user, login_required, current_user
from flask_wtf.csrf import CSRFProtect
from sqlalchemy.exc import SQLAlchemyError

from config import Config, TestConfig
from log_config import configurar_logging
from models import db, Funcionario, Categoria, Prateleira, Produto, Movimentacao
from forms import (
    LoginForm, ProdutoForm, CategoriaForm, PrateleiraForm, MovimentacaoForm,
    FuncionarioForm, EditarFuncionarioForm,
)
from validators import validate_uuid, validate_page_name
import cadastros
from cadastros import RegistroDuplicado, PrateleiraDuplicada, RegistroEmUso
import estoque
from estoque import MovimentacaoInvalida, MovimentacaoErro
import relatorio_financeiro

app = Flask(__name__)
app.config.from_object(TestConfig if os.getenv('CPB_CONFIG') == 'test' else Config)

configurar_logging(app)
db.init_app(app)
csrf = CSRFProtect(app)

login_manager = LoginManager()
login_manager.init_app(app)
login_manager.login_view = 'login'
login_manager.login_message = 'Faça login para acessar o sistema.'
login_manager.login_message_category = 'warning'

MENSAGEM_ERRO_BANCO = 'Ocorreu um erro ao acessar o banco de dados. Tente novamente.'


@login_manager.user_loader
def load_user(funcionario_id):
    # Relido do banco a cada requisição: funcionário desativado perde a sessão
    funcionario = db.session.get(Funcionario, funcionario_id)
    if funcionario is None or not funcionario.ativo:
        return None
    return funcionario


@app.before_request
def verificar_expiracao_sessao():
    """Encerra sessões mais antigas que PERMANENT_SESSION_LIFETIME."""
    if not current_user.is_authenticated:
        return None
    autenticado_em = session.get('autenticado_em')
    limite = app.config['PERMANENT_SESSION_LIFETIME'].total_seconds()
    if autenticado_em is None or time.time() - autenticado_em > limite:
        app.logger.info('Sessão expirada para o funcionário %s', current_user.id)
        logout_user()
        session.pop('autenticado_em', None)
        flash('Sua sessão expirou. Entre novamente.', 'warning')
        return redirect(url_for('login'))
    return None


def role_required(*tipos):
    """Restringe acesso pelo tipo do funcionário (supervisor/funcionario).

    A verificação acontece no servidor; o que a interface esconde é só conveniência.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                return login_manager.unauthorized()
            if current_user.tipo not in tipos:
                app.logger.warning('Acesso negado a %s para %s (%s)', request.path, current_user.nome, current_user.tipo)
                return render_template('acesso_negado.html'), 403
            return view_func(*args, **kwargs)
        return wrapper
    return decorator


def obter_ou_404(modelo, registro_id):
    """Busca por id validando o formato UUID antes de consultar o banco."""
    if validate_uuid(registro_id) is None:
        abort(404)
    registro = db.session.get(modelo, registro_id)
    if registro is None:
        abort(404)
    return registro


def falha_banco(contexto):
    db.session.rollback()
    app.logger.exception('Erro de banco de dados ao %s', contexto)
    flash(MENSAGEM_ERRO_BANCO, 'danger')


@app.context_processor
def inject_helpers():
    return dict(
        is_supervisor=current_user.is_authenticated and current_user.is_supervisor,
        formatar_moeda=relatorio_financeiro.formatar_moeda,
        formatar_data=relatorio_financeiro.formatar_data,
    )


@app.errorhandler(404)
def pagina_nao_encontrada(e):
    return render_template('404.html'), 404


# ---------------------- Autenticação ----------------------

@app.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('dashboard'))
    form = LoginForm()
    if form.validate_on_submit():
        telefone = form.telefone.data.strip()
        funcionario = Funcionario.query.filter_by(telefone=telefone, ativo=True).first()
        if funcionario and funcionario.check_password(form.senha.data):
            login_user(funcionario)
            session.permanent = True
            session['autenticado_em'] = time.time()
            app.logger.info('Login de %s (%s)', funcionario.nome, funcionario.tipo)
            flash(f'Bem-vindo, {funcionario.nome}!', 'success')
            return redirect(url_for('dashboard'))
        app.logger.warning('Tentativa de login inválida para o telefone %s', telefone)
        flash('Telefone ou senha incorretos.', 'danger')
    return render_template('login.html', form=form)


@app.route('/logout', methods=['GET', 'POST'])
@login_required
def logout():
    app.logger.info('Logout de %s', current_user.nome)
    logout_user()
    session.pop('autenticado_em', None)
    flash('Você saiu do sistema.', 'success')
    return redirect(url_for('login'))


# ---------------------- Navegação ----------------------

def resolver_pagina(pagina, registro_id=None):
    """Traduz o nome de página (e id opcional) na URL da tela correspondente."""
    pagina = validate_page_name(pagina)
    registro_id = validate_uuid(registro_id)
    if pagina == 'produto-form':
        return url_for('editar_produto', produto_id=registro_id) if registro_id else url_for('novo_produto')
    if pagina == 'produto-detalhes' and registro_id:
        return url_for('detalhes_produto', produto_id=registro_id)
    if pagina == 'prateleira-form':
        return url_for('editar_prateleira', prateleira_id=registro_id) if registro_id else url_for('nova_prateleira')
    if pagina == 'funcionario-form':
        return url_for('editar_funcionario', funcionario_id=registro_id) if registro_id else url_for('novo_funcionario')
    if pagina == 'movimentacao-form':
        return url_for('nova_movimentacao', produto_id=registro_id) if registro_id else url_for('nova_movimentacao')
    if pagina == 'movimentacao-detalhes' and registro_id:
        return url_for('detalhes_movimentacao', movimentacao_id=registro_id)
    listas = {
        'produtos': 'listar_produtos',
        'produto-detalhes': 'listar_produtos',
        'prateleiras': 'listar_prateleiras',
        'categorias': 'listar_categorias',
        'funcionarios': 'listar_funcionarios',
        'movimentacoes': 'listar_movimentacoes',
        'movimentacao-detalhes': 'listar_movimentacoes',
        'financeiro': 'financeiro',
    }
    return url_for(listas.get(pagina, 'dashboard'))


@app.route('/navegar')
@login_required
def navegar():
    return redirect(resolver_pagina(request.args.get('page'), request.args.get('id')))


# ---------------------- Dashboard ----------------------

@app.route('/')
@app.route('/dashboard')
@login_required
def dashboard():
    try:
        prateleiras = cadastros.resumo_prateleiras()
        produtos_ativos = Produto.query.filter_by(ativo=True).all()
    except SQLAlchemyError:
        falha_banco('carregar o dashboard')
        prateleiras, produtos_ativos = [], []
    abaixo_minimo = [p for p in produtos_ativos if p.abaixo_do_minimo]
    return render_template(
        'dashboard.html',
        prateleiras=prateleiras,
        total_produtos=len(produtos_ativos),
        abaixo_minimo=abaixo_minimo,
    )


@app.route('/dashboard/prateleira/<prateleira_id>')
@login_required
def produtos_da_prateleira(prateleira_id):
    prateleira = obter_ou_404(Prateleira, prateleira_id)
    produtos = (
        Produto.query.filter_by(prateleira_id=prateleira.id, ativo=True)
        .order_by(Produto.nome.asc()).all()
    )
    return render_template('prateleira_produtos.html', prateleira=prateleira, produtos=produtos)


# ---------------------- Produtos ----------------------

def _carregar_opcoes_produto(form, produto=None):
    categorias = Categoria.query.filter_by(ativo=True).order_by(Categoria.nome.asc()).all()
    prateleiras = Prateleira.query.filter_by(ativo=True).order_by(Prateleira.numero.asc()).all()
    # Categoria ou prateleira desativada continua válida para o produto que já a usa
    if produto is not None and produto.categoria is not None and produto.categoria not in categorias:
        categorias.append(produto.categoria)
    if produto is not None and produto.prateleira is not None and produto.prateleira not in prateleiras:
        prateleiras.append(produto.prateleira)
    form.categoria_id.choices = [('', 'Selecione uma categoria')] + [(c.id, c.nome) for c in categorias]
    form.prateleira_id.choices = [('', 'Sem prateleira')] + [(p.id, p.numero) for p in prateleiras]


def _preencher_produto(produto, form):
    produto.codigo = form.codigo.data.strip().upper()
    produto.nome = form.nome.data.strip()
    produto.categoria_id = form.categoria_id.data
    produto.marca = form.marca.data or None
    produto.fornecedor = form.fornecedor.data or None
    produto.preco_custo = float(form.preco_custo.data or 0)
    produto.preco_venda = float(form.preco_venda.data or 0)
    produto.estoque_loja = max(0, form.estoque_loja.data or 0)
    produto.estoque_armazem = max(0, form.estoque_armazem.data or 0)
    produto.estoque_minimo = max(0, form.estoque_minimo.data or 0)
    produto.prateleira_id = form.prateleira_id.data or None
    produto.codigo_barras = form.codigo_barras.data or None
    produto.ativo = bool(form.ativo.data)


def _codigo_em_uso(codigo, ignorar_id=None):
    query = Produto.query.filter(Produto.codigo == codigo.strip().upper())
    if ignorar_id:
        query = query.filter(Produto.id != ignorar_id)
    return query.first() is not None


@app.route('/produtos')
@login_required
def listar_produtos():
    status = request.args.get('status', 'ativos')
    categoria_id = validate_uuid(request.args.get('categoria'))
    query = Produto.query
    if status == 'inativos':
        query = query.filter(Produto.ativo.is_(False))
    elif status != 'todos':
        status = 'ativos'
        query = query.filter(Produto.ativo.is_(True))
    if categoria_id:
        query = query.filter(Produto.categoria_id == categoria_id)
    query = cadastros.filtrar_por_busca(query, request.args.get('q'), Produto.nome, Produto.codigo, Produto.marca)
    paginacao = cadastros.paginar(query.order_by(Produto.nome.asc()), request.args.get('page', 1, type=int))
    categorias = Categoria.query.filter_by(ativo=True).order_by(Categoria.nome.asc()).all()
    return render_template(
        'produtos.html', paginacao=paginacao, categorias=categorias,
        status=status, categoria_id=categoria_id, q=request.args.get('q', ''),
    )


@app.route('/produtos/novo', methods=['GET', 'POST'])
@login_required
@role_required('supervisor')
def novo_produto():
    form = ProdutoForm()
    _carregar_opcoes_produto(form)
    if form.validate_on_submit():
        if _codigo_em_uso(form.codigo.data):
            form.codigo.errors.append('Já existe um produto com este código.')
        else:
            produto = Produto()
            _preencher_produto(produto, form)
            try:
                cadastros.salvar(produto, 'Já existe um produto com este código.')
            except RegistroDuplicado as e:
                flash(str(e), 'danger')
            except SQLAlchemyError:
                falha_banco('cadastrar produto')
            else:
                app.logger.info('Produto %s cadastrado por %s', produto.codigo, current_user.nome)
                flash('Produto cadastrado com sucesso!', 'success')
                return redirect(url_for('detalhes_produto', produto_id=produto.id))
    return render_template('produto_form.html', form=form, produto=None)


@app.route('/produtos/<produto_id>/editar', methods=['GET', 'POST'])
@login_required
@role_required('supervisor')
def editar_produto(produto_id):
    produto = obter_ou_404(Produto, produto_id)
    form = ProdutoForm(obj=produto)
    _carregar_opcoes_produto(form, produto)
    if request.method == 'GET':
        form.prateleira_id.data = produto.prateleira_id or ''
    if form.validate_on_submit():
        if _codigo_em_uso(form.codigo.data, produto.id):
            form.codigo.errors.append('Já existe um produto com este código.')
        else:
            _preencher_produto(produto, form)
            try:
                cadastros.salvar(produto, 'Já existe um produto com este código.')
            except RegistroDuplicado as e:
                flash(str(e), 'danger')
            except SQLAlchemyError:
                falha_banco('atualizar produto')
            else:
                flash('Produto atualizado com sucesso!', 'success')
                return redirect(url_for('detalhes_produto', produto_id=produto.id))
    return render_template('produto_form.html', form=form, produto=produto)


@app.route('/produtos/<produto_id>')
@login_required
def detalhes_produto(produto_id):
    produto = obter_ou_404(Produto, produto_id)
    historico = cadastros.paginar(
        Movimentacao.query.filter_by(produto_id=produto.id).order_by(Movimentacao.created_at.desc()),
        request.args.get('page', 1, type=int),
    )
    form = MovimentacaoForm()
    form.produto_id.choices = [(produto.id, produto.nome)]
    form.produto_id.data = produto.id
    return render_template('produto_detalhes.html', produto=produto, historico=historico, form=form)


@app.route('/produtos/<produto_id>/excluir', methods=['POST'])
@login_required
@role_required('supervisor')
def excluir_produto(produto_id):
    produto = obter_ou_404(Produto, produto_id)
    try:
        cadastros.desativar(produto)
    except SQLAlchemyError:
        falha_banco('excluir produto')
    else:
        app.logger.info('Produto %s desativado por %s', produto.codigo, current_user.nome)
        flash(f'O produto "{produto.nome}" foi excluído com sucesso.', 'success')
    return redirect(url_for('listar_produtos'))


@app.route('/produtos/<produto_id>/reativar', methods=['POST'])
@login_required
@role_required('supervisor')
def reativar_produto(produto_id):
    produto = obter_ou_404(Produto, produto_id)
    try:
        cadastros.reativar(produto)
    except SQLAlchemyError:
        falha_banco('reativar produto')
    else:
        flash(f'O produto "{produto.nome}" foi reativado.', 'success')
    return redirect(url_for('detalhes_produto', produto_id=produto.id))


# ---------------------- Prateleiras ----------------------

@app.route('/prateleiras')
@login_required
def listar_prateleiras():
    query = Prateleira.query.filter(Prateleira.ativo.is_(True))
    query = cadastros.filtrar_por_busca(query, request.args.get('q'), Prateleira.numero, Prateleira.descricao)
    paginacao = cadastros.paginar(query.order_by(Prateleira.numero.asc()), request.args.get('page', 1, type=int))
    return render_template('prateleiras.html', paginacao=paginacao, q=request.args.get('q', ''))


def _salvar_prateleira_do_formulario(prateleira, form, mensagem):
    prateleira.numero = form.numero.data
    prateleira.descricao = form.descricao.data or None
    prateleira.ativo = bool(form.ativo.data)
    try:
        cadastros.salvar_prateleira(prateleira)
    except PrateleiraDuplicada as e:
        form.numero.errors.append(str(e))
        flash(str(e), 'danger')
        return False
    except SQLAlchemyError:
        falha_banco('salvar prateleira')
        return False
    app.logger.info('Prateleira %s salva por %s', prateleira.numero, current_user.nome)
    flash(mensagem, 'success')
    return True


@app.route('/prateleiras/nova', methods=['GET', 'POST'])
@login_required
@role_required('supervisor')
def nova_prateleira():
    form = PrateleiraForm()
    if form.validate_on_submit():
        if _salvar_prateleira_do_formulario(Prateleira(), form, 'A prateleira foi cadastrada com sucesso.'):
            return redirect(url_for('listar_prateleiras'))
    return render_template('prateleira_form.html', form=form, prateleira=None)


@app.route('/prateleiras/<prateleira_id>/editar', methods=['GET', 'POST'])
@login_required
@role_required('supervisor')
def editar_prateleira(prateleira_id):
    prateleira = obter_ou_404(Prateleira, prateleira_id)
    form = PrateleiraForm(obj=prateleira)
    if form.validate_on_submit():
        if _salvar_prateleira_do_formulario(prateleira, form, 'A prateleira foi atualizada com sucesso.'):
            return redirect(url_for('listar_prateleiras'))
    return render_template('prateleira_form.html', form=form, prateleira=prateleira)


@app.route('/prateleiras/<prateleira_id>/excluir', methods=['POST'])
@login_required
@role_required('supervisor')
def excluir_prateleira(prateleira_id):
    prateleira = obter_ou_404(Prateleira, prateleira_id)
    numero = prateleira.numero
    try:
        cadastros.excluir_prateleira(prateleira)
    except RegistroEmUso as e:
        flash(str(e), 'warning')
    except SQLAlchemyError:
        falha_banco('excluir prateleira')
    else:
        flash(f'A prateleira "{numero}" foi excluída com sucesso.', 'success')
    return redirect(url_for('listar_prateleiras'))


# ---------------------- Categorias ----------------------

def _pagina_categorias(form, categoria=None):
    status = request.args.get('status', 'ativos')
    query = Categoria.query.filter(Categoria.ativo.is_(status != 'inativos'))
    query = cadastros.filtrar_por_busca(query, request.args.get('q'), Categoria.nome, Categoria.descricao)
    paginacao = cadastros.paginar(query.order_by(Categoria.nome.asc()), request.args.get('page', 1, type=int))
    return render_template(
        'categorias.html', paginacao=paginacao, form=form, categoria=categoria, status=status,
        q=request.args.get('q', ''),
    )


@app.route('/categorias')
@login_required
def listar_categorias():
    return _pagina_categorias(CategoriaForm())


@app.route('/categorias/nova', methods=['POST'])
@login_required
@role_required('supervisor')
def nova_categoria():
    form = CategoriaForm()
    if form.validate_on_submit():
        categoria = Categoria(nome=form.nome.data.strip(), descricao=form.descricao.data or None)
        db.session.add(categoria)
        try:
            db.session.commit()
        except SQLAlchemyError:
            falha_banco('cadastrar categoria')
        else:
            flash('A categoria foi cadastrada com sucesso.', 'success')
            return redirect(url_for('listar_categorias'))
    return _pagina_categorias(form)


@app.route('/categorias/<categoria_id>/editar', methods=['GET', 'POST'])
@login_required
@role_required('supervisor')
def editar_categoria(categoria_id):
    categoria = obter_ou_404(Categoria, categoria_id)
    form = CategoriaForm(obj=categoria)
    if form.validate_on_submit():
        categoria.nome = form.nome.data.strip()
        categoria.descricao = form.descricao.data or None
        try:
            db.session.commit()
        except SQLAlchemyError:
            falha_banco('atualizar categoria')
        else:
            flash('A categoria foi atualizada com sucesso.', 'success')
            return redirect(url_for('listar_categorias'))
    return _pagina_categorias(form, categoria)


@app.route('/categorias/<categoria_id>/excluir', methods=['POST'])
@login_required
@role_required('supervisor')
def excluir_categoria(categoria_id):
    categoria = obter_ou_404(Categoria, categoria_id)
    try:
        cadastros.desativar(categoria)
    except SQLAlchemyError:
        falha_banco('excluir categoria')
    else:
        flash(f'A categoria "{categoria.nome}" foi excluída com sucesso.', 'success')
    return redirect(url_for('listar_categorias'))


@app.route('/categorias/<categoria_id>/reativar', methods=['POST'])
@login_required
@role_required('supervisor')
def reativar_categoria(categoria_id):
    categoria = obter_ou_404(Categoria, categoria_id)
    try:
        cadastros.reativar(categoria)
    except SQLAlchemyError:
        falha_banco('reativar categoria')
    else:
        flash(f'A categoria "{categoria.nome}" foi reativada.', 'success')
    return redirect(url_for('listar_categorias'))


# ---------------------- Funcionários (supervisor) ----------------------

def _telefone_em_uso(telefone, ignorar_id=None):
    query = Funcionario.query.filter(Funcionario.telefone == telefone.strip())
    if ignorar_id:
        query = query.filter(Funcionario.id != ignorar_id)
    return query.first() is not None


@app.route('/funcionarios')
@login_required
@role_required('supervisor')
def listar_funcionarios():
    query = cadastros.filtrar_por_busca(
        Funcionario.query, request.args.get('q'), Funcionario.nome, Funcionario.telefone
    )
    paginacao = cadastros.paginar(query.order_by(Funcionario.nome.asc()), request.args.get('page', 1, type=int))
    total_ativos = Funcionario.query.filter_by(ativo=True).count()
    return render_template(
        'funcionarios.html', paginacao=paginacao, total_ativos=total_ativos, q=request.args.get('q', ''),
    )


@app.route('/funcionarios/novo', methods=['GET', 'POST'])
@login_required
@role_required('supervisor')
def novo_funcionario():
    form = FuncionarioForm()
    if form.validate_on_submit():
        if _telefone_em_uso(form.telefone.data):
            form.telefone.errors.append('Este telefone já está cadastrado.')
        else:
            funcionario = Funcionario(
                nome=form.nome.data.strip(),
                telefone=form.telefone.data.strip(),
                tipo=form.tipo.data,
                ativo=bool(form.ativo.data),
            )
            funcionario.set_password(form.senha.data)
            try:
                cadastros.salvar(funcionario, 'Este telefone já está cadastrado.')
            except RegistroDuplicado as e:
                flash(str(e), 'danger')
            except SQLAlchemyError:
                falha_banco('cadastrar funcionário')
            else:
                app.logger.info('Funcionário %s cadastrado por %s', funcionario.nome, current_user.nome)
                flash('O funcionário foi cadastrado com sucesso.', 'success')
                return redirect(url_for('listar_funcionarios'))
    return render_template('funcionario_form.html', form=form, funcionario=None)


@app.route('/funcionarios/<funcionario_id>/editar', methods=['GET', 'POST'])
@login_required
@role_required('supervisor')
def editar_funcionario(funcionario_id):
    funcionario = obter_ou_404(Funcionario, funcionario_id)
    form = EditarFuncionarioForm(obj=funcionario)
    if form.validate_on_submit():
        if _telefone_em_uso(form.telefone.data, funcionario.id):
            form.telefone.errors.append('Este telefone já está cadastrado.')
        elif funcionario.id == current_user.id and (form.tipo.data != 'supervisor' or not form.ativo.data):
            flash('Você não pode remover o seu próprio acesso de supervisor.', 'warning')
        else:
            funcionario.nome = form.nome.data.strip()
            funcionario.telefone = form.telefone.data.strip()
            funcionario.tipo = form.tipo.data
            funcionario.ativo = bool(form.ativo.data)
            if form.senha.data:
                funcionario.set_password(form.senha.data)
            try:
                cadastros.salvar(funcionario, 'Este telefone já está cadastrado.')
            except RegistroDuplicado as e:
                flash(str(e), 'danger')
            except SQLAlchemyError:
                falha_banco('atualizar funcionário')
            else:
                flash('O funcionário foi atualizado com sucesso.', 'success')
                return redirect(url_for('listar_funcionarios'))
    return render_template('funcionario_form.html', form=form, funcionario=funcionario)


@app.route('/funcionarios/<funcionario_id>/status', methods=['POST'])
@login_required
@role_required('supervisor')
def alternar_status_funcionario(funcionario_id):
    funcionario = obter_ou_404(Funcionario, funcionario_id)
    if funcionario.id == current_user.id:
        flash('Você não pode desativar o seu próprio usuário.', 'warning')
        return redirect(url_for('listar_funcionarios'))
    try:
        if funcionario.ativo:
            cadastros.desativar(funcionario)
        else:
            cadastros.reativar(funcionario)
    except SQLAlchemyError:
        falha_banco('alterar status do funcionário')
    else:
        estado = 'ativado' if funcionario.ativo else 'desativado'
        app.logger.info('Funcionário %s %s por %s', funcionario.nome, estado, current_user.nome)
        flash(f'Funcionário {estado} com sucesso.', 'success')
    return redirect(url_for('listar_funcionarios'))


@app.route('/funcionarios/<funcionario_id>/excluir', methods=['POST'])
@login_required
@role_required('supervisor')
def excluir_funcionario(funcionario_id):
    funcionario = obter_ou_404(Funcionario, funcionario_id)
    nome = funcionario.nome
    try:
        cadastros.excluir_funcionario(funcionario, current_user)
    except RegistroEmUso as e:
        flash(str(e), 'warning')
    except SQLAlchemyError:
        falha_banco('excluir funcionário')
    else:
        flash(f'O funcionário "{nome}" foi excluído com sucesso.', 'success')
    return redirect(url_for('listar_funcionarios'))


# ---------------------- Movimentações ----------------------

@app.route('/movimentacoes')
@login_required
def listar_movimentacoes():
    tipo = request.args.get('tipo')
    local = request.args.get('local')
    prateleira_id = validate_uuid(request.args.get('prateleira'))
    query = Movimentacao.query.join(Produto, Movimentacao.produto_id == Produto.id).join(
        Funcionario, Movimentacao.funcionario_id == Funcionario.id
    )
    if tipo in ('entrada', 'saida'):
        query = query.filter(Movimentacao.tipo == tipo)
    if local in ('loja', 'armazem'):
        query = query.filter(Movimentacao.local == local)
    if prateleira_id:
        query = query.filter(Produto.prateleira_id == prateleira_id)
    query = cadastros.filtrar_por_busca(
        query, request.args.get('q'), Produto.nome, Produto.codigo, Funcionario.nome
    )
    paginacao = cadastros.paginar(
        query.order_by(Movimentacao.created_at.desc()), request.args.get('page', 1, type=int)
    )
    prateleiras = Prateleira.query.filter_by(ativo=True).order_by(Prateleira.numero.asc()).all()
    return render_template(
        'movimentacoes.html', paginacao=paginacao, prateleiras=prateleiras,
        filtros={'tipo': tipo, 'local': local, 'prateleira': prateleira_id, 'q': request.args.get('q', '')},
    )


@app.route('/movimentacoes/nova', methods=['GET', 'POST'])
@login_required
def nova_movimentacao():
    form = MovimentacaoForm()
    produtos = Produto.query.filter_by(ativo=True).order_by(Produto.nome.asc()).all()
    form.produto_id.choices = [('', 'Selecione um produto')] + [(p.id, f'{p.nome} (Cód: {p.codigo})') for p in produtos]
    produto_param = validate_uuid(request.args.get('produto_id'))
    if request.method == 'GET' and produto_param:
        form.produto_id.data = produto_param
    if form.validate_on_submit():
        try:
            estoque.registrar_movimentacao(
                form.tipo.data,
                form.produto_id.data,
                form.local.data,
                form.quantidade.data,
                current_user.id,
                motivo=form.motivo.data,
                observacoes=form.observacoes.data,
            )
        except MovimentacaoInvalida as e:
            flash(str(e), 'danger')
        except MovimentacaoErro as e:
            flash(str(e), 'danger')
        else:
            if form.tipo.data == 'transferencia':
                flash('A transferência foi registrada com sucesso.', 'success')
            else:
                flash('A movimentação foi registrada com sucesso.', 'success')
            if produto_param:
                return redirect(url_for('detalhes_produto', produto_id=produto_param))
            return redirect(url_for('listar_movimentacoes'))
    elif request.method == 'POST' and produto_param:
        flash('Preencha todos os campos obrigatórios.', 'danger')
        return redirect(url_for('detalhes_produto', produto_id=produto_param))
    # Dados auxiliares para UI (estoque atual de cada produto)
    produtos_info = {
        p.id: {'loja': int(p.estoque_loja or 0), 'armazem': int(p.estoque_armazem or 0)}
        for p in produtos
    }
    return render_template('movimentacao_form.html', form=form, produtos_info=produtos_info)


@app.route('/movimentacoes/<movimentacao_id>')
@login_required
def detalhes_movimentacao(movimentacao_id):
    movimentacao = obter_ou_404(Movimentacao, movimentacao_id)
    par = None
    if movimentacao.transferencia_id:
        par = Movimentacao.query.filter(
            Movimentacao.transferencia_id == movimentacao.transferencia_id,
            Movimentacao.id != movimentacao.id,
        ).first()
    return render_template('movimentacao_detalhes.html', movimentacao=movimentacao, par=par)


# ---------------------- Financeiro ----------------------

def _periodo_da_requisicao():
    """Período escolhido: datas personalizadas válidas ou um período pré-definido."""
    nome = request.args.get('periodo', 'hoje')
    try:
        inicio = date.fromisoformat(request.args.get('data_inicio', ''))
        fim = date.fromisoformat(request.args.get('data_fim', ''))
    except ValueError:
        inicio = fim = None
    if inicio and fim:
        if inicio <= fim:
            return 'personalizado', inicio, fim
        flash('A data inicial deve ser anterior ou igual à data final.', 'warning')
    if nome not in relatorio_financeiro.PERIODOS:
        nome = 'hoje'
    inicio, fim = relatorio_financeiro.periodo(nome)
    return nome, inicio, fim


@app.route('/financeiro')
@login_required
def financeiro():
    nome, inicio, fim = _periodo_da_requisicao()
    try:
        query = relatorio_financeiro.consulta_vendas(inicio, fim)
        paginacao = cadastros.paginar(query, request.args.get('page', 1, type=int))
        resumo = relatorio_financeiro.calcular_resumo(query.all())
    except SQLAlchemyError:
        falha_banco('carregar os dados financeiros')
        return redirect(url_for('dashboard'))
    return render_template(
        'financeiro.html',
        periodo=nome,
        inicio=inicio,
        fim=fim,
        paginacao=paginacao,
        linhas=relatorio_financeiro.linhas_relatorio(paginacao.items),
        resumo=resumo,
    )


@app.route('/financeiro/pdf')
@login_required
def exportar_financeiro_pdf():
    nome, inicio, fim = _periodo_da_requisicao()
    vendas = relatorio_financeiro.consulta_vendas(inicio, fim).all()
    if not vendas:
        flash('Não há vendas no período selecionado para exportar.', 'warning')
        return redirect(url_for('financeiro', periodo=nome, data_inicio=inicio.isoformat(), data_fim=fim.isoformat()))
    html = render_template(
        'financeiro_pdf.html',
        inicio=inicio,
        fim=fim,
        resumo=relatorio_financeiro.calcular_resumo(vendas),
        linhas=relatorio_financeiro.linhas_relatorio(vendas),
        gerado_em=relatorio_financeiro.formatar_data(datetime.now()),
    )
    try:
        pdf = relatorio_financeiro.gerar_pdf(html, app.config.get('WKHTMLTOPDF_PATH'))
    except OSError:
        app.logger.exception('Falha ao gerar o PDF do relatório financeiro')
        flash('Não foi possível gerar o PDF: wkhtmltopdf não encontrado.', 'danger')
        return redirect(url_for('financeiro', periodo=nome, data_inicio=inicio.isoformat(), data_fim=fim.isoformat()))
    app.logger.info('Relatório financeiro %s a %s exportado por %s', inicio, fim, current_user.nome)
    response = make_response(pdf)
    response.headers['Content-Type'] = 'application/pdf'
    response.headers['Content-Disposition'] = f'attachment; filename={relatorio_financeiro.nome_arquivo(inicio, fim)}'
    return response


if __name__ == '__main__':
    with app.app_context():
        db.create_all()
    app.run(debug=True)
