import io
from contextlib import redirect_stdout

import create_admin
from create_admin import criar_supervisor
from models import db, Funcionario
from tests.test_utils import AppTestCase


class CriarSupervisorTest(AppTestCase):

    def test_cria_uma_unica_vez(self):
        admin, criado = criar_supervisor(self.app, db)
        self.assertTrue(criado)
        _, criado_de_novo = criar_supervisor(self.app, db)
        self.assertFalse(criado_de_novo)

        admin = Funcionario.query.filter_by(telefone=self.app.config['ADMIN_TELEFONE']).one()
        self.assertTrue(admin.is_supervisor)
        self.assertTrue(admin.check_password(self.app.config['ADMIN_SENHA']))

    def test_script_mostra_telefone_do_supervisor(self):
        telefone = self.app.config['ADMIN_TELEFONE']
        saida = io.StringIO()
        with redirect_stdout(saida):
            create_admin.main()
        self.assertIn('Supervisor criado com sucesso!', saida.getvalue())
        self.assertIn(f'Telefone: {telefone}', saida.getvalue())

        saida = io.StringIO()
        with redirect_stdout(saida):
            create_admin.main()
        self.assertIn('Supervisor já existe', saida.getvalue())
        self.assertEqual(Funcionario.query.filter_by(telefone=telefone).count(), 1)
