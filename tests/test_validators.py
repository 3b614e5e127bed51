import unittest

from validators import (
    validate_uuid, validate_page_name, validate_product_code,
    sanitize_search_term, validate_numeric_input, PAGINAS_VALIDAS,
)

UUID_V4 = '3f2b8c1e-9d4a-4b6f-a1c2-7e8d9f0a1b2c'
UUID_V1 = 'c232ab00-9414-11ec-b3c8-9f6bdeced846'


class ValidateUuidTest(unittest.TestCase):

    def test_aceita_v4_sem_alterar(self):
        self.assertEqual(validate_uuid(UUID_V4), UUID_V4)
        self.assertEqual(validate_uuid(UUID_V4.upper()), UUID_V4.upper())

    def test_rejeita_v1_e_valores_vazios(self):
        for valor in (UUID_V1, 'null', '', None, 'abc', 123):
            self.assertIsNone(validate_uuid(valor), valor)


class ValidatePageNameTest(unittest.TestCase):

    def test_pagina_desconhecida_vira_dashboard(self):
        self.assertEqual(validate_page_name('admin'), 'dashboard')
        self.assertEqual(validate_page_name(None), 'dashboard')

    def test_paginas_permitidas_inalteradas(self):
        for pagina in PAGINAS_VALIDAS:
            self.assertEqual(validate_page_name(pagina), pagina)


class ValidateProductCodeTest(unittest.TestCase):

    def test_aceita(self):
        self.assertTrue(validate_product_code('ABC12'))
        self.assertTrue(validate_product_code('abc12'))

    def test_rejeita(self):
        for codigo in ('AB123', 'ABCD1', 'abc1', '', None, 'ABC123'):
            self.assertFalse(validate_product_code(codigo), codigo)


class EntradaLivreTest(unittest.TestCase):

    def test_sanitize_search_term(self):
        self.assertEqual(sanitize_search_term('  <b>"arroz"</b> '), 'barroz/b')
        self.assertEqual(len(sanitize_search_term('x' * 300)), 100)
        self.assertEqual(sanitize_search_term(None), '')

    def test_validate_numeric_input(self):
        self.assertEqual(validate_numeric_input('12.5'), 12.5)
        self.assertEqual(validate_numeric_input('-3'), 0)
        self.assertEqual(validate_numeric_input('abc'), 0)
        self.assertEqual(validate_numeric_input(float('nan')), 0)
        self.assertEqual(validate_numeric_input(None), 0)
