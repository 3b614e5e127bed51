import logging
import logging.handlers
import os

FORMATO = '%(asctime)s %(levelname)s %(name)s: %(message)s'
NOME_ARQUIVO = 'cpb_stock.log'


def configurar_logging(app):
    """Configura o log da aplicação: console e arquivo rotativo em LOG_DIR.

    Os módulos de serviço usam logging.getLogger(__name__); os handlers ficam
    no logger raiz para que eles e o app.logger escrevam no mesmo lugar.
    """
    nivel = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    formato = logging.Formatter(FORMATO)
    raiz = logging.getLogger()
    raiz.setLevel(nivel)

    if not any(getattr(h, '_cpb_stock', False) for h in raiz.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formato)
        console._cpb_stock = True
        raiz.addHandler(console)

        log_dir = app.config.get('LOG_DIR')
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            arquivo = logging.handlers.RotatingFileHandler(
                os.path.join(log_dir, NOME_ARQUIVO), maxBytes=5_000_000, backupCount=3, encoding='utf-8'
            )
            arquivo.setFormatter(formato)
            arquivo._cpb_stock = True
            raiz.addHandler(arquivo)

    app.logger.setLevel(nivel)
    return raiz
