# pixcheckout/utils/logger.py

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pixcheckout.config.settings import LOG_DIR as SETTINGS_LOG_DIR

# Caminho da pasta logs/
BASE_DIR = Path(__file__).resolve().parent.parent
LOG_DIR = Path(SETTINGS_LOG_DIR) if SETTINGS_LOG_DIR else BASE_DIR / "logs"
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_FILE = LOG_DIR / "app.log"

# Instância do logger
logger = logging.getLogger("pixcheckout")
logger.setLevel(logging.INFO)


class PrometheusLogHandler(logging.Handler):
    """Handler que contabiliza os registros de log nas métricas Prometheus."""

    def emit(self, record):
        from pixcheckout.utils.prometheus_metrics import record_log

        record_log(record.levelname)


# Evita duplicar handlers se importar várias vezes
if not logger.handlers:
    formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s")

    # Handler para arquivo com rotação
    file_handler = RotatingFileHandler(
        filename=LOG_FILE,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.addHandler(PrometheusLogHandler())
