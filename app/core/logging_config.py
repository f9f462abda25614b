# app/core/logging_config.py
"""
Configuração do sistema de logging da aplicação utilizando Loguru.
O InterceptHandler redireciona os logs do `logging` padrão (FastAPI, Uvicorn,
PyMongo) para o Loguru, mantendo um único formato de saída.
"""

# ========================
# --- Importações ---
# ========================
import logging
import sys
from loguru import logger as loguru_logger

# ========================
# --- Constantes ---
# ========================
LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

# Bibliotecas muito verbosas em DEBUG (heartbeats do driver, conexões HTTP).
NOISY_LOGGERS = ("pymongo", "httpx", "httpcore", "passlib")

# ========================
# --- Handler de Intercepção ---
# ========================
class InterceptHandler(logging.Handler):
    """
    Handler do `logging` que redireciona mensagens para o Loguru,
    preservando o nível e a origem da chamada.
    """
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while hasattr(frame, "f_code") and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back # pragma: no cover
            if frame is None: # pragma: no cover
                break # pragma: no cover
            depth += 1 # pragma: no cover

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())

# ========================
# --- Função de Setup ---
# ========================
def setup_logging(log_level: str = "INFO"):
    """
    Configura o logging global da aplicação.

    - Substitui os handlers do Loguru por um único sink em `sys.stderr`.
    - Faz o `logging` padrão passar pelo `InterceptHandler`.
    - Reduz o volume de bibliotecas ruidosas para WARNING.

    Args:
        log_level: Nível mínimo de log a ser exibido (ex: "INFO", "DEBUG").
    """
    log_level = log_level.upper()

    loguru_logger.remove()
    loguru_logger.add(
        sys.stderr,
        level=log_level,
        format=LOG_FORMAT,
        enqueue=True,
        diagnose=False   # Evita expor valores de variáveis locais (senhas, tokens) nos tracebacks
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    logging.getLogger("uvicorn.access").disabled = True
    logging.getLogger("uvicorn.error").propagate = False

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
