# app/main.py
"""
Ponto de entrada principal e configuração da aplicação FastAPI SR-Robot.
Define a instância da aplicação, middlewares, tratadores de erro, rotas,
ciclo de vida (lifespan) e o endpoint raiz. Também inclui o setup de logging inicial.
"""

# ========================
# --- Importações ---
# ========================
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# --- Módulos da Aplicação ---
from app.routers import auth, events, health, records, users, ws
from app.db.mongodb_utils import connect_to_mongo, close_mongo_connection
from app.db.user_crud import create_user_indexes
from app.db.record_crud import create_record_indexes
from app.db.event_crud import create_event_indexes
from app.core.config import Settings, settings
from app.core.exceptions import AppError
from app.core.logging_config import setup_logging

# ========================
# --- Configuração de Logging ---
# ========================
setup_logging(log_level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# ========================
# --- Função de Setup do Middleware CORS ---
# ========================
def _setup_cors_middleware(app_instance: FastAPI, current_settings: Settings):
    """Configura o middleware CORS para a aplicação."""
    if current_settings.CORS_ALLOWED_ORIGINS:
        logger.info(f"Configurando CORS para origens: {current_settings.CORS_ALLOWED_ORIGINS}")
        app_instance.add_middleware(
            CORSMiddleware,
            allow_origins=current_settings.CORS_ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        logger.warning(
            "Nenhuma origem CORS configurada (settings.CORS_ALLOWED_ORIGINS está vazia). "
            "O app móvel em modo web pode não conseguir acessar a API."
        )

# ========================
# --- Tratadores de Erro ---
# ========================
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Converte erros da aplicação em `{"detail": ...}` com o status da classe."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} em {request.url.path}: {exc.message} {exc.context}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=exc.headers,
    )

async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Corpo ou parâmetros inválidos respondem 400, com a lista de campos em `errors`."""
    fields = [".".join(str(part) for part in error.get("loc", ())[1:]) for error in exc.errors()]
    logger.debug(f"Requisição inválida em {request.url.path}: {fields}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Dados da requisição inválidos ou incompletos.", "errors": fields},
    )

# ========================
# --- Ciclo de Vida (Lifespan) ---
# ========================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gerencia o ciclo de vida da aplicação.

    Conecta ao MongoDB e cria índices no startup.
    Fecha a conexão com o MongoDB no shutdown.
    """
    logger.info("Iniciando ciclo de vida da aplicação...")
    db_connection = await connect_to_mongo()

    if db_connection is None:
        logger.critical("Falha fatal ao conectar ao MongoDB na inicialização. App pode não funcionar corretamente.")
        yield
        logger.info("Encerrando ciclo de vida (conexão DB falhou no início).")
        return

    app.state.db = db_connection

    try:
        logger.info("Tentando criar/verificar índices...")
        await create_user_indexes(db_connection)
        await create_record_indexes(db_connection)
        await create_event_indexes(db_connection)
        logger.info("Criação/verificação de índices concluída.")
    except Exception as e:
        logger.error(f"Erro durante a criação de índices: {e}", exc_info=True)

    logger.info("Aplicação iniciada e pronta.") # pragma: no cover
    yield # pragma: no cover

    logger.info("Iniciando processo de encerramento...")
    await close_mongo_connection()
    logger.info("Aplicação encerrada.")

# ========================
# --- Instância FastAPI ---
# ========================
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API de monitoramento do SR-Robot: contas, sessões JWT, registros sequenciais e eventos em tempo real.",
    version="0.1.0",
    lifespan=lifespan
)

# ========================
# --- Configuração de Middlewares e Erros ---
# ========================
_setup_cors_middleware(app, settings)
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# ========================
# --- Rotas (Routers) ---
# ========================
app.include_router(auth.router, prefix=settings.API_V1_STR + "/auth")
app.include_router(users.router, prefix=settings.API_V1_STR)
app.include_router(records.router, prefix=settings.API_V1_STR)
app.include_router(events.router, prefix=settings.API_V1_STR)
app.include_router(ws.router)
app.include_router(health.router)

# ========================
# --- Endpoint Raiz ---
# ========================
@app.get("/", tags=["Root"])
async def read_root():
    """Endpoint raiz para verificar se a API está online."""
    return {"message": f"Bem-vindo à {settings.PROJECT_NAME}!"}

# ========================
# --- Execução (Uvicorn) ---
# ========================
if __name__ == "__main__": # pragma: no cover
    import uvicorn # pragma: no cover
    logger.info("Iniciando servidor Uvicorn para desenvolvimento...") # pragma: no cover
    uvicorn.run( # pragma: no cover
        "app.main:app", # pragma: no cover
        host="0.0.0.0", # pragma: no cover
        port=8000, # pragma: no cover
        reload=True, # pragma: no cover
        log_level=settings.LOG_LEVEL.lower() # pragma: no cover
    )
