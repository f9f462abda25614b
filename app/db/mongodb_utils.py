# app/db/mongodb_utils.py
"""
Conexão única (por processo) com o MongoDB do SR-Robot.

O lifespan de `app.main` abre o cliente Motor no startup e o fecha no
shutdown. As coleções `users`, `counters`, `records` e `events` são acessadas
pela instância entregue em `get_database`, que as rotas HTTP e o canal
WebSocket recebem como dependência (e que os testes sobrescrevem).
"""

# ========================
# --- Importações ---
# ========================
import logging
from typing import Optional
import motor.motor_asyncio
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

# --- Módulos da Aplicação ---
from app.core.config import settings

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Estado da Conexão ---
# ========================
db_client: Optional[AsyncIOMotorClient] = None
db_instance: Optional[AsyncIOMotorDatabase] = None

# ========================
# --- Abertura ---
# ========================
async def connect_to_mongo() -> Optional[AsyncIOMotorDatabase]:
    """
    Abre o cliente Motor e confirma o servidor com um `ping`.

    O cliente usa `tz_aware=True`: timestamps de registros e eventos voltam
    do banco em UTC, o que o filtro por período exige. Falhas são logadas e
    resultam em None (o lifespan segue e `/health` passa a responder 503).

    Returns:
        O banco `settings.DATABASE_NAME`, ou None se a conexão falhar.
    """
    global db_client, db_instance
    logger.info("Tentando conectar ao MongoDB...")
    try:
        db_client = motor.motor_asyncio.AsyncIOMotorClient(
            settings.MONGODB_URL,
            serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
            tz_aware=True
        )
        await db_client.admin.command('ping')
        logger.info("Comando ping para MongoDB bem-sucedido.")

        db_instance = db_client[settings.DATABASE_NAME]
        logger.info(f"Conectado com sucesso ao banco de dados: {settings.DATABASE_NAME}")
        return db_instance

    except Exception as e:
        logger.error(f"Não foi possível conectar ao MongoDB: {e}", exc_info=True)
        db_client = None
        db_instance = None
        return None

# ========================
# --- Fechamento ---
# ========================
async def close_mongo_connection():
    """Fecha o cliente aberto no startup; sem cliente, apenas registra um aviso."""
    global db_client, db_instance
    logger.info("Tentando fechar conexão com MongoDB...")
    if db_client:
        db_client.close()
        db_client = None
        db_instance = None
        logger.info("Conexão com MongoDB fechada.")
    else:
        logger.warning("Tentativa de fechar conexão com MongoDB, mas cliente não estava inicializado.")

# ========================
# --- Dependência FastAPI ---
# ========================
def get_database() -> AsyncIOMotorDatabase:
    """
    Dependência `DbDep` das rotas e do `/ws`.

    Raises:
        RuntimeError: Se o lifespan ainda não abriu a conexão.
    """
    if db_instance is None:
        logger.error("Tentativa de obter instância do DB antes da inicialização!")
        raise RuntimeError("A conexão com o banco de dados não foi inicializada.")
    return db_instance

# ========================
# --- Verificação de Saúde ---
# ========================
async def check_mongo_connection() -> bool:
    """Ping usado por `/health`: True se o banco responde pela conexão já aberta."""
    try:
        db = get_database()
        await db.command("ping")
        return True
    except Exception as e:
        logger.warning(f"Health check do MongoDB falhou: {e}")
        return False
