# app/db/user_crud.py
"""
Módulo contendo as operações de persistência da coleção de usuários no MongoDB.
Inclui também a criação dos índices de unicidade.

Falhas do driver são convertidas em `ServiceError` com o nome da operação;
o registro completo do erro fica apenas no log.
"""

# ========================
# --- Importações ---
# ========================
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pydantic import EmailStr, TypeAdapter, ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

# --- Módulos da Aplicação ---
from app.core.exceptions import ServiceError
from app.core.security import get_password_hash
from app.models.user import UserCreate, UserInDB

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)
USERS_COLLECTION = "users"

# Mesmo validador do campo `email` de UserCreate (domínio em minúsculas).
_email_adapter = TypeAdapter(EmailStr)

# ========================
# --- Funções Auxiliares (Internas) ---
# ========================
def _get_users_collection(db: AsyncIOMotorDatabase) -> AsyncIOMotorCollection:
    """Retorna a coleção de usuários do banco de dados."""
    return db[USERS_COLLECTION]

def _normalize_login_email(identifier: str) -> str:
    """Normaliza o identificador como o e-mail foi normalizado no registro; se não for e-mail, devolve como veio."""
    try:
        return _email_adapter.validate_python(identifier)
    except ValidationError:
        return identifier

async def _find_one_user(db: AsyncIOMotorDatabase, query: Dict[str, Any], operation: str) -> Optional[UserInDB]:
    collection = _get_users_collection(db)
    try:
        user_dict = await collection.find_one(query)
    except PyMongoError as e:
        logger.error(f"DB Error em {operation}: {e}", exc_info=True)
        raise ServiceError(operation) from e

    if user_dict is None:
        return None
    user_dict.pop('_id', None)
    try:
        return UserInDB.model_validate(user_dict)
    except ValidationError as e:
        logger.error(f"DB Validation error {operation} (id: {user_dict.get('id', 'N/A')}): {e}")
        return None

# ========================
# --- Operações CRUD para Usuários ---
# ========================
async def get_user_by_id(db: AsyncIOMotorDatabase, user_id: uuid.UUID) -> Optional[UserInDB]:
    """
    Busca um usuário pelo seu ID (UUID).

    Returns:
        Um objeto UserInDB se o usuário for encontrado e válido, None caso contrário.
    """
    return await _find_one_user(db, {"id": str(user_id)}, "get_user_by_id")

async def get_user_by_login(db: AsyncIOMotorDatabase, identifier: str) -> Optional[UserInDB]:
    """
    Busca um usuário cujo nome de usuário OU e-mail seja igual a `identifier`.

    Args:
        db: Instância da conexão com o banco de dados.
        identifier: Nome de usuário ou e-mail informado no login.
    """
    query = {"$or": [{"username": identifier}, {"email": _normalize_login_email(identifier)}]}
    return await _find_one_user(db, query, "get_user_by_login")

async def find_conflicting_user(db: AsyncIOMotorDatabase, username: str, email: str) -> Optional[UserInDB]:
    """
    Busca, em uma única consulta, um usuário que já use o e-mail OU o nome de usuário.

    Returns:
        O usuário conflitante, ou None se ambos estiverem livres.
    """
    query = {"$or": [{"email": email}, {"username": username}]}
    return await _find_one_user(db, query, "find_conflicting_user")

async def create_user(db: AsyncIOMotorDatabase, user_in: UserCreate) -> UserInDB:
    """
    Cria um novo usuário no banco de dados.

    Gera um UUID para o usuário e hasheia a senha em uma thread separada
    (bcrypt é CPU-bound) antes de inserir o documento.

    Returns:
        O UserInDB criado.

    Raises:
        DuplicateKeyError: Se o índice único de username/email rejeitar o documento.
        ServiceError: Para outras falhas do banco.
    """
    hashed_password = await run_in_threadpool(get_password_hash, user_in.password)
    user_db_obj = UserInDB(
        id=uuid.uuid4(),
        full_name=user_in.full_name,
        email=user_in.email,
        username=user_in.username,
        hashed_password=hashed_password,
        created_at=datetime.now(timezone.utc),
    )
    user_db_dict = user_db_obj.model_dump(mode="json")
    collection = _get_users_collection(db)

    try:
        await collection.insert_one(user_db_dict)
    except DuplicateKeyError:
        logger.warning(f"Tentativa de criar usuário com username ou email duplicado: {user_in.username} / {user_in.email}")
        raise
    except PyMongoError as e:
        logger.error(f"Erro ao inserir usuário {user_in.username} no DB: {e}", exc_info=True)
        raise ServiceError("create_user") from e

    logger.info(f"Usuário {user_db_obj.id} ('{user_db_obj.username}') criado.")
    return user_db_obj

# ========================
# --- Configuração de Índices do Banco de Dados ---
# ========================
async def create_user_indexes(db: AsyncIOMotorDatabase):
    """
    Cria os índices da coleção de usuários, garantindo unicidade de
    `id`, `username` e `email`. Chamada na inicialização da aplicação.
    """
    collection = _get_users_collection(db)
    try:
        await collection.create_index("id", unique=True, name="user_id_unique_idx")
        await collection.create_index("username", unique=True, name="username_unique_idx")
        await collection.create_index("email", unique=True, name="email_unique_idx")
        logger.info("Índices da coleção 'users' ('id', 'username', 'email') verificados/criados com sucesso.")
    except Exception as e:
        logger.error(f"Erro ao criar índices para a coleção 'users': {e}", exc_info=True)
