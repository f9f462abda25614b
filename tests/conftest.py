# tests/conftest.py
# Inibir warnings de depreciação de bibliotecas
import warnings
warnings.filterwarnings("ignore", category=DeprecationWarning, module="passlib")

# ========================
# --- Configuração do Ambiente de Teste ---
# ========================
# Precisa acontecer antes de qualquer import de `app`, pois `Settings()` é
# instanciado na importação de `app.core.config`.
import os
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("DATABASE_NAME", "srrobot_test_db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-pytest")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

"""
Este módulo define fixtures do Pytest compartilhadas pela suíte de testes da
API SR-Robot.

Fixtures incluem:
- Banco MongoDB em memória (`test_db`, via mongomock-motor), novo a cada teste.
- Cliente HTTP assíncrono (`test_async_client`) com a dependência `get_database`
  sobrescrita para o banco em memória. O lifespan da aplicação não é executado,
  então nenhum MongoDB real é necessário.
- Dados de teste para usuários (User A e User B) e fixtures que os registram,
  fazem login e devolvem token e cabeçalhos de autenticação.
"""

# ========================
# --- Importações ---
# ========================
import logging
import uuid
from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from fastapi import status
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

# --- Módulos da Aplicação ---
from app.core.config import settings
from app.core.dependencies import get_token_signer
from app.db.mongodb_utils import get_database
from app.db.user_crud import create_user_indexes
from app.main import app as fastapi_app

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)

REGISTER_URL = f"{settings.API_V1_STR}/auth/register"
LOGIN_URL = f"{settings.API_V1_STR}/auth/login"
ME_URL = f"{settings.API_V1_STR}/users/me"
RECORDS_URL = f"{settings.API_V1_STR}/records"
EVENTS_URL = f"{settings.API_V1_STR}/events"

# ========================
# --- Fixture: Banco em Memória ---
# ========================
@pytest_asyncio.fixture(scope="function")
async def test_db():
    """
    Banco MongoDB em memória, isolado por teste, com os índices únicos de
    usuários já criados (para exercitar o DuplicateKeyError).
    """
    client = AsyncMongoMockClient()
    db = client[settings.DATABASE_NAME]
    await create_user_indexes(db)
    return db

# ========================
# --- Fixture Principal: Cliente de Teste HTTP ---
# ========================
@pytest_asyncio.fixture(scope="function")
async def test_async_client(test_db) -> AsyncGenerator[AsyncClient, None]:
    """
    Fornece um `AsyncClient` ligado à aplicação via `ASGITransport`, com
    `get_database` apontando para o banco em memória.

    Yields:
        AsyncClient: Uma instância do cliente HTTP assíncrona.
    """
    fastapi_app.dependency_overrides[get_database] = lambda: test_db
    try:
        transport = ASGITransport(app=fastapi_app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            logger.debug("Fixture 'test_async_client': Cliente HTTP fornecido ao teste.")
            yield client
    finally:
        fastapi_app.dependency_overrides.pop(get_database, None)

# ========================
# --- Helpers de Usuário ---
# ========================
async def register_and_login(client: AsyncClient, user_data: Dict[str, str]) -> str:
    """Registra o usuário (tolerando 409) e retorna o token do login."""
    reg_response = await client.post(REGISTER_URL, json=user_data)
    if reg_response.status_code not in (status.HTTP_201_CREATED, status.HTTP_409_CONFLICT):
        pytest.fail(f"Falha inesperada ao registrar '{user_data['username']}': {reg_response.status_code} - {reg_response.text}")

    login_payload = {"usernameOrEmail": user_data["username"], "password": user_data["password"]}
    login_response = await client.post(LOGIN_URL, json=login_payload)
    if login_response.status_code != status.HTTP_200_OK:
        pytest.fail(f"Falha ao fazer login com '{user_data['username']}': {login_response.status_code} - {login_response.text}")
    return login_response.json()["token"]

# ========================
# --- Fixtures para Usuário de Teste A ---
# ========================
user_a_data: Dict[str, str] = {
    "fullName": "Alice Souza",
    "email": "alice@example.com",
    "username": "alice",
    "password": "secret1",
}

@pytest_asyncio.fixture(scope="function")
async def test_user_a_token_and_id(test_async_client: AsyncClient) -> tuple[str, uuid.UUID]:
    """
    Registra e faz login do Usuário A.

    Returns:
        tuple[str, uuid.UUID]: (token, user_id) do Usuário A.
    """
    token = await register_and_login(test_async_client, user_a_data)
    claims = get_token_signer().decode_token(token)
    assert claims is not None
    return token, claims.sub

@pytest.fixture(scope="function")
def auth_headers_a(test_user_a_token_and_id: tuple[str, uuid.UUID]) -> Dict[str, str]:
    """Cabeçalhos `Authorization: Bearer` do Usuário A."""
    token, _ = test_user_a_token_and_id
    return {"Authorization": f"Bearer {token}"}

# ========================
# --- Fixtures para Usuário de Teste B ---
# ========================
user_b_data: Dict[str, str] = {
    "fullName": "Bruno Lima",
    "email": "bruno@example.com",
    "username": "bruno",
    "password": "secret2",
}

@pytest_asyncio.fixture(scope="function")
async def test_user_b_token(test_async_client: AsyncClient) -> str:
    """Registra e faz login do Usuário B, retornando apenas o token."""
    return await register_and_login(test_async_client, user_b_data)

@pytest.fixture(scope="function")
def auth_headers_b(test_user_b_token: str) -> Dict[str, str]:
    """Cabeçalhos `Authorization: Bearer` do Usuário B."""
    return {"Authorization": f"Bearer {test_user_b_token}"}

# ========================
# --- Dados de Exemplo ---
# ========================
@pytest.fixture
def record_payload() -> Dict[str, object]:
    return {"hoursMonitored": 8, "totalEvents": 12, "criticalEvents": 3, "motion": True}
