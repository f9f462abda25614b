# app/core/session.py
"""
Gerenciador de credenciais e sessões.

Concentra o registro de usuários, a verificação de credenciais, a emissão e
validação de tokens de sessão e a leitura do perfil. As sessões não têm estado
no servidor: o token assinado é a sessão inteira e vale até expirar.
"""

# ========================
# --- Importações ---
# ========================
import logging
import uuid
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

# --- Módulos da Aplicação ---
from app.core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from app.core.security import TokenSigner, dummy_verify_password, verify_password
from app.db import user_crud
from app.models.token import TokenPayload
from app.models.user import UserCreate, UserInDB, UserProfile

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Gerenciador de Sessão ---
# ========================
class SessionManager:
    """
    Args:
        db: Banco com a coleção de usuários.
        tokens: Assinador JWT já configurado com o segredo do servidor.
    """

    def __init__(self, db: AsyncIOMotorDatabase, tokens: TokenSigner):
        self.db = db
        self.tokens = tokens

    async def register(self, user_in: UserCreate) -> UserInDB:
        """
        Registra um novo usuário.

        Raises:
            ConflictError: Se o e-mail ou o nome de usuário já estiverem em uso.
        """
        existing = await user_crud.find_conflicting_user(self.db, username=user_in.username, email=user_in.email)
        if existing is not None:
            logger.info(f"Registro recusado: e-mail ou username já em uso ('{user_in.username}').")
            raise ConflictError()

        try:
            return await user_crud.create_user(self.db, user_in)
        except DuplicateKeyError as e:
            # Outro registro com os mesmos dados entrou entre a consulta e a inserção.
            raise ConflictError() from e

    async def authenticate(self, username_or_email: str, password: str) -> str:
        """
        Verifica as credenciais e emite um token de acesso.

        O login aceita nome de usuário ou e-mail. Conta inexistente e senha
        errada levantam o mesmo erro.

        Returns:
            O token JWT assinado.

        Raises:
            ValidationError: Se algum campo estiver vazio.
            AuthenticationError: Se as credenciais não conferirem.
        """
        if not username_or_email or not password:
            raise ValidationError("Informe usuário (ou e-mail) e senha.")

        user = await user_crud.get_user_by_login(self.db, username_or_email)
        if user is None:
            await run_in_threadpool(dummy_verify_password)
            logger.info("Falha de login: credenciais inválidas.")
            raise AuthenticationError(AuthenticationError.BAD_CREDENTIALS)

        if not await run_in_threadpool(verify_password, password, user.hashed_password):
            logger.info("Falha de login: credenciais inválidas.")
            raise AuthenticationError(AuthenticationError.BAD_CREDENTIALS)

        logger.info(f"Usuário {user.id} autenticado.")
        return self.tokens.create_access_token(subject=user.id, username=user.username)

    def verify_token(self, token: Optional[str]) -> TokenPayload:
        """
        Valida um token de acesso e retorna suas claims.

        Raises:
            AuthenticationError: MISSING se não houver token, INVALID se a
                assinatura não conferir ou o token estiver expirado.
        """
        if not token:
            raise AuthenticationError(AuthenticationError.MISSING)
        payload = self.tokens.decode_token(token)
        if payload is None:
            raise AuthenticationError(AuthenticationError.INVALID)
        return payload

    async def get_profile(self, user_id: uuid.UUID) -> UserProfile:
        """
        Raises:
            NotFoundError: Se o usuário não existir.
        """
        user = await user_crud.get_user_by_id(self.db, user_id)
        if user is None:
            raise NotFoundError("Usuário não encontrado.")
        return UserProfile(full_name=user.full_name, username=user.username, email=user.email)
