# app/core/dependencies.py
"""
Define as dependências reutilizáveis para a aplicação FastAPI:
acesso ao banco, assinador de tokens, gerenciador de sessão e a
validação do token Bearer que protege as rotas.
"""

# ========================
# --- Importações ---
# ========================
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

# --- Módulos da Aplicação ---
from app.core.config import settings
from app.core.security import TokenSigner
from app.core.session import SessionManager
from app.db.mongodb_utils import get_database
from app.models.token import TokenPayload

# ========================
# --- Esquema OAuth2 ---
# ========================
# Extrai o token do header 'Authorization: Bearer <token>'. Com auto_error=False a
# ausência do token é tratada pelo SessionManager (401), e não pelo FastAPI.
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login/access-token",
    auto_error=False
)

# ========================
# --- Fábricas ---
# ========================
def get_token_signer() -> TokenSigner:
    """Constrói o assinador JWT com o segredo e a validade configurados."""
    return TokenSigner(
        secret_key=settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )

DbDep = Annotated[AsyncIOMotorDatabase, Depends(get_database)]
SignerDep = Annotated[TokenSigner, Depends(get_token_signer)]
TokenDep = Annotated[Optional[str], Depends(oauth2_scheme)]

def get_session_manager(db: DbDep, signer: SignerDep) -> SessionManager:
    return SessionManager(db=db, tokens=signer)

SessionDep = Annotated[SessionManager, Depends(get_session_manager)]

# ========================
# --- Dependência: Claims do Token ---
# ========================
async def get_current_claims(session: SessionDep, token: TokenDep) -> TokenPayload:
    """
    Valida o token Bearer da requisição e retorna suas claims (id e username).

    Raises:
        AuthenticationError: 401 sem token, 403 com token inválido ou expirado.
    """
    return session.verify_token(token)

# Injeta as claims validadas do chamador nos endpoints protegidos.
CurrentClaims = Annotated[TokenPayload, Depends(get_current_claims)]
