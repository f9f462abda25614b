# app/core/security.py
"""
Módulo responsável pelas primitivas de segurança da aplicação:
hashing de senhas (bcrypt via Passlib) e emissão/validação de tokens JWT.

O segredo de assinatura não é lido de estado global aqui: ele é entregue ao
`TokenSigner` na construção (ver `app.core.dependencies.get_token_signer`).
"""

# ========================
# --- Importações ---
# ========================
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Union

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError

# --- Módulos da Aplicação ---
from app.models.token import TokenPayload

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Configuração Hashing de Senha ---
# ========================
# Contexto Passlib para hashing e verificação de senhas usando bcrypt (salt por hash).
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# ========================
# --- Funções de Senha ---
# ========================
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica se uma senha em texto plano corresponde a um hash armazenado.

    Args:
        plain_password: A senha fornecida pelo usuário (texto plano).
        hashed_password: O hash da senha armazenado.

    Returns:
        True se a senha corresponder ao hash, False caso contrário.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Ocorre se o formato do hash for inválido para o passlib
        logger.warning("Tentativa de verificar senha com hash em formato inválido.")
        return False

def get_password_hash(password: str) -> str:
    """
    Gera um hash seguro (bcrypt) para uma senha fornecida.

    Args:
        password: A senha em texto plano a ser hasheada.

    Returns:
        A string do hash bcrypt gerado.
    """
    return pwd_context.hash(password)

def dummy_verify_password() -> None:
    """Executa uma verificação com custo equivalente, sem hash real (conta inexistente)."""
    pwd_context.dummy_verify()

# ========================
# --- Assinatura de Tokens JWT ---
# ========================
class TokenSigner:
    """
    Emite e valida tokens JWT assinados com um segredo do servidor.

    Args:
        secret_key: Segredo HMAC usado na assinatura.
        algorithm: Algoritmo JWT (padrão HS256).
        expire_minutes: Validade do token a partir da emissão.
        clock: Fonte do instante atual (UTC); padrão é `datetime.now(timezone.utc)`.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
        clock: Optional[Callable[[], datetime]] = None
    ):
        if not secret_key:
            raise ValueError("O segredo de assinatura JWT não pode ser vazio.")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expire_minutes)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def create_access_token(
        self,
        subject: Union[str, Any],
        username: str,
        issued_at: Optional[datetime] = None
    ) -> str:
        """
        Cria um novo token de acesso JWT.

        Args:
            subject: Identificador único do usuário (claim 'sub').
            username: Nome de usuário.
            issued_at: Momento de emissão; padrão é agora (UTC).

        Returns:
            O token JWT codificado como uma string.
        """
        issued_at = issued_at or self._clock()
        to_encode = {
            "sub": str(subject),
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self.expires_delta,
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str, now: Optional[datetime] = None) -> Optional[TokenPayload]:
        """
        Decodifica e valida um token JWT.

        Verifica assinatura e estrutura do payload (via Pydantic). A expiração é
        conferida aqui contra `now`, e não pela biblioteca, para que o relógio
        possa ser injetado.

        Args:
            token: A string do token JWT.
            now: Instante de referência para a expiração; padrão é o relógio do assinador.

        Returns:
            TokenPayload se o token for válido e não expirado, None caso contrário.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False}
            )
            token_data = TokenPayload.model_validate(payload)
        except (JWTError, ValidationError) as e:
            logger.info(f"Token JWT rejeitado: {type(e).__name__}")
            return None

        now = now or self._clock()
        if now >= datetime.fromtimestamp(token_data.exp, tz=timezone.utc):
            logger.info(f"Token JWT expirado para usuário '{token_data.username}'.")
            return None
        return token_data
