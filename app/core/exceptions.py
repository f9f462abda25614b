# app/core/exceptions.py
"""
Hierarquia de exceções de domínio da aplicação.

Cada exceção carrega o status HTTP e uma mensagem curta, segura para ser
exibida ao cliente. O handler registrado em `app.main` converte essas
exceções em respostas JSON `{"detail": ...}`.
"""

# ========================
# --- Importações ---
# ========================
from typing import Any, Dict, Optional

from fastapi import status

# ========================
# --- Exceção Base ---
# ========================
class AppError(Exception):
    """Erro base da aplicação, com status HTTP e mensagem para o cliente."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Ocorreu um erro interno no servidor."

    def __init__(self, message: Optional[str] = None, *, context: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None

# ========================
# --- Erros do Cliente (4xx) ---
# ========================
class ValidationError(AppError):
    """Entrada ausente ou malformada."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Todos os campos são obrigatórios."

class ConflictError(AppError):
    """Violação de unicidade (e-mail ou nome de usuário já registrado)."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Já existe um usuário com este e-mail ou nome de usuário."

class NotFoundError(AppError):
    """Entidade referenciada não existe."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Recurso não encontrado."

class AuthenticationError(AppError):
    """
    Falha de autenticação.

    O motivo define o status: credenciais erradas e token ausente resultam em 401,
    token inválido ou expirado resulta em 403. A mensagem de credenciais é a mesma
    para conta inexistente e senha incorreta.
    """
    BAD_CREDENTIALS = "credentials"
    MISSING = "missing"
    INVALID = "invalid"

    _messages = {
        BAD_CREDENTIALS: "Credenciais inválidas.",
        MISSING: "Token de acesso não fornecido.",
        INVALID: "Token inválido ou expirado.",
    }

    def __init__(self, reason: str = BAD_CREDENTIALS):
        if reason not in self._messages:
            raise ValueError(f"Motivo de autenticação desconhecido: {reason}")
        self.reason = reason
        self.status_code = (
            status.HTTP_403_FORBIDDEN if reason == self.INVALID else status.HTTP_401_UNAUTHORIZED
        )
        super().__init__(self._messages[reason])

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        if self.status_code == status.HTTP_401_UNAUTHORIZED:
            return {"WWW-Authenticate": "Bearer"}
        return None

# ========================
# --- Erros de Infraestrutura (5xx) ---
# ========================
class ServiceError(AppError):
    """Falha de armazenamento ou infraestrutura; o cliente pode tentar novamente."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Serviço temporariamente indisponível. Tente novamente."

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        super().__init__(message, context={"operation": operation})

class AllocationError(ServiceError):
    """O contador atômico de sequência não pôde ser incrementado."""
    default_message = "Não foi possível gerar o identificador do registro. Tente novamente."

    def __init__(self, sequence_name: str):
        self.sequence_name = sequence_name
        super().__init__(operation=f"next_sequence_value:{sequence_name}")
