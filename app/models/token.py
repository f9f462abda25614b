# app/models/token.py
"""
Este módulo define os modelos Pydantic relacionados à autenticação por token:
as credenciais de login, as respostas com o token JWT e o payload (claims)
contido dentro do token.
"""

# ========================
# --- Importações ---
# ========================
import uuid

from pydantic import BaseModel, Field

from app.models.base import CamelModel, RequestModel

# ========================
# --- Modelos Pydantic Token ---
# ========================
class LoginRequest(RequestModel):
    """
    Credenciais enviadas ao endpoint de login.
    `usernameOrEmail` é comparado tanto com o nome de usuário quanto com o e-mail.
    """
    username_or_email: str = Field(..., min_length=1, title="Nome de Usuário ou E-mail")
    password: str = Field(..., min_length=1, title="Senha")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"usernameOrEmail": "alice", "password": "secret1"}
            ]
        }
    }

class LoginResponse(CamelModel):
    """Resposta do login JSON: apenas o token."""
    token: str = Field(..., title="Token de Acesso JWT")

class Token(BaseModel):
    """
    Resposta no formato OAuth2 (`access_token`/`token_type`), usada pelo
    endpoint de formulário consumido pela documentação interativa.
    """
    access_token: str = Field(..., title="Token de Acesso JWT")
    token_type: str = Field(default="bearer", title="Tipo do Token")

class TokenPayload(BaseModel):
    """
    Claims contidas no token JWT.
    """
    sub: uuid.UUID = Field(..., title="ID do Usuário (Subject)")
    username: str = Field(..., title="Nome de Usuário")
    iat: int = Field(..., title="Timestamp de Emissão")
    exp: int = Field(..., title="Timestamp de Expiração")
