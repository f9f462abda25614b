# app/models/user.py
"""
Este módulo define os modelos Pydantic para a entidade Usuário (User):
o payload de registro, a representação armazenada no banco de dados e as
representações públicas devolvidas pela API (sem a senha hasheada).
"""

# ========================
# --- Importações ---
# ========================
import uuid
from datetime import datetime, timezone
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from app.models.base import CamelModel, RequestModel

# Texto obrigatório: espaços nas pontas são removidos e o resultado não pode ser vazio.
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]

# ========================
# --- Modelos Pydantic de User ---
# ========================

# --- Modelo para Registro ---
class UserCreate(RequestModel):
    """
    Dados necessários para registrar um novo usuário.
    Todos os campos são obrigatórios; a senha é hasheada antes de ser salva.
    """
    full_name: RequiredText = Field(..., title="Nome Completo")
    email: EmailStr = Field(..., title="Endereço de E-mail", description="Deve ser um e-mail válido e único.")
    username: RequiredText = Field(..., title="Nome de Usuário", description="Nome de usuário único.")
    password: str = Field(..., title="Senha", min_length=1, max_length=72, description="Senha (será hasheada antes de salvar).")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "fullName": "Alice Souza",
                    "email": "alice@x.com",
                    "username": "alice",
                    "password": "secret1"
                }
            ]
        }
    }

# --- Modelo Armazenado ---
class UserInDB(BaseModel):
    """
    Representação completa de um usuário como armazenado no banco de dados.
    Inclui a senha hasheada e é usado apenas internamente.
    """
    id: uuid.UUID = Field(..., title="ID Único do Usuário")
    full_name: str
    email: EmailStr
    username: str
    hashed_password: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True)

# --- Modelos de Resposta ---
class UserProfile(CamelModel):
    """Perfil exposto ao próprio usuário: nome completo, nome de usuário e e-mail."""
    full_name: str
    username: str
    email: EmailStr

class UserPublic(UserProfile):
    """Usuário recém-registrado, com o identificador atribuído."""
    id: uuid.UUID
