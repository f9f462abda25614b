# app/models/base.py
"""
Configuração compartilhada pelos modelos expostos na API.

Os campos são declarados em snake_case no Python e trafegam em camelCase
no JSON (ex: `full_name` <-> `fullName`), formato usado pelo app móvel.
"""

# ========================
# --- Importações ---
# ========================
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# ========================
# --- Modelos Base ---
# ========================
class CamelModel(BaseModel):
    """Modelo de resposta: aceita os dois formatos de nome, serializa em camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

class RequestModel(CamelModel):
    """Modelo de entrada: rejeita campos desconhecidos antes de qualquer regra de negócio."""
    model_config = ConfigDict(extra="forbid")
