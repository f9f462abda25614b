# app/models/event.py
"""
Modelos Pydantic dos Eventos de Monitoramento (alertas pontuais gerados
pelo dispositivo, ex: detecção de movimento ou queda de sinal).
"""

# ========================
# --- Importações ---
# ========================
import uuid
from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import Field, StringConstraints

from app.models.base import CamelModel, RequestModel

ShortText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]

# ========================
# --- Modelos Pydantic de Evento ---
# ========================
class EventCreate(RequestModel):
    """Dados de um novo evento. O proprietário vem sempre do token."""
    event_type: ShortText = Field(..., title="Tipo do Evento")
    event_value: float = Field(..., title="Valor Medido")
    status: ShortText = Field(..., title="Status do Evento")
    description: Optional[str] = Field(None, max_length=500, title="Descrição")
    created_at: Optional[datetime] = Field(None, title="Momento do Evento (padrão: agora)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"eventType": "motion", "eventValue": 1, "status": "critical", "description": "Movimento na sala"}
            ]
        }
    }

class MonitoringEvent(CamelModel):
    """Evento como armazenado e retornado pela API."""
    id: uuid.UUID
    user_id: uuid.UUID
    event_type: str
    event_value: float
    status: str
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
