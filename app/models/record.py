# app/models/record.py
"""
Este módulo define os modelos Pydantic dos Registros de Monitoramento
(sessões enviadas pelo app móvel) e o filtro de período usado na listagem.
"""

# ========================
# --- Importações ---
# ========================
import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from app.models.base import CamelModel, RequestModel

# ========================
# --- Enumerações ---
# ========================
class RecordPeriod(str, Enum):
    """Janelas de tempo aceitas no filtro do histórico."""
    TODAY = "today"   # Desde 00:00 UTC de hoje.
    WEEK = "week"     # Desde segunda-feira 00:00 UTC.
    MONTH = "month"   # Desde o dia 1 do mês 00:00 UTC.

    def start(self, now: Optional[datetime] = None) -> datetime:
        """Retorna o instante inicial (UTC) da janela em relação a `now`."""
        now = now or datetime.now(timezone.utc)
        midnight = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        if self is RecordPeriod.TODAY:
            return midnight
        if self is RecordPeriod.WEEK:
            return midnight - timedelta(days=midnight.weekday())
        return midnight.replace(day=1)

# ========================
# --- Modelos Pydantic de Registro ---
# ========================
class RecordCreate(RequestModel):
    """
    Medições de uma sessão de monitoramento enviadas pelo cliente.
    """
    hours_monitored: float = Field(..., ge=0, title="Horas Monitoradas")
    total_events: int = Field(..., ge=0, title="Eventos Totais")
    critical_events: int = Field(..., ge=0, title="Eventos Críticos")
    motion: bool = Field(..., title="Movimento Detectado")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"hoursMonitored": 8, "totalEvents": 12, "criticalEvents": 3, "motion": True}
            ]
        }
    }

    @model_validator(mode="after")
    def check_critical_events(self) -> "RecordCreate":
        if self.critical_events > self.total_events:
            raise ValueError("criticalEvents não pode ser maior que totalEvents.")
        return self

    def average(self) -> float:
        """Percentual de eventos críticos sobre o total (0.0 quando não há eventos)."""
        if self.total_events == 0:
            return 0.0
        return round(self.critical_events / self.total_events * 100, 2)

class MonitoringRecord(CamelModel):
    """
    Registro de monitoramento como armazenado e retornado pela API.
    `id` é o número sequencial gerado pelo contador atômico.
    """
    id: int = Field(..., ge=1, title="ID Sequencial do Registro")
    user_id: uuid.UUID = Field(..., title="ID do Proprietário")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), title="Momento do Registro")
    hours_monitored: float
    total_events: int
    critical_events: int
    motion: bool
    average: float = Field(..., title="Percentual de Eventos Críticos")
