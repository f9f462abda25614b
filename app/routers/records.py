# app/routers/records.py
"""
Este módulo define as rotas dos Registros de Monitoramento: criação de uma
sessão monitorada (com ID sequencial) e consulta do histórico do usuário.
As rotas são protegidas pelo token Bearer. Cada registro criado é
publicado em segundo plano para os clientes conectados.
"""

# ========================
# --- Importações ---
# ========================
import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Query, status

# --- Módulos da Aplicação ---
from app.core.dependencies import CurrentClaims, DbDep
from app.core.notifications import EVENT_NEW_RECORD, publish_event
from app.db import record_crud
from app.models.record import MonitoringRecord, RecordCreate, RecordPeriod

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Configuração do Router ---
# ========================
router = APIRouter(
    prefix="/records",
    tags=["Records"],
    responses={
        status.HTTP_401_UNAUTHORIZED: {"description": "Token ausente."},
        status.HTTP_403_FORBIDDEN: {"description": "Token inválido ou expirado."},
    },
)

# ========================
# --- Endpoint: Criar Registro ---
# ========================
@router.post(
    "",
    response_model=MonitoringRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Cria um registro de monitoramento para o usuário autenticado",
    description=(
        "Recebe as medições de uma sessão, gera o ID numérico no contador atômico, "
        "calcula o percentual de eventos críticos e publica o evento `newRecord`."
    ),
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "Falha ao gerar o ID ou ao salvar o registro."}},
)
async def create_record(
    record_in: Annotated[RecordCreate, Body(description="Medições da sessão de monitoramento.")],
    db: DbDep,
    claims: CurrentClaims,
    background_tasks: BackgroundTasks
):
    record = await record_crud.create_record(db=db, user_id=claims.sub, record_in=record_in)
    background_tasks.add_task(publish_event, EVENT_NEW_RECORD, record.model_dump(mode="json", by_alias=True))
    logger.debug(f"Publicação de '{EVENT_NEW_RECORD}' para o registro {record.id} adicionada ao background.")
    return record

# ========================
# --- Endpoint: Listar Registros ---
# ========================
@router.get(
    "",
    response_model=List[MonitoringRecord],
    summary="Lista o histórico de registros do usuário autenticado",
    description="Ordenado do mais recente para o mais antigo. `period` limita a hoje, à semana ou ao mês corrente (UTC).",
)
async def list_records(
    db: DbDep,
    claims: CurrentClaims,
    period: Annotated[Optional[RecordPeriod], Query(description="Janela de tempo: today, week ou month.")] = None,
):
    records = await record_crud.get_records_by_owner(db=db, user_id=claims.sub, period=period)
    logger.debug(f"Encontrados {len(records)} registros para usuário {claims.sub} (period={period}).")
    return records
