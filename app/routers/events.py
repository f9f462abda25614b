# app/routers/events.py
"""
Rotas dos Eventos de Monitoramento (alertas pontuais do dispositivo).
"""

# ========================
# --- Importações ---
# ========================
from typing import Annotated, List

from fastapi import APIRouter, BackgroundTasks, Body, status

# --- Módulos da Aplicação ---
from app.core.dependencies import CurrentClaims, DbDep
from app.core.notifications import EVENT_NEW_EVENT, publish_event
from app.db import event_crud
from app.models.event import EventCreate, MonitoringEvent

# ========================
# --- Configuração do Router ---
# ========================
router = APIRouter(
    prefix="/events",
    tags=["Events"],
    responses={
        status.HTTP_401_UNAUTHORIZED: {"description": "Token ausente."},
        status.HTTP_403_FORBIDDEN: {"description": "Token inválido ou expirado."},
    },
)

@router.post(
    "",
    response_model=MonitoringEvent,
    status_code=status.HTTP_201_CREATED,
    summary="Registra um evento para o usuário autenticado",
)
async def create_event(
    event_in: Annotated[EventCreate, Body(description="Dados do evento.")],
    db: DbDep,
    claims: CurrentClaims,
    background_tasks: BackgroundTasks
):
    """O proprietário do evento é sempre o usuário do token."""
    event = await event_crud.create_event(db=db, user_id=claims.sub, event_in=event_in)
    background_tasks.add_task(publish_event, EVENT_NEW_EVENT, event.model_dump(mode="json", by_alias=True))
    return event

@router.get(
    "",
    response_model=List[MonitoringEvent],
    summary="Lista os eventos do usuário autenticado (mais recentes primeiro)",
)
async def list_events(db: DbDep, claims: CurrentClaims):
    return await event_crud.get_events_by_owner(db=db, user_id=claims.sub)
