# app/db/event_crud.py
"""
Operações de persistência dos Eventos de Monitoramento no MongoDB.
"""

# ========================
# --- Importações ---
# ========================
import logging
import uuid
from datetime import datetime, timezone
from typing import List

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError
from pydantic import ValidationError

# --- Módulos da Aplicação ---
from app.core.exceptions import ServiceError
from app.models.event import EventCreate, MonitoringEvent

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)
EVENTS_COLLECTION = "events"

def _get_events_collection(db: AsyncIOMotorDatabase) -> AsyncIOMotorCollection:
    """Retorna a coleção de eventos do banco de dados."""
    return db[EVENTS_COLLECTION]

# ========================
# --- Operações CRUD para Eventos ---
# ========================
async def create_event(db: AsyncIOMotorDatabase, user_id: uuid.UUID, event_in: EventCreate) -> MonitoringEvent:
    """
    Cria um evento para `user_id`. Sem `created_at` no payload, usa o instante atual.

    Raises:
        ServiceError: Se a inserção falhar.
    """
    event = MonitoringEvent(
        id=uuid.uuid4(),
        user_id=user_id,
        event_type=event_in.event_type,
        event_value=event_in.event_value,
        status=event_in.status,
        description=event_in.description,
        created_at=event_in.created_at or datetime.now(timezone.utc),
    )
    document = event.model_dump(mode="json")
    document["created_at"] = event.created_at

    try:
        await _get_events_collection(db).insert_one(document)
    except PyMongoError as e:
        logger.error(f"DB Error ao inserir evento do usuário {user_id}: {e}", exc_info=True)
        raise ServiceError("create_event") from e

    logger.info(f"Evento {event.id} ('{event.event_type}') criado para usuário {user_id}.")
    return event

async def get_events_by_owner(db: AsyncIOMotorDatabase, user_id: uuid.UUID) -> List[MonitoringEvent]:
    """Lista os eventos do usuário, do mais recente para o mais antigo."""
    events: List[MonitoringEvent] = []
    try:
        cursor = _get_events_collection(db).find({"user_id": str(user_id)}).sort("created_at", DESCENDING)
        async for event_dict in cursor:
            event_dict.pop('_id', None)
            try:
                events.append(MonitoringEvent.model_validate(event_dict))
            except ValidationError as e:
                logger.error(f"DB Validation error evento {event_dict.get('id', 'N/A')} do usuário {user_id}: {e}")
    except PyMongoError as e:
        logger.error(f"DB Error ao listar eventos do usuário {user_id}: {e}", exc_info=True)
        raise ServiceError("get_events_by_owner") from e
    return events

async def create_event_indexes(db: AsyncIOMotorDatabase):
    """Cria o índice de listagem de eventos por usuário."""
    collection = _get_events_collection(db)
    try:
        await collection.create_index(
            [("user_id", ASCENDING), ("created_at", DESCENDING)],
            name="event_owner_created_at_idx"
        )
        logger.info("Índices da coleção 'events' verificados/criados.")
    except Exception as e:
        logger.error(f"Erro ao criar índices para a coleção 'events': {e}", exc_info=True)
