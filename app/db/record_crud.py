# app/db/record_crud.py
"""
Operações de persistência dos Registros de Monitoramento no MongoDB.
A criação obtém o ID numérico no alocador de sequências antes de inserir.
"""

# ========================
# --- Importações ---
# ========================
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError
from pydantic import ValidationError

# --- Módulos da Aplicação ---
from app.core.config import settings
from app.core.exceptions import ServiceError
from app.db.counter_crud import next_sequence_value
from app.models.record import MonitoringRecord, RecordCreate, RecordPeriod

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)
RECORDS_COLLECTION = "records"

# ========================
# --- Funções Auxiliares (Internas) ---
# ========================
def _get_records_collection(db: AsyncIOMotorDatabase) -> AsyncIOMotorCollection:
    """Retorna a coleção de registros do banco de dados."""
    return db[RECORDS_COLLECTION]

def _to_document(record: MonitoringRecord) -> Dict[str, Any]:
    # Datas ficam como datetime (BSON Date) para permitir filtros por período.
    document = record.model_dump(mode="json")
    document["timestamp"] = record.timestamp
    return document

# ========================
# --- Operações CRUD para Registros ---
# ========================
async def create_record(
    db: AsyncIOMotorDatabase,
    user_id: uuid.UUID,
    record_in: RecordCreate,
    sequence_name: Optional[str] = None
) -> MonitoringRecord:
    """
    Cria um registro de monitoramento para `user_id`.

    Args:
        db: Instância da conexão com o banco de dados.
        user_id: Proprietário do registro (vindo das claims do token).
        record_in: Medições enviadas pelo cliente.
        sequence_name: Contador usado para o ID; padrão `settings.RECORD_SEQUENCE_NAME`.

    Returns:
        O MonitoringRecord persistido.

    Raises:
        AllocationError: Se o ID não puder ser gerado.
        ServiceError: Se a inserção falhar (o número alocado é descartado).
    """
    record_id = await next_sequence_value(db, sequence_name or settings.RECORD_SEQUENCE_NAME)
    record = MonitoringRecord(
        id=record_id,
        user_id=user_id,
        timestamp=datetime.now(timezone.utc),
        hours_monitored=record_in.hours_monitored,
        total_events=record_in.total_events,
        critical_events=record_in.critical_events,
        motion=record_in.motion,
        average=record_in.average(),
    )

    collection = _get_records_collection(db)
    try:
        await collection.insert_one(_to_document(record))
    except PyMongoError as e:
        logger.error(f"DB Error ao inserir registro {record_id} do usuário {user_id}: {e}", exc_info=True)
        raise ServiceError("create_record") from e

    logger.info(f"Registro {record.id} criado para usuário {user_id}.")
    return record

async def get_records_by_owner(
    db: AsyncIOMotorDatabase,
    user_id: uuid.UUID,
    period: Optional[RecordPeriod] = None,
    now: Optional[datetime] = None
) -> List[MonitoringRecord]:
    """
    Lista os registros do usuário, do mais recente para o mais antigo.

    Args:
        db: Instância da conexão com o banco de dados.
        user_id: Proprietário dos registros.
        period: Janela opcional (hoje, semana, mês); None retorna todo o histórico.
        now: Instante de referência da janela; padrão é agora (UTC).
    """
    collection = _get_records_collection(db)
    query: Dict[str, Any] = {"user_id": str(user_id)}
    if period is not None:
        query["timestamp"] = {"$gte": period.start(now)}

    records: List[MonitoringRecord] = []
    try:
        cursor = collection.find(query).sort("timestamp", DESCENDING)
        async for record_dict in cursor:
            record_dict.pop('_id', None)
            try:
                records.append(MonitoringRecord.model_validate(record_dict))
            except ValidationError as e:
                logger.error(f"DB Validation error registro {record_dict.get('id', 'N/A')} do usuário {user_id}: {e}")
                continue
    except PyMongoError as e:
        logger.error(f"DB Error ao listar registros do usuário {user_id}: {e}", exc_info=True)
        raise ServiceError("get_records_by_owner") from e
    return records

# ========================
# --- Criação de Índices do Banco de Dados ---
# ========================
async def create_record_indexes(db: AsyncIOMotorDatabase):
    """Cria o índice único do ID sequencial e o índice de histórico por usuário."""
    collection = _get_records_collection(db)
    try:
        await collection.create_index("id", unique=True, name="record_id_unique_idx")
        await collection.create_index(
            [("user_id", ASCENDING), ("timestamp", DESCENDING)],
            name="record_owner_timestamp_idx"
        )
        logger.info("Índices da coleção 'records' verificados/criados.")
    except Exception as e:
        logger.error(f"Erro ao criar índices para a coleção 'records': {e}", exc_info=True)
