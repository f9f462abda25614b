# app/db/counter_crud.py
"""
Alocador de sequências numéricas sobre a coleção `counters`.

Cada contador é um documento `{"_id": <nome>, "seq": <valor atual>}`. O valor
é incrementado e lido em uma única operação atômica do servidor
(`find_one_and_update` com `$inc` e `upsert`), então dois chamadores
concorrentes, no mesmo processo ou em instâncias diferentes, nunca recebem o
mesmo número. A aplicação nunca lê o valor para depois gravá-lo.
"""

# ========================
# --- Importações ---
# ========================
import logging

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

# --- Módulos da Aplicação ---
from app.core.exceptions import AllocationError

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)
COUNTERS_COLLECTION = "counters"

# ========================
# --- Funções Auxiliares (Internas) ---
# ========================
def _get_counters_collection(db: AsyncIOMotorDatabase) -> AsyncIOMotorCollection:
    """Retorna a coleção de contadores do banco de dados."""
    return db[COUNTERS_COLLECTION]

# ========================
# --- Alocação de Sequência ---
# ========================
async def next_sequence_value(db: AsyncIOMotorDatabase, sequence_name: str) -> int:
    """
    Incrementa atomicamente o contador `sequence_name` e retorna o novo valor.

    Um contador inexistente é criado pelo upsert com valor 0 e incrementado,
    portanto o primeiro valor retornado para um nome novo é 1.

    Args:
        db: Instância da conexão com o banco de dados.
        sequence_name: Nome do contador (ex: "idDatos").

    Returns:
        O valor do contador após o incremento.

    Raises:
        AllocationError: Se a operação no banco falhar. Não há nova tentativa aqui;
            quem chamou decide se repete a operação inteira.
    """
    collection = _get_counters_collection(db)
    try:
        counter = await collection.find_one_and_update(
            {"_id": sequence_name},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
    except PyMongoError as e:
        logger.error(f"Falha ao incrementar a sequência '{sequence_name}': {e}", exc_info=True)
        raise AllocationError(sequence_name) from e

    if counter is None or "seq" not in counter: # pragma: no cover
        logger.error(f"Upsert da sequência '{sequence_name}' não retornou documento.")
        raise AllocationError(sequence_name)

    value = int(counter["seq"])
    logger.debug(f"Sequência '{sequence_name}' alocou o valor {value}.")
    return value
