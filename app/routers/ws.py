# app/routers/ws.py
"""
Canal WebSocket de monitoramento em tempo real.

O cliente conecta em `/ws?token=<jwt>` e passa a receber os eventos
`newRecord` e `newEvent`. Também pode enviar registros pelo próprio canal:

    {"event": "submitRecord", "data": {"hoursMonitored": 8, ...}}

O registro é salvo com o usuário do token, publicado para todos como
`newRecord` e confirmado ao remetente com `recordSaved`.
A validade do token é conferida a cada mensagem: expirado, o canal envia
um frame de erro e fecha com 1008.
"""

# ========================
# --- Importações ---
# ========================
import json
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

# --- Módulos da Aplicação ---
from app.core.dependencies import get_token_signer
from app.core.exceptions import AppError
from app.core.notifications import (
    EVENT_ERROR,
    EVENT_NEW_RECORD,
    EVENT_RECORD_SAVED,
    manager,
    send_webhook_notification,
)
from app.core.security import TokenSigner
from app.db import record_crud
from app.db.mongodb_utils import get_database
from app.models.record import RecordCreate

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)
SUBMIT_RECORD = "submitRecord"

router = APIRouter(tags=["Realtime"])

# ========================
# --- Endpoint WebSocket ---
# ========================
@router.websocket("/ws")
async def monitoring_socket(
    websocket: WebSocket,
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
    signer: Annotated[TokenSigner, Depends(get_token_signer)],
    token: Annotated[Optional[str], Query()] = None,
):
    claims = signer.decode_token(token) if token else None
    if claims is None:
        logger.info("Conexão WebSocket recusada: token ausente ou inválido.")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await manager.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()

            # O token vale só até `exp`, mesmo com a conexão já aberta.
            claims = signer.decode_token(token)
            if claims is None:
                logger.info("Token expirado em conexão WebSocket aberta, encerrando.")
                await manager.send(websocket, EVENT_ERROR, {"message": "Token inválido ou expirado."})
                await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
                return

            try:
                message = json.loads(raw)
            except ValueError:
                await manager.send(websocket, EVENT_ERROR, {"message": "Mensagem não é um JSON válido."})
                continue

            if not isinstance(message, dict) or message.get("event") != SUBMIT_RECORD:
                await manager.send(websocket, EVENT_ERROR, {"message": "Evento desconhecido."})
                continue

            try:
                record_in = RecordCreate.model_validate(message.get("data") or {})
            except ValidationError:
                await manager.send(websocket, EVENT_ERROR, {"message": "Dados do registro inválidos."})
                continue

            try:
                record = await record_crud.create_record(db=db, user_id=claims.sub, record_in=record_in)
            except AppError as e:
                await manager.send(websocket, EVENT_ERROR, {"message": e.message})
                continue

            data = record.model_dump(mode="json", by_alias=True)
            await manager.broadcast(EVENT_NEW_RECORD, data)
            await manager.send(websocket, EVENT_RECORD_SAVED, data)
            await send_webhook_notification(EVENT_NEW_RECORD, data)
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(websocket)
