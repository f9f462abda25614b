# app/core/notifications.py
"""
Notificações em tempo real dos eventos de monitoramento.

Os eventos são enviados a todos os WebSockets conectados e, se configurado,
replicados para um webhook HTTP assinado (HMAC-SHA256). A entrega é de melhor
esforço: sem confirmação, sem reenvio e sem efeito na requisição que originou
o evento.
"""

# ========================
# --- Importações ---
# ========================
import hashlib
import hmac
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Set

import httpx
from fastapi import WebSocket

# --- Módulos da Aplicação ---
from app.core.config import settings

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Nomes de Eventos ---
# ========================
EVENT_NEW_RECORD = "newRecord"
EVENT_NEW_EVENT = "newEvent"
EVENT_RECORD_SAVED = "recordSaved"
EVENT_ERROR = "error"

# ========================
# --- Gerenciador de Conexões WebSocket ---
# ========================
class ConnectionManager:
    """Mantém os WebSockets ativos e distribui mensagens entre eles."""

    def __init__(self):
        self.active_connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.add(websocket)
        logger.info(f"Cliente WebSocket conectado ({len(self.active_connections)} ativos).")

    def disconnect(self, websocket: WebSocket):
        self.active_connections.discard(websocket)
        logger.info(f"Cliente WebSocket desconectado ({len(self.active_connections)} ativos).")

    async def send(self, websocket: WebSocket, event: str, data: Dict[str, Any]):
        await websocket.send_json({"event": event, "data": data})

    async def broadcast(self, event: str, data: Dict[str, Any]) -> int:
        """
        Envia `{"event", "data"}` para todos os clientes conectados.
        Conexões que falham no envio são descartadas.

        Returns:
            Quantidade de clientes que receberam a mensagem.
        """
        delivered = 0
        for websocket in list(self.active_connections):
            try:
                await self.send(websocket, event, data)
                delivered += 1
            except Exception as e:
                logger.warning(f"Falha ao enviar '{event}' para um cliente WebSocket, removendo conexão: {e}")
                self.active_connections.discard(websocket)
        logger.debug(f"Evento '{event}' enviado para {delivered} cliente(s).")
        return delivered

manager = ConnectionManager()

# ========================
# --- Função de Envio de Webhook ---
# ========================
async def send_webhook_notification(event_type: str, data: Dict[str, Any]):
    """
    Envia o evento para a URL de webhook configurada.

    Inclui assinatura HMAC-SHA256 se WEBHOOK_SECRET estiver definido.

    Args:
        event_type: Nome do evento (ex: 'newRecord').
        data: Payload serializável em JSON.
    """
    if not settings.WEBHOOK_URL:
        logger.debug("Webhook URL não configurada, pulando envio.")
        return

    webhook_url_str = str(settings.WEBHOOK_URL)
    payload = {
        "event": event_type,
        "data": data,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
    payload_bytes = json.dumps(payload, separators=(',', ':'), sort_keys=True).encode('utf-8')
    headers = {
        "Content-Type": "application/json",
        "User-Agent": "SRRobot-Webhook-Client/1.0"
    }

    if settings.WEBHOOK_SECRET:
        signature = hmac.new(settings.WEBHOOK_SECRET.encode('utf-8'), payload_bytes, hashlib.sha256).hexdigest()
        headers["X-SRRobot-Signature"] = f"sha256={signature}"

    try:
        async with httpx.AsyncClient() as client:
            logger.info(f"Enviando webhook evento '{event_type}' para {webhook_url_str}")
            # O corpo enviado é exatamente o que foi assinado.
            response = await client.post(webhook_url_str, content=payload_bytes, headers=headers, timeout=10.0)
            response.raise_for_status()
            logger.info(f"Webhook enviado com sucesso para {webhook_url_str}. Status: {response.status_code}")
    except httpx.TimeoutException:
        logger.error(f"Timeout ao enviar webhook para {webhook_url_str}")
    except httpx.HTTPStatusError as exc:
        logger.error(
            f"Erro no servidor do webhook ({webhook_url_str}). "
            f"Status: {exc.response.status_code}. Resposta: {exc.response.text[:200]}..."
        )
    except httpx.RequestError as exc:
        logger.error(f"Erro na requisição ao enviar webhook para {webhook_url_str}: {exc}")

# ========================
# --- Publicação ---
# ========================
async def publish_event(event_type: str, data: Dict[str, Any]):
    """Distribui um evento para os WebSockets e para o webhook. Usada em BackgroundTasks."""
    await manager.broadcast(event_type, data)
    await send_webhook_notification(event_type, data)
