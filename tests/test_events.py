# tests/test_events.py
"""
Testes de integração das rotas de Eventos de Monitoramento (`app.routers.events`).
"""

# ========================
# --- Importações ---
# ========================
import uuid
from typing import Any, Dict
from unittest.mock import AsyncMock

import pytest
from fastapi import status
from httpx import AsyncClient

# --- Módulos da Aplicação e Configs de Teste ---
from app.core.notifications import EVENT_NEW_EVENT
from tests.conftest import EVENTS_URL

pytestmark = pytest.mark.asyncio

EVENT_PAYLOAD: Dict[str, Any] = {
    "eventType": "motion",
    "eventValue": 1,
    "status": "critical",
    "description": "Movimento na sala",
}

async def test_create_event_success(
    test_async_client: AsyncClient,
    test_user_a_token_and_id: tuple[str, uuid.UUID],
    mocker
):
    # --- Arrange ---
    token, user_id = test_user_a_token_and_id
    mock_publish = mocker.patch("app.routers.events.publish_event", new_callable=AsyncMock)

    # --- Act ---
    response = await test_async_client.post(
        EVENTS_URL, json=EVENT_PAYLOAD, headers={"Authorization": f"Bearer {token}"}
    )

    # --- Assert ---
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert uuid.UUID(body["id"])
    assert body["userId"] == str(user_id)
    assert body["eventType"] == "motion"
    assert body["eventValue"] == 1.0
    assert body["status"] == "critical"
    assert "createdAt" in body
    mock_publish.assert_awaited_once()
    assert mock_publish.await_args.args[0] == EVENT_NEW_EVENT

@pytest.mark.parametrize(
    "payload",
    [
        {"eventValue": 1, "status": "ok"},
        {"eventType": "", "eventValue": 1, "status": "ok"},
        {**EVENT_PAYLOAD, "userId": str(uuid.uuid4())},
    ]
)
async def test_create_event_invalid_payload(
    test_async_client: AsyncClient,
    auth_headers_a: Dict[str, str],
    payload: Dict[str, Any]
):
    response = await test_async_client.post(EVENTS_URL, json=payload, headers=auth_headers_a)
    assert response.status_code == status.HTTP_400_BAD_REQUEST

async def test_list_events_only_own(
    test_async_client: AsyncClient,
    auth_headers_a: Dict[str, str],
    auth_headers_b: Dict[str, str]
):
    # --- Arrange ---
    await test_async_client.post(EVENTS_URL, json=EVENT_PAYLOAD, headers=auth_headers_a)
    await test_async_client.post(EVENTS_URL, json={**EVENT_PAYLOAD, "eventType": "signal"}, headers=auth_headers_b)

    # --- Act ---
    response = await test_async_client.get(EVENTS_URL, headers=auth_headers_a)

    # --- Assert ---
    assert response.status_code == status.HTTP_200_OK
    events = response.json()
    assert len(events) == 1
    assert events[0]["eventType"] == "motion"

async def test_events_require_token(test_async_client: AsyncClient):
    response = await test_async_client.get(EVENTS_URL)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
