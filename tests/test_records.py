# tests/test_records.py
"""
Testes de integração das rotas de Registros de Monitoramento (`app.routers.records`).

Cobrem criação com ID sequencial, isolamento entre usuários, filtro por período,
validação de entrada, autenticação e a publicação do evento `newRecord`.
"""

# ========================
# --- Importações ---
# ========================
import asyncio
import uuid
from typing import Any, Dict
from unittest.mock import AsyncMock

import pytest
from fastapi import status
from httpx import AsyncClient

# --- Módulos da Aplicação e Configs de Teste ---
from app.core.exceptions import AllocationError
from app.core.notifications import EVENT_NEW_RECORD
from app.models.record import RecordPeriod
from tests.conftest import RECORDS_URL

pytestmark = pytest.mark.asyncio

# ========================
# --- Criação ---
# ========================
async def test_create_record_success(
    test_async_client: AsyncClient,
    test_user_a_token_and_id: tuple[str, uuid.UUID],
    record_payload: Dict[str, Any],
    mocker
):
    """
    O registro recebe o ID 1, o dono vem do token e o evento é publicado.
    """
    # --- Arrange ---
    token, user_id = test_user_a_token_and_id
    mock_publish = mocker.patch("app.routers.records.publish_event", new_callable=AsyncMock)

    # --- Act ---
    response = await test_async_client.post(
        RECORDS_URL, json=record_payload, headers={"Authorization": f"Bearer {token}"}
    )

    # --- Assert ---
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["id"] == 1
    assert body["userId"] == str(user_id)
    assert body["hoursMonitored"] == 8
    assert body["totalEvents"] == 12
    assert body["criticalEvents"] == 3
    assert body["motion"] is True
    assert body["average"] == 25.0
    assert "timestamp" in body
    mock_publish.assert_awaited_once()
    event_type, data = mock_publish.await_args.args
    assert event_type == EVENT_NEW_RECORD
    assert data["id"] == 1

async def test_create_record_ignores_owner_in_body(
    test_async_client: AsyncClient,
    auth_headers_a: Dict[str, str],
    record_payload: Dict[str, Any]
):
    """
    Não é possível criar registros em nome de outro usuário: `userId` no corpo é rejeitado.
    """
    # --- Act ---
    response = await test_async_client.post(
        RECORDS_URL, json={**record_payload, "userId": str(uuid.uuid4())}, headers=auth_headers_a
    )

    # --- Assert ---
    assert response.status_code == status.HTTP_400_BAD_REQUEST

async def test_concurrent_record_creation_yields_distinct_ids(
    test_async_client: AsyncClient,
    auth_headers_a: Dict[str, str],
    auth_headers_b: Dict[str, str],
    record_payload: Dict[str, Any]
):
    """
    Criações simultâneas de dois usuários recebem IDs distintos e consecutivos.
    """
    # --- Act ---
    responses = await asyncio.gather(*(
        test_async_client.post(RECORDS_URL, json=record_payload, headers=headers)
        for headers in [auth_headers_a, auth_headers_b] * 10
    ))

    # --- Assert ---
    assert all(r.status_code == status.HTTP_201_CREATED for r in responses)
    assert sorted(r.json()["id"] for r in responses) == list(range(1, 21))

@pytest.mark.parametrize(
    "payload",
    [
        {"hoursMonitored": 8, "totalEvents": 12, "criticalEvents": 3},
        {"hoursMonitored": -1, "totalEvents": 12, "criticalEvents": 3, "motion": True},
        {"hoursMonitored": 8, "totalEvents": 2, "criticalEvents": 3, "motion": True},
        {"hoursMonitored": "muitas", "totalEvents": 2, "criticalEvents": 1, "motion": True},
    ]
)
async def test_create_record_invalid_payload(
    test_async_client: AsyncClient,
    auth_headers_a: Dict[str, str],
    payload: Dict[str, Any]
):
    response = await test_async_client.post(RECORDS_URL, json=payload, headers=auth_headers_a)
    assert response.status_code == status.HTTP_400_BAD_REQUEST

async def test_create_record_allocation_failure_returns_503(
    test_async_client: AsyncClient,
    auth_headers_a: Dict[str, str],
    record_payload: Dict[str, Any],
    mocker
):
    # --- Arrange ---
    mocker.patch("app.db.record_crud.next_sequence_value", side_effect=AllocationError("idDatos"))

    # --- Act ---
    response = await test_async_client.post(RECORDS_URL, json=record_payload, headers=auth_headers_a)

    # --- Assert ---
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert "identificador" in response.json()["detail"]

@pytest.mark.parametrize(
    "headers, expected_status",
    [
        ({}, status.HTTP_401_UNAUTHORIZED),
        ({"Authorization": "Bearer invalido"}, status.HTTP_403_FORBIDDEN),
    ]
)
async def test_records_require_valid_token(
    test_async_client: AsyncClient,
    record_payload: Dict[str, Any],
    headers: Dict[str, str],
    expected_status: int
):
    post_response = await test_async_client.post(RECORDS_URL, json=record_payload, headers=headers)
    get_response = await test_async_client.get(RECORDS_URL, headers=headers)
    assert post_response.status_code == expected_status
    assert get_response.status_code == expected_status

# ========================
# --- Listagem ---
# ========================
async def test_list_records_only_own(
    test_async_client: AsyncClient,
    auth_headers_a: Dict[str, str],
    auth_headers_b: Dict[str, str],
    record_payload: Dict[str, Any]
):
    # --- Arrange ---
    await test_async_client.post(RECORDS_URL, json=record_payload, headers=auth_headers_a)
    await test_async_client.post(RECORDS_URL, json=record_payload, headers=auth_headers_b)
    await test_async_client.post(RECORDS_URL, json=record_payload, headers=auth_headers_a)

    # --- Act ---
    response_a = await test_async_client.get(RECORDS_URL, headers=auth_headers_a)
    response_b = await test_async_client.get(RECORDS_URL, headers=auth_headers_b)

    # --- Assert ---
    assert response_a.status_code == status.HTTP_200_OK
    assert sorted(r["id"] for r in response_a.json()) == [1, 3]
    assert [r["id"] for r in response_b.json()] == [2]

async def test_list_records_empty(test_async_client: AsyncClient, auth_headers_a: Dict[str, str]):
    response = await test_async_client.get(RECORDS_URL, headers=auth_headers_a)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []

async def test_list_records_with_period(
    test_async_client: AsyncClient,
    test_user_a_token_and_id: tuple[str, uuid.UUID],
    mocker
):
    """
    O parâmetro `period` chega ao CRUD como RecordPeriod.
    """
    # --- Arrange ---
    token, user_id = test_user_a_token_and_id
    mock_get = mocker.patch("app.routers.records.record_crud.get_records_by_owner", new_callable=AsyncMock, return_value=[])

    # --- Act ---
    response = await test_async_client.get(
        RECORDS_URL, params={"period": "today"}, headers={"Authorization": f"Bearer {token}"}
    )

    # --- Assert ---
    assert response.status_code == status.HTTP_200_OK
    assert mock_get.await_args.kwargs["user_id"] == user_id
    assert mock_get.await_args.kwargs["period"] is RecordPeriod.TODAY

async def test_list_records_invalid_period(test_async_client: AsyncClient, auth_headers_a: Dict[str, str]):
    response = await test_async_client.get(RECORDS_URL, params={"period": "year"}, headers=auth_headers_a)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
