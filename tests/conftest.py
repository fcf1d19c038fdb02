"""Shared test fixtures for webhook-chat-bridge."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.audit.logger import AuditLogger
from src.models import AuditEvent, AuditEventType, RiskLevel

WEBHOOK_URL = "http://n8n.test/webhook/chat"


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("WEBHOOK_URL", "AUDIT_LOG_PATH", "AUDIT_LOG_MAX_BYTES", "AUDIT_LOG_BACKUP_COUNT"):
        monkeypatch.delenv(var, raising=False)


# --- Factory functions for test data ---


def webhook_response(
    status_code: int = 200,
    json: Any = None,
    content: bytes | None = None,
) -> httpx.Response:
    """Build a real httpx.Response as the webhook would return it."""
    request = httpx.Request("POST", WEBHOOK_URL)
    if content is not None:
        return httpx.Response(status_code, content=content, request=request)
    return httpx.Response(status_code, json=json, request=request)


def mock_async_client(
    response: httpx.Response | None = None,
    side_effect: BaseException | None = None,
) -> AsyncMock:
    """AsyncMock usable as ``async with httpx.AsyncClient() as client``."""
    client = AsyncMock()
    if side_effect is not None:
        client.post.side_effect = side_effect
    else:
        client.post.return_value = response
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


def make_audit_event(**kwargs: Any) -> AuditEvent:
    """Factory for AuditEvent with sensible defaults."""
    defaults: dict[str, Any] = {
        "event_type": AuditEventType.CHAT_RELAY,
        "action": "chat",
        "result": "success",
        "risk_level": RiskLevel.INFO,
    }
    defaults.update(kwargs)
    return AuditEvent(**defaults)
