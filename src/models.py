"""Shared Pydantic data models for webhook-chat-bridge."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

MESSAGE_REQUIRED = "Message is required"
FALLBACK_REPLY = "No response from bot"

# --- Enums ---


class AuditEventType(str, Enum):
    CHAT_RELAY = "chat_relay"
    CHAT_REJECTED = "chat_rejected"
    CONFIG_ERROR = "config_error"
    UPSTREAM_FAILURE = "upstream_failure"


class RiskLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


# --- Wire Models ---


class ChatRequest(BaseModel):
    """Inbound payload on POST /api/chat."""

    model_config = ConfigDict(frozen=True, strict=True)

    message: str

    @field_validator("message")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError(MESSAGE_REQUIRED)
        return value

    @property
    def query(self) -> str:
        return self.message.strip()


class UpstreamQuery(BaseModel):
    """Body sent to the external webhook."""

    model_config = ConfigDict(frozen=True)

    query: str


class ChatReply(BaseModel):
    model_config = ConfigDict(frozen=True)

    reply: str


class ChatError(BaseModel):
    model_config = ConfigDict(frozen=True)

    error: str
    message: str | None = None


def extract_reply(data: object) -> str:
    """Pick the display text out of a webhook or gateway body.

    A non-empty ``reply`` wins over a non-empty ``message``; anything else
    falls back to :data:`FALLBACK_REPLY`.
    """
    if isinstance(data, dict):
        for key in ("reply", "message"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return FALLBACK_REPLY


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    source_ip: str | None = None
    action: str
    result: str  # "success" | "failure" | "rejected"
    risk_level: RiskLevel
    details: dict[str, object] | None = None
