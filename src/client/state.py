"""Transcript and submission state for the chat client."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


def _now() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class TranscriptEntry:
    text: str
    sender: Sender
    timestamp: datetime = field(default_factory=_now)
    id: str = field(default_factory=_new_id)


# --- Submission states: Idle -> Sending -> Succeeded | Failed ---


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Sending:
    pass


@dataclass(frozen=True)
class Succeeded:
    reply: str


@dataclass(frozen=True)
class Failed:
    error: str


ChatState = Idle | Sending | Succeeded | Failed
