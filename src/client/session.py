"""Chat client: submits messages to the gateway and keeps the transcript."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from src.client.state import (
    ChatState,
    Failed,
    Idle,
    Sender,
    Sending,
    Succeeded,
    TranscriptEntry,
)
from src.models import extract_reply

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/chat"
SEND_FAILED = "Failed to send message"


class ChatSession:
    """Client side of one chat window.

    Only the transcript and the current submission state live here; nothing
    is shared with the gateway between requests.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http_client = http_client
        self._transcript: list[TranscriptEntry] = []
        self._state: ChatState = Idle()

    @property
    def state(self) -> ChatState:
        return self._state

    @property
    def transcript(self) -> list[TranscriptEntry]:
        return list(self._transcript)

    @property
    def is_loading(self) -> bool:
        return isinstance(self._state, Sending)

    @property
    def error(self) -> str | None:
        return self._state.error if isinstance(self._state, Failed) else None

    async def send(self, user_text: str) -> TranscriptEntry | None:
        """Submit one message; returns the bot entry on success.

        Blank input and submissions made while another one is in flight are
        ignored without touching the transcript.
        """
        if not user_text.strip() or self.is_loading:
            return None

        self._transcript.append(TranscriptEntry(text=user_text, sender=Sender.USER))
        self._state = Sending()

        try:
            data = await self._post({"message": user_text})
            reply = extract_reply(data)
        except Exception as exc:  # network, status and parse failures all land in the error slot
            logger.warning("Chat request failed: %s", exc)
            self._state = Failed(str(exc) or SEND_FAILED)
            return None
        finally:
            if self.is_loading:
                self._state = Idle()

        entry = TranscriptEntry(text=reply, sender=Sender.BOT)
        self._transcript.append(entry)
        self._state = Succeeded(reply)
        return entry

    async def _post(self, payload: dict[str, Any]) -> Any:
        if self._http_client is not None:
            resp = await self._http_client.post(CHAT_PATH, json=payload)
        else:
            async with httpx.AsyncClient(base_url=self._base_url) as client:
                resp = await client.post(CHAT_PATH, json=payload)

        if not resp.is_success:
            raise ChatRequestError(_error_text(resp))
        return resp.json()


class ChatRequestError(Exception):
    """Gateway answered with a non-success status."""


def _error_text(resp: httpx.Response) -> str:
    """Human-readable text for a failed gateway response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"API error: {resp.reason_phrase}"
