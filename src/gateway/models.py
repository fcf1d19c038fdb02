"""Data models for the forwarding gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class UpstreamOk:
    """Webhook answered with a success status and a decodable body."""

    content: str


@dataclass(frozen=True)
class UpstreamError:
    """Webhook call failed.

    ``status`` is None when no HTTP response was received or the body could
    not be parsed.
    """

    status: int | None
    detail: str


UpstreamResult = UpstreamOk | UpstreamError


@dataclass
class GatewayResult:
    """HTTP status and JSON body to return to the client."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)
