"""Forwarding gateway: validate, forward to the webhook, normalize.

Stages per request:
1. Validate the inbound payload (400 on a blank or missing message)
2. Check the webhook address was configured (500, no outbound call)
3. POST {"query": ...} to the webhook via httpx
4. Decode the webhook body once into UpstreamOk / UpstreamError
5. Audit log
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from src.gateway.models import GatewayResult, UpstreamError, UpstreamOk, UpstreamResult
from src.models import (
    MESSAGE_REQUIRED,
    AuditEvent,
    AuditEventType,
    ChatError,
    ChatReply,
    ChatRequest,
    RiskLevel,
    UpstreamQuery,
    extract_reply,
)

if TYPE_CHECKING:
    from src.audit.logger import AuditLogger

logger = logging.getLogger(__name__)

WEBHOOK_URL_ENV = "WEBHOOK_URL"
CONFIG_ERROR = (
    f"{WEBHOOK_URL_ENV} is not configured. "
    "Please set it in your environment variables."
)
UNREACHABLE = "Unable to reach the chat service. Please try again later."


class ForwardingGateway:
    """Relays one chat message to the configured webhook per call.

    Holds only immutable configuration, so concurrent calls never interfere.
    """

    def __init__(
        self,
        webhook_url: str | None,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._webhook_url = (webhook_url or "").strip() or None
        self._audit = audit_logger

    @property
    def configured(self) -> bool:
        return self._webhook_url is not None

    async def handle(
        self, request_body: object, source_ip: str | None = None,
    ) -> GatewayResult:
        """Run validation, forwarding and normalization for one payload."""

        # Stage 1: Validate
        try:
            request = ChatRequest.model_validate(request_body)
        except ValidationError:
            self._log_event(
                AuditEventType.CHAT_REJECTED, "rejected", RiskLevel.LOW, source_ip,
            )
            return GatewayResult(400, ChatError(error=MESSAGE_REQUIRED).model_dump(
                exclude_none=True,
            ))

        # Stage 2: Configuration
        if self._webhook_url is None:
            logger.error("Chat request rejected: %s", CONFIG_ERROR)
            self._log_event(
                AuditEventType.CONFIG_ERROR, "failure", RiskLevel.HIGH, source_ip,
            )
            return GatewayResult(500, ChatError(error=CONFIG_ERROR).model_dump(
                exclude_none=True,
            ))

        # Stage 3 + 4: Forward and decode
        result = await self.forward(request.query)

        # Stage 5: Audit log
        if isinstance(result, UpstreamOk):
            self._log_event(
                AuditEventType.CHAT_RELAY, "success", RiskLevel.INFO, source_ip,
            )
            return GatewayResult(200, ChatReply(reply=result.content).model_dump())

        logger.error(
            "Chat relay failed (upstream status %s): %s", result.status, result.detail,
        )
        self._log_event(
            AuditEventType.UPSTREAM_FAILURE,
            "failure",
            RiskLevel.MEDIUM,
            source_ip,
            {"upstream_status": result.status},
        )
        return GatewayResult(
            500, ChatError(error=result.detail, message=UNREACHABLE).model_dump(),
        )

    async def forward(self, query: str) -> UpstreamResult:
        """POST the query to the webhook and decode the answer.

        Never raises: every failure becomes an UpstreamError.
        """
        if self._webhook_url is None:
            return UpstreamError(status=None, detail=CONFIG_ERROR)
        try:
            resp = await self._post_to_webhook(UpstreamQuery(query=query).model_dump())
            if not resp.is_success:
                return UpstreamError(
                    status=resp.status_code,
                    detail=(
                        f"Webhook returned status {resp.status_code}: "
                        f"{resp.reason_phrase}"
                    ),
                )
            return UpstreamOk(content=extract_reply(resp.json()))
        except Exception as exc:  # any transport or decode failure is reported, not raised
            return UpstreamError(status=None, detail=str(exc) or type(exc).__name__)

    async def _post_to_webhook(self, payload: dict[str, Any]) -> httpx.Response:
        headers = {"Content-Type": "application/json"}
        async with httpx.AsyncClient() as client:
            return await client.post(
                self._webhook_url or "", json=payload, headers=headers,
            )

    def _log_event(
        self,
        event_type: AuditEventType,
        result: str,
        risk_level: RiskLevel,
        source_ip: str | None,
        details: dict[str, object] | None = None,
    ) -> None:
        if self._audit is None:
            return
        try:
            self._audit.log(AuditEvent(
                event_type=event_type,
                source_ip=source_ip,
                action="chat",
                result=result,
                risk_level=risk_level,
                details=details,
            ))
        except OSError:
            # The audit trail never changes the HTTP result
            logger.exception("Failed to write audit event %s", event_type.value)
