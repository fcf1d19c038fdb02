"""FastAPI application exposing the forwarding gateway."""

from __future__ import annotations

import json
import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.audit.logger import AuditLogger
from src.gateway.forwarder import WEBHOOK_URL_ENV, ForwardingGateway

logger = logging.getLogger(__name__)


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    webhook_url = os.environ.get(WEBHOOK_URL_ENV)
    audit_log = os.environ.get("AUDIT_LOG_PATH")
    audit_logger = AuditLogger.from_env(audit_log) if audit_log else None
    gateway = ForwardingGateway(webhook_url, audit_logger=audit_logger)
    if not gateway.configured:
        logger.warning(
            "%s is not set; every chat request will fail with a configuration error",
            WEBHOOK_URL_ENV,
        )
    return create_app(gateway)


def create_app(gateway: ForwardingGateway) -> FastAPI:
    """Create the chat bridge app around an already-configured gateway."""
    app = FastAPI(docs_url=None, redoc_url=None)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/chat")
    async def chat(request: Request) -> JSONResponse:
        body: object
        try:
            body = json.loads(await request.body())
        except (ValueError, RecursionError):
            body = None  # validated as a missing message
        source_ip = request.client.host if request.client else None
        result = await gateway.handle(body, source_ip=source_ip)
        return JSONResponse(result.body, status_code=result.status_code)

    return app
