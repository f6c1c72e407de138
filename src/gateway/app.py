"""FastAPI entry point for Discord interaction webhooks."""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from src.audit.logger import AuditLogger
from src.interactions.dispatcher import InteractionDispatcher
from src.interactions.errors import InvalidSignatureError, MalformedInteractionError
from src.interactions.responses import UNKNOWN_TYPE_BODY
from src.interactions.verifier import (
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    RequestVerifier,
    SignedEnvelope,
)
from src.models import AuditEvent, AuditEventType, GatewayConfig, RiskLevel

logger = logging.getLogger(__name__)

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    config = GatewayConfig.from_env()
    audit_log = os.environ.get("AUDIT_LOG_PATH")
    audit_logger = AuditLogger.from_env(audit_log) if audit_log else None
    return create_app(config, audit_logger)


def create_app(
    config: GatewayConfig,
    audit_logger: AuditLogger | None = None,
    dispatcher: InteractionDispatcher | None = None,
) -> FastAPI:
    """Create the interactions app. Tables and key are validated here, once."""
    verifier = RequestVerifier(config.public_key)
    dispatcher = dispatcher or InteractionDispatcher(config, audit_logger=audit_logger)
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/")
    async def hello() -> PlainTextResponse:
        return PlainTextResponse(f"👋 {config.application_id}")

    @app.post("/")
    async def interactions(request: Request) -> Response:
        source_ip = request.client.host if request.client else None
        envelope = SignedEnvelope(
            body=await request.body(),
            signature=request.headers.get(SIGNATURE_HEADER),
            timestamp=request.headers.get(TIMESTAMP_HEADER),
        )

        try:
            verified = verifier.verify(envelope)
        except InvalidSignatureError as exc:
            logger.warning("Bad request signature from %s", source_ip)
            await run_in_threadpool(
                _log_rejection,
                audit_logger, AuditEventType.SIGNATURE_REJECTED, source_ip, RiskLevel.HIGH,
            )
            return PlainTextResponse(str(exc), status_code=401)
        except MalformedInteractionError as exc:
            logger.error("Unknown Type: %s", exc)
            await run_in_threadpool(
                _log_rejection,
                audit_logger, AuditEventType.MALFORMED_INTERACTION, source_ip, RiskLevel.LOW,
                {"reason": str(exc)},
            )
            return JSONResponse(UNKNOWN_TYPE_BODY, status_code=400)

        # Dispatch writes the audit log under a file lock; keep it off the event loop.
        result = await run_in_threadpool(dispatcher.dispatch, verified, source_ip=source_ip)
        return JSONResponse(result.body, status_code=result.status_code)

    @app.api_route("/{path:path}", methods=_ALL_METHODS)
    async def not_found(path: str) -> PlainTextResponse:
        return PlainTextResponse("Not Found.", status_code=404)

    return app


def _log_rejection(
    audit_logger: AuditLogger | None,
    event_type: AuditEventType,
    source_ip: str | None,
    risk_level: RiskLevel,
    details: dict[str, object] | None = None,
) -> None:
    if audit_logger:
        audit_logger.log(AuditEvent(
            event_type=event_type,
            source_ip=source_ip,
            action="POST /",
            result="rejected",
            risk_level=risk_level,
            details=details,
        ))
