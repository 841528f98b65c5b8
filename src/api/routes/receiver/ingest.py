"""Pipeline HTTP compartilhado dos endpoints inbound.

Fluxo:
1. correlation_id (X-Correlation-Id ou novo UUID)
2. Gate de credencial (body parseado de forma tolerante para o
   campo webhook_secret)
3. JSON estrito → 400 se inválido
4. Normalização → 422 se faltar sender/chat ou campo inválido
5. Despacho para a lane (queued) ou handler no request (inline)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

from api.connectors.receiver.auth import WEBHOOK_SECRET_BODY_FIELD, CallerInfo
from api.connectors.receiver.receive import (
    InvalidJsonError,
    load_json_object,
    try_load_json_object,
)
from app.bootstrap import get_runtime
from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from app.queue.lanes import classify_lane
from utils.errors import (
    AuthFailureError,
    NormalizationError,
    QueueConnectionError,
    ServiceUnavailableError,
)

if TYPE_CHECKING:
    from api.connectors.receiver.auth import CredentialGate
    from app.bootstrap.dependencies import RelayRuntime

logger = logging.getLogger(__name__)

# Literal: o nome da constante em starlette.status mudou entre versões
HTTP_422_UNPROCESSABLE = 422


def error_response(status_code: int, message: str) -> JSONResponse:
    """Envelope de erro {"status": "error", "message": ...}."""
    return JSONResponse(
        content={"status": "error", "message": message},
        status_code=status_code,
    )


def caller_info(request: Request) -> CallerInfo:
    return CallerInfo(
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        url=str(request.url),
    )


async def ingest_request(request: Request, gate_name: str) -> JSONResponse:
    """Processa um request inbound usando o gate indicado ("webhook"|"receiver")."""
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        runtime = get_runtime()
        gate = _select_gate(runtime, gate_name)
        raw_body = await request.body()

        try:
            gate.enforce(request.headers, try_load_json_object(raw_body), caller_info(request))
        except ServiceUnavailableError as exc:
            return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))
        except AuthFailureError as exc:
            return error_response(status.HTTP_401_UNAUTHORIZED, str(exc))

        try:
            payload = load_json_object(raw_body)
        except InvalidJsonError as exc:
            logger.warning(
                "inbound_json_invalid",
                extra={"gate": gate_name, "error": str(exc), "payload_size": len(raw_body)},
            )
            return error_response(status.HTTP_400_BAD_REQUEST, "Invalid JSON payload")

        payload.pop(WEBHOOK_SECRET_BODY_FIELD, None)

        try:
            record = runtime.normalizer.normalize(payload)
        except NormalizationError as exc:
            logger.warning(
                "inbound_normalization_failed",
                extra={"gate": gate_name, "error": str(exc)},
            )
            return error_response(HTTP_422_UNPROCESSABLE, str(exc))

        logger.info(
            "inbound_received",
            extra={
                "gate": gate_name,
                "message_type": record.type,
                "is_group": record.is_group,
                "payload_size": len(raw_body),
            },
        )

        if runtime.processing_mode == "inline":
            return await _process_inline(runtime, record)
        return await _dispatch(runtime, record)
    finally:
        reset_correlation_id(token)


def _select_gate(runtime: RelayRuntime, gate_name: str) -> CredentialGate:
    if gate_name == "webhook":
        return runtime.webhook_gate
    return runtime.receiver_gate


def _accepted(lane: str, item_id: str | None) -> JSONResponse:
    content: dict[str, Any] = {
        "status": "ok",
        "message": "received",
        "lane": lane,
        "item_id": item_id,
        "correlation_id": get_correlation_id(),
    }
    return JSONResponse(content=content, status_code=status.HTTP_200_OK)


async def _dispatch(runtime: RelayRuntime, record: Any) -> JSONResponse:
    try:
        assignment = await runtime.dispatcher.dispatch(record, get_correlation_id())
    except QueueConnectionError as exc:
        logger.error("inbound_enqueue_failed", extra={"error": str(exc)})
        return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "Queue unavailable")
    return _accepted(assignment.lane.value, assignment.item_id)


async def _process_inline(runtime: RelayRuntime, record: Any) -> JSONResponse:
    try:
        await runtime.handler.handle(record)
    except Exception:
        logger.exception("inbound_inline_processing_failed")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Processing failed")
    return _accepted(classify_lane(record.type).value, None)
