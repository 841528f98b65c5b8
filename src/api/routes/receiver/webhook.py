"""Endpoints inbound do serviço receiver.

Endpoints:
- POST /api/whatsapp/webhook: eventos do receiver (gate do webhook)
- POST /api/whatsapp-webhook: alias legado do mesmo endpoint
- POST /api/receiver/messages: mensagens do receiver (gate de API key)

Segurança:
- Credencial comparada em tempo constante antes de qualquer parse estrito
- Resposta rápida; entrega ao downstream feita pelos workers
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.routes.receiver.ingest import ingest_request

router = APIRouter()


@router.post("/api/whatsapp/webhook")
async def receive_webhook(request: Request) -> JSONResponse:
    """Recebimento de eventos do receiver via webhook."""
    return await ingest_request(request, "webhook")


@router.post("/api/whatsapp-webhook", include_in_schema=False)
async def receive_webhook_legacy(request: Request) -> JSONResponse:
    """Alias legado de /api/whatsapp/webhook."""
    return await ingest_request(request, "webhook")


@router.post("/api/receiver/messages")
async def receive_messages(request: Request) -> JSONResponse:
    """Recebimento de mensagens autenticado por API key."""
    return await ingest_request(request, "receiver")
