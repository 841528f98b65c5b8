"""Testes dos handlers downstream (HTTP via httpx.MockTransport e log)."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime

import httpx
import pytest

from app.domain.message_record import MessageRecord
from app.infra.handlers import (
    DownstreamHttpError,
    HttpForwardingHandler,
    LoggingMessageHandler,
)

RECORD = MessageRecord(
    sender="5511999999999@s.whatsapp.net",
    chat="5511999999999@s.whatsapp.net",
    type="text",
    sending_time=datetime(2026, 3, 1, tzinfo=UTC),
    content="conteúdo privado",
)


class TestHttpForwardingHandler:
    @pytest.mark.asyncio
    async def test_posts_record_with_bearer_token(self) -> None:
        seen: list[httpx.Request] = []

        def _respond(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_respond))
        handler = HttpForwardingHandler(
            "https://downstream.test/messages", auth_token="tok", client=client
        )

        await handler.handle(RECORD)
        await client.aclose()

        assert len(seen) == 1
        assert seen[0].headers["authorization"] == "Bearer tok"
        body = json.loads(seen[0].content)
        assert body["sender"] == RECORD.sender
        assert body["sending_time"] == "2026-03-01T00:00:00+00:00"

    @pytest.mark.asyncio
    async def test_non_success_status_raises(self) -> None:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(503))
        )
        handler = HttpForwardingHandler("https://downstream.test/messages", client=client)

        with pytest.raises(DownstreamHttpError) as exc:
            await handler.handle(RECORD)
        await client.aclose()

        assert exc.value.status_code == 503
        assert "downstream_status_503" in str(exc.value)

    @pytest.mark.asyncio
    async def test_no_authorization_header_without_token(self) -> None:
        seen: list[httpx.Request] = []

        def _respond(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_respond))
        handler = HttpForwardingHandler("https://downstream.test/messages", client=client)

        await handler.handle(RECORD)
        await handler.aclose()
        await client.aclose()

        assert "authorization" not in seen[0].headers


class TestLoggingMessageHandler:
    @pytest.mark.asyncio
    async def test_logs_without_content(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO):
            await LoggingMessageHandler().handle(RECORD)

        delivered = [r for r in caplog.records if r.message == "message_delivered"]
        assert delivered[0].content_length == len(RECORD.content)
        assert "conteúdo privado" not in str(delivered[0].__dict__)
