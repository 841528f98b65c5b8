"""Testes dos endpoints inbound (webhook e receiver)."""

from __future__ import annotations

import json
import warnings
from typing import Any

import pytest
from starlette.requests import Request

from api.connectors.receiver import build_receiver_gate, build_webhook_gate
from api.normalizers.receiver import ReceiverMessageNormalizer
from api.routes.receiver import ingest
from api.routes.receiver.webhook import receive_messages, receive_webhook
from app.bootstrap.dependencies import RelayRuntime
from app.infra.queues import MemoryLaneQueue
from app.queue import Lane, PriorityDispatcher
from app.workers import DeliveryWorkerPool

WEBHOOK_SECRET = "hook-secret"
API_KEY = "api-key"


class RecordingHandler:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.records: list[Any] = []

    async def handle(self, record: Any) -> None:
        self.records.append(record)
        if self.fail:
            raise RuntimeError("downstream down")


class BrokenQueue(MemoryLaneQueue):
    async def enqueue(self, item: Any) -> None:
        from utils.errors import QueueConnectionError

        raise QueueConnectionError("redis down")


def _runtime(
    *,
    queue: MemoryLaneQueue | None = None,
    handler: RecordingHandler | None = None,
    webhook_secret: str = WEBHOOK_SECRET,
    api_key: str = API_KEY,
    production_mode: bool = True,
    processing_mode: str = "queued",
) -> RelayRuntime:
    lane_queue = queue or MemoryLaneQueue()
    message_handler = handler or RecordingHandler()
    return RelayRuntime(
        queue=lane_queue,
        dispatcher=PriorityDispatcher(lane_queue),
        normalizer=ReceiverMessageNormalizer(),
        handler=message_handler,
        worker_pool=DeliveryWorkerPool(lane_queue, message_handler, worker_count=1),
        webhook_gate=build_webhook_gate(webhook_secret, production_mode=production_mode),
        receiver_gate=build_receiver_gate(api_key, production_mode=production_mode),
        processing_mode=processing_mode,
    )


def _build_request(
    body: bytes,
    headers: dict[str, str] | None = None,
    path: str = "/api/whatsapp/webhook",
) -> Request:
    raw_headers = [
        (key.lower().encode("latin-1"), value.encode("latin-1"))
        for key, value in (headers or {}).items()
    ]
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "POST",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "headers": raw_headers,
        "client": ("10.0.0.1", 5000),
        "server": ("testserver", 80),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, _receive)


def _json(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode("utf-8")


def _body(response) -> dict[str, Any]:
    return json.loads(response.body.decode("utf-8"))


@pytest.fixture
def runtime(monkeypatch: pytest.MonkeyPatch) -> RelayRuntime:
    current = _runtime()
    monkeypatch.setattr(ingest, "get_runtime", lambda: current)
    return current


class TestWebhookEndpoint:
    @pytest.mark.asyncio
    async def test_valid_message_is_queued(self, runtime: RelayRuntime) -> None:
        request = _build_request(
            _json({"from": "5511999999999@s.whatsapp.net", "body": "oi", "type": "text"}),
            {"X-Webhook-Secret": WEBHOOK_SECRET, "X-Correlation-Id": "corr-42"},
        )

        response = await receive_webhook(request)
        payload = _body(response)

        assert response.status_code == 200
        assert payload["status"] == "ok"
        assert payload["message"] == "received"
        assert payload["lane"] == "high"
        assert payload["correlation_id"] == "corr-42"
        assert await runtime.queue.depth(Lane.HIGH) == 1

    @pytest.mark.asyncio
    async def test_body_secret_accepted_and_stripped(self, runtime: RelayRuntime) -> None:
        request = _build_request(
            _json(
                {
                    "webhook_secret": WEBHOOK_SECRET,
                    "from": "5511999999999",
                    "type": "video",
                }
            )
        )

        response = await receive_webhook(request)

        assert response.status_code == 200
        leased = await runtime.queue.dequeue()
        assert leased.item.lane == Lane.LOW
        assert WEBHOOK_SECRET not in json.dumps(leased.item.record)

    @pytest.mark.asyncio
    async def test_wrong_secret_returns_401(self, runtime: RelayRuntime) -> None:
        request = _build_request(
            _json({"from": "5511999999999"}),
            {"X-Webhook-Secret": "wrong"},
        )

        response = await receive_webhook(request)

        assert response.status_code == 401
        assert _body(response) == {
            "status": "error",
            "message": "Unauthorized: Invalid webhook secret",
        }
        assert await runtime.queue.depth(Lane.HIGH) == 0

    @pytest.mark.asyncio
    async def test_invalid_json_returns_400(self, runtime: RelayRuntime) -> None:
        request = _build_request(b"{nope", {"X-Webhook-Secret": WEBHOOK_SECRET})

        response = await receive_webhook(request)

        assert response.status_code == 400
        assert _body(response)["message"] == "Invalid JSON payload"

    @pytest.mark.asyncio
    async def test_missing_sender_returns_422(self, runtime: RelayRuntime) -> None:
        request = _build_request(_json({"body": "oi"}), {"X-Webhook-Secret": WEBHOOK_SECRET})

        response = await receive_webhook(request)

        assert response.status_code == 422
        assert "missing_required_field" in _body(response)["message"]

    @pytest.mark.asyncio
    async def test_non_string_sender_returns_422_without_warnings(
        self, runtime: RelayRuntime
    ) -> None:
        request = _build_request(
            _json({"sender": {"x": "5511999999999"}, "content": "oi"}),
            {"X-Webhook-Secret": WEBHOOK_SECRET},
        )

        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            response = await receive_webhook(request)

        assert response.status_code == 422
        assert _body(response)["message"] == "invalid_field: sender (not_a_string)"
        assert [await runtime.queue.depth(lane) for lane in Lane] == [0, 0, 0]


class TestReceiverEndpoint:
    @pytest.mark.asyncio
    async def test_bearer_api_key(self, runtime: RelayRuntime) -> None:
        request = _build_request(
            _json({"sender": "5511999999999", "type": "image"}),
            {"Authorization": f"Bearer {API_KEY}"},
            path="/api/receiver/messages",
        )

        response = await receive_messages(request)

        assert response.status_code == 200
        assert _body(response)["lane"] == "default"

    @pytest.mark.asyncio
    async def test_webhook_secret_not_accepted_on_receiver(self, runtime: RelayRuntime) -> None:
        request = _build_request(
            _json({"sender": "5511999999999"}),
            {"X-Webhook-Secret": WEBHOOK_SECRET},
            path="/api/receiver/messages",
        )

        response = await receive_messages(request)

        assert response.status_code == 401
        assert _body(response)["message"] == "Unauthorized: Invalid API key"


class TestRuntimeModes:
    @pytest.mark.asyncio
    async def test_unconfigured_secret_in_production_returns_503(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        current = _runtime(webhook_secret="")
        monkeypatch.setattr(ingest, "get_runtime", lambda: current)

        response = await receive_webhook(_build_request(_json({"from": "5511999999999"})))

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_unconfigured_secret_outside_production_is_allowed(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        current = _runtime(webhook_secret="", production_mode=False)
        monkeypatch.setattr(ingest, "get_runtime", lambda: current)

        response = await receive_webhook(_build_request(_json({"from": "5511999999999"})))

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_queue_unavailable_returns_503(self, monkeypatch: pytest.MonkeyPatch) -> None:
        current = _runtime(queue=BrokenQueue())
        monkeypatch.setattr(ingest, "get_runtime", lambda: current)

        response = await receive_webhook(
            _build_request(_json({"from": "5511999999999"}), {"X-API-Key": WEBHOOK_SECRET})
        )

        assert response.status_code == 503
        assert _body(response)["message"] == "Queue unavailable"

    @pytest.mark.asyncio
    async def test_inline_mode_calls_handler(self, monkeypatch: pytest.MonkeyPatch) -> None:
        handler = RecordingHandler()
        current = _runtime(handler=handler, processing_mode="inline")
        monkeypatch.setattr(ingest, "get_runtime", lambda: current)

        response = await receive_webhook(
            _build_request(_json({"from": "5511999999999"}), {"X-API-Key": WEBHOOK_SECRET})
        )

        assert response.status_code == 200
        assert _body(response)["item_id"] is None
        assert len(handler.records) == 1

    @pytest.mark.asyncio
    async def test_inline_mode_handler_failure_returns_500(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        current = _runtime(handler=RecordingHandler(fail=True), processing_mode="inline")
        monkeypatch.setattr(ingest, "get_runtime", lambda: current)

        response = await receive_webhook(
            _build_request(_json({"from": "5511999999999"}), {"X-API-Key": WEBHOOK_SECRET})
        )

        assert response.status_code == 500
        assert _body(response)["message"] == "Processing failed"
