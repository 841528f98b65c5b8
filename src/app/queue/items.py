"""Itens de fila: MessageRecord por valor + estado de tentativas."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Any

from app.queue.lanes import Lane
from fsm.types.attempt import DeliveryAttemptState


@dataclass(frozen=True, slots=True)
class QueuedItem:
    """Unidade de trabalho carregada pela fila.

    Attributes:
        item_id: Identificador opaco do item
        lane: Lane de origem (retries voltam para a mesma)
        record: MessageRecord serializado (to_dict)
        attempt: Estado de tentativas de entrega
        tags: Tags de agrupamento (whatsapp, type:..., chat:...)
        correlation_id: Correlation id do request de origem
        enqueued_at: Epoch (s) do despacho
    """

    item_id: str
    lane: Lane
    record: dict[str, Any]
    attempt: DeliveryAttemptState
    tags: tuple[str, ...] = ()
    correlation_id: str = ""
    enqueued_at: float = 0.0

    def with_attempt(self, attempt: DeliveryAttemptState) -> QueuedItem:
        return replace(self, attempt=attempt)

    def to_json(self) -> str:
        return json.dumps(
            {
                "item_id": self.item_id,
                "lane": self.lane.value,
                "record": self.record,
                "attempt": self.attempt.to_dict(),
                "tags": list(self.tags),
                "correlation_id": self.correlation_id,
                "enqueued_at": self.enqueued_at,
            },
            ensure_ascii=False,
            sort_keys=True,
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> QueuedItem:
        data = json.loads(raw)
        return cls(
            item_id=data["item_id"],
            lane=Lane(data["lane"]),
            record=data["record"],
            attempt=DeliveryAttemptState.from_dict(data["attempt"]),
            tags=tuple(data.get("tags") or ()),
            correlation_id=data.get("correlation_id") or "",
            enqueued_at=float(data.get("enqueued_at") or 0.0),
        )


@dataclass(frozen=True, slots=True)
class LeasedItem:
    """Item retirado da fila e em posse exclusiva de um worker.

    raw é a forma serializada exata guardada pelo backend; é usada para
    liberar o lease (ack/retry).
    """

    item: QueuedItem
    raw: str | bytes
