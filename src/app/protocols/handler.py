"""Protocolo do handler downstream (persistência, broadcast, etc.)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.message_record import MessageRecord


class MessageHandlerProtocol(Protocol):
    """Recebe um MessageRecord; qualquer exceção conta como falha da tentativa."""

    async def handle(self, record: MessageRecord) -> None: ...
