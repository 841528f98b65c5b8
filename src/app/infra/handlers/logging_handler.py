"""Handler downstream de desenvolvimento: apenas registra a entrega."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.message_record import MessageRecord

logger = logging.getLogger(__name__)


class LoggingMessageHandler:
    """Registra o record entregue (sem conteúdo da mensagem)."""

    async def handle(self, record: MessageRecord) -> None:
        logger.info(
            "message_delivered",
            extra={
                "message_type": record.type,
                "message_id": record.message_id,
                "is_group": record.is_group,
                "content_length": len(record.content),
            },
        )
