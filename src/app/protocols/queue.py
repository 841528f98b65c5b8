"""Protocolo de fila por lanes com lease, ack e reentrega atrasada."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.queue.items import LeasedItem, QueuedItem
    from app.queue.lanes import Lane


class LaneQueueProtocol(ABC):
    """Contrato da fila de entrega.

    - dequeue() é um lease atômico: dois workers nunca recebem o mesmo item
    - ack()/retry_later() liberam o lease
    - itens em retry ficam num conjunto atrasado até promote_due()
    """

    @abstractmethod
    async def enqueue(self, item: QueuedItem) -> None:
        """Adiciona item ao fim da lane do item."""

    @abstractmethod
    async def dequeue(self) -> LeasedItem | None:
        """Retira o próximo item, varrendo as lanes em ordem de prioridade."""

    @abstractmethod
    async def ack(self, leased: LeasedItem) -> None:
        """Confirma o item (sucesso ou descarte terminal)."""

    @abstractmethod
    async def retry_later(
        self,
        leased: LeasedItem,
        updated: QueuedItem,
        delay_seconds: float,
    ) -> None:
        """Libera o lease e reagenda o item atualizado após delay_seconds."""

    @abstractmethod
    async def promote_due(self) -> int:
        """Move itens atrasados vencidos de volta às suas lanes."""

    @abstractmethod
    async def depth(self, lane: Lane) -> int:
        """Itens pendentes (não atrasados, não em lease) na lane."""

    @abstractmethod
    async def ping(self) -> bool:
        """Verifica se o backend está acessível."""
