"""Filter que carimba cada log do relay com correlation_id e service.

O correlation_id vem de dois lugares:
- Request HTTP: header X-Correlation-Id (ou um id gerado na entrada)
- Worker de entrega: o id gravado no item da fila no dispatch, restaurado
  antes de cada tentativa

Assim todos os eventos de uma mensagem (ingest, dispatch, tentativas,
falha terminal) compartilham o mesmo id nos logs JSON.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class CorrelationIdFilter(logging.Filter):
    """Instalado no handler raiz por configure_logging.

    Um correlation_id passado em `extra` tem precedência sobre o do
    contexto; sem getter o campo sai vazio.

    Args:
        service_name: Valor do campo `service`
        correlation_id_getter: Lê o correlation_id do contexto atual
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._correlation_id_getter = correlation_id_getter

    def _current_correlation_id(self) -> str:
        if self._correlation_id_getter is None:
            return ""
        return self._correlation_id_getter() or ""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = self._current_correlation_id()
        record.service = self._service_name
        return True
