"""Handler downstream que encaminha o record via HTTP POST (httpx).

Retries ficam a cargo da máquina de estados de entrega; aqui cada
chamada é uma única tentativa.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from app.domain.message_record import MessageRecord

logger = logging.getLogger(__name__)


class DownstreamHttpError(Exception):
    """Resposta não-2xx do downstream (sem dados sensíveis)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class HttpForwardingHandler:
    """POST do MessageRecord em JSON para a URL downstream.

    Args:
        url: Endpoint downstream
        timeout_seconds: Timeout da requisição HTTP
        auth_token: Token Bearer opcional
        client: Cliente httpx compartilhado (criado sob demanda se None)
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 30.0,
        auth_token: str = "",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout_seconds
        self._auth_token = auth_token
        self._client = client
        self._owns_client = client is None

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def handle(self, record: MessageRecord) -> None:
        """Encaminha o record.

        Raises:
            DownstreamHttpError: resposta fora da faixa 2xx
            httpx.HTTPError: falha de transporte
        """
        response = await self._get_client().post(
            self._url,
            json=record.to_dict(),
            headers=self._headers(),
            timeout=self._timeout,
        )
        if not response.is_success:
            raise DownstreamHttpError(
                f"downstream_status_{response.status_code}",
                status_code=response.status_code,
            )
        logger.debug(
            "downstream_forwarded",
            extra={"status_code": response.status_code, "message_type": record.type},
        )

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
