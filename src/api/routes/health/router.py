"""Endpoints de health check (liveness e readiness)."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.bootstrap import get_runtime
from app.queue.lanes import LANE_PRIORITY
from config.settings import get_base_settings

if TYPE_CHECKING:
    from app.bootstrap.dependencies import RelayRuntime

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed"]
    latency_ms: float | None = None
    error: str | None = None
    details: dict[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }
        if self.details is not None:
            data["details"] = self.details
        return data


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe: verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=get_base_settings().service_name,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check() -> JSONResponse:
    """Readiness probe: fila acessível; estado dos workers é informativo."""
    runtime = get_runtime()
    queue_check = await _check_queue(runtime)
    workers_check = _check_workers(runtime)

    ready = queue_check.status == "ok"
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "queue": queue_check.as_dict(),
            "workers": workers_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _check_queue(runtime: RelayRuntime) -> DependencyCheck:
    started_at = time.perf_counter()
    try:
        reachable = await asyncio.wait_for(runtime.queue.ping(), timeout=2.0)
        depths = {lane.value: await runtime.queue.depth(lane) for lane in LANE_PRIORITY}
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        logger.warning("readiness_queue_check_failed", extra={"error_type": type(exc).__name__})
        return DependencyCheck(status="failed", error=type(exc).__name__)
    if not reachable:
        return DependencyCheck(status="failed", error="ping_failed")
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2), details=depths)


def _check_workers(runtime: RelayRuntime) -> DependencyCheck:
    if runtime.processing_mode == "inline":
        return DependencyCheck(status="ok", details={"mode": "inline"})
    pool = runtime.worker_pool
    status: Literal["ok", "degraded"] = "ok" if pool.running else "degraded"
    return DependencyCheck(
        status=status,
        details={"mode": "queued", "worker_count": pool.worker_count},
    )
