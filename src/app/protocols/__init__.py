"""Protocolos e contratos do core da aplicação."""

from .clock import ClockProtocol, epoch_seconds, utc_now
from .handler import MessageHandlerProtocol
from .queue import LaneQueueProtocol

__all__ = [
    "ClockProtocol",
    "LaneQueueProtocol",
    "MessageHandlerProtocol",
    "epoch_seconds",
    "utc_now",
]
