"""Lanes de prioridade e classificação por tipo de mensagem."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class Lane(StrEnum):
    HIGH = "high"
    DEFAULT = "default"
    LOW = "low"


# Ordem de polling dos workers
LANE_PRIORITY: Final[tuple[Lane, ...]] = (Lane.HIGH, Lane.DEFAULT, Lane.LOW)

LANE_BY_TYPE: Final[dict[str, Lane]] = {
    "text": Lane.HIGH,
    "reaction": Lane.HIGH,
    "image": Lane.DEFAULT,
    "audio": Lane.DEFAULT,
    "video": Lane.LOW,
    "document": Lane.LOW,
}


def classify_lane(message_type: str) -> Lane:
    """Tipos desconhecidos caem na lane default."""
    return LANE_BY_TYPE.get(message_type, Lane.DEFAULT)
