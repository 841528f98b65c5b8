"""Filas de entrega: lanes de prioridade, itens e despacho."""

from app.queue.dispatcher import LaneAssignment, PriorityDispatcher, derive_tags
from app.queue.items import LeasedItem, QueuedItem
from app.queue.lanes import LANE_BY_TYPE, LANE_PRIORITY, Lane, classify_lane

__all__ = [
    "LANE_BY_TYPE",
    "LANE_PRIORITY",
    "Lane",
    "LaneAssignment",
    "LeasedItem",
    "PriorityDispatcher",
    "QueuedItem",
    "classify_lane",
    "derive_tags",
]
