"""Normalizer do receiver: payload bruto → MessageRecord."""

from .fields import FIELD_CANDIDATES, is_present, resolve_field
from .normalizer import ReceiverMessageNormalizer, normalize_payload, parse_timestamp

__all__ = [
    "FIELD_CANDIDATES",
    "ReceiverMessageNormalizer",
    "is_present",
    "normalize_payload",
    "parse_timestamp",
    "resolve_field",
]
