"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AuthFailureError,
    HandlerFailureError,
    InfrastructureError,
    InvalidFieldError,
    MissingRequiredFieldError,
    NormalizationError,
    QueueConnectionError,
    RelayError,
    ServiceUnavailableError,
)

__all__ = [
    "AuthFailureError",
    "HandlerFailureError",
    "InfrastructureError",
    "InvalidFieldError",
    "MissingRequiredFieldError",
    "NormalizationError",
    "QueueConnectionError",
    "RelayError",
    "ServiceUnavailableError",
]
