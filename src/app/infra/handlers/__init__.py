"""Handlers downstream concretos."""

from app.infra.handlers.http_forwarding import DownstreamHttpError, HttpForwardingHandler
from app.infra.handlers.logging_handler import LoggingMessageHandler

__all__ = [
    "DownstreamHttpError",
    "HttpForwardingHandler",
    "LoggingMessageHandler",
]
