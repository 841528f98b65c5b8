"""Normalizers: conversão de payloads externos para o modelo interno.

Estrutura:
- shared/: sanitização de texto, JIDs, arquivos e URLs
- receiver/: normalizer do payload do serviço receiver (WhatsApp)
"""

from .receiver import ReceiverMessageNormalizer, normalize_payload

__all__ = [
    "ReceiverMessageNormalizer",
    "normalize_payload",
]
