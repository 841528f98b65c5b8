"""Utilitários compartilhados de sanitização de payloads.

Usados pelo normalizer do receiver para texto, JIDs, arquivos e URLs.
"""

from .sanitizer import (
    MAX_FILENAME_LENGTH,
    sanitize_filename,
    sanitize_jid,
    sanitize_phone,
    sanitize_text,
    sanitize_url,
)

__all__ = [
    "MAX_FILENAME_LENGTH",
    "sanitize_filename",
    "sanitize_jid",
    "sanitize_phone",
    "sanitize_text",
    "sanitize_url",
]
