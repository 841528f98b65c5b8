"""Tabelas de chaves candidatas do payload do receiver.

Cada campo canônico lista, em ordem de precedência, as chaves aceitas no
payload. A primeira chave com valor presente vence; None e strings vazias
(ou só espaços) contam como ausentes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

FIELD_CANDIDATES: Final[dict[str, tuple[str, ...]]] = {
    "sender": ("sender", "from"),
    "chat": ("chat", "from"),
    "type": ("type",),
    "content": ("content", "body"),
    "sending_time": ("sending_time", "timestamp", "messageTimestamp"),
    "message_id": ("messageId", "id"),
    "is_group": ("isGroup", "is_group"),
    "media": ("media",),
    "mime_type": ("mimetype", "mimeType"),
    "file_name": ("fileName", "file_name"),
    "media_size_bytes": ("mediaSize", "mediaSizeBytes"),
    "context_info": ("contextInfo", "context_info"),
    "quoted_message": ("quotedMessage", "quoted_message"),
    "poll_data": ("pollData", "poll_data"),
    "poll_message_id": ("pollMessageId", "poll_message_id"),
    "reacted_message_id": ("reactedMessageId", "reacted_message_id"),
    "emoji": ("emoji",),
    "sender_jid": ("senderJid", "sender_jid"),
    "sender_profile_picture_url": ("senderProfilePictureUrl", "sender_profile_picture_url"),
    "sender_bio": ("senderBio", "sender_bio"),
}


def is_present(value: Any) -> bool:
    """None e strings em branco contam como ausentes."""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def resolve_field(payload: Mapping[str, Any], candidates: tuple[str, ...]) -> Any | None:
    """Retorna o valor da primeira chave candidata presente (ou None)."""
    for key in candidates:
        value = payload.get(key)
        if is_present(value):
            return value
    return None


def resolve(payload: Mapping[str, Any], canonical: str) -> Any | None:
    """Atalho para resolve_field com a tabela FIELD_CANDIDATES."""
    return resolve_field(payload, FIELD_CANDIDATES[canonical])
