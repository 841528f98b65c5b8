"""MessageRecord - representação canônica de uma mensagem recebida.

Imutável e serializável em dict JSON-safe, para ser entregue à fila por
valor. Nunca construída com sender/chat vazios.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, fields
from datetime import UTC, datetime
from typing import Any

MEDIA_TYPES: frozenset[str] = frozenset({"image", "video", "audio", "document", "sticker"})
REACTION_TYPE = "reaction"
DEFAULT_MESSAGE_TYPE = "text"


@dataclass(frozen=True, slots=True)
class MessageRecord:
    """Mensagem normalizada, pronta para despacho."""

    sender: str
    chat: str
    type: str
    sending_time: datetime
    content: str = ""
    message_id: str | None = None
    is_group: bool = False
    # Mídia (apenas para MEDIA_TYPES)
    media: str | None = None
    mime_type: str | None = None
    file_name: str | None = None
    media_size_bytes: int | None = None
    # Estruturas opacas
    context_info: dict[str, Any] | None = None
    quoted_message: dict[str, Any] | None = None
    poll_data: dict[str, Any] | None = None
    poll_message_id: str | None = None
    # Reação (apenas para type == "reaction")
    reacted_message_id: str | None = None
    emoji: str | None = None
    # Enriquecimento do remetente
    sender_jid: str | None = None
    sender_profile_picture_url: str | None = None
    sender_bio: str | None = None

    def __post_init__(self) -> None:
        if not self.sender:
            raise ValueError("sender não pode ser vazio")
        if not self.chat:
            raise ValueError("chat não pode ser vazio")
        if not self.type:
            raise ValueError("type não pode ser vazio")
        if self.sending_time.tzinfo is None:
            raise ValueError("sending_time deve ter timezone")

    @property
    def is_media(self) -> bool:
        return self.type in MEDIA_TYPES

    def to_dict(self) -> dict[str, Any]:
        """Serializa para dict JSON-safe (sending_time em ISO-8601 UTC)."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, dict):
                value = copy.deepcopy(value)
            data[f.name] = value
        data["sending_time"] = self.sending_time.astimezone(UTC).isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MessageRecord:
        """Reconstrói a partir de to_dict(); chaves desconhecidas são ignoradas."""
        known = {f.name for f in fields(cls)}
        kwargs = {key: value for key, value in data.items() if key in known}
        sending_time = kwargs.get("sending_time")
        if isinstance(sending_time, str):
            parsed = datetime.fromisoformat(sending_time)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=UTC)
            kwargs["sending_time"] = parsed
        return cls(**kwargs)
