"""Normalizer do payload do receiver para MessageRecord.

Aceita payloads de formato variável (sender/from, content/body,
sending_time/timestamp/messageTimestamp, ...), aplica sanitização em
todo campo textual e produz um MessageRecord imutável.

Pré-condição: o payload já passou pelo gate de credencial.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from api.normalizers.receiver.fields import resolve
from api.normalizers.shared import (
    sanitize_filename,
    sanitize_jid,
    sanitize_text,
    sanitize_url,
)
from app.domain.message_record import (
    DEFAULT_MESSAGE_TYPE,
    MEDIA_TYPES,
    REACTION_TYPE,
    MessageRecord,
)
from app.protocols.clock import utc_now
from utils.errors import InvalidFieldError, MissingRequiredFieldError

if TYPE_CHECKING:
    from app.protocols.clock import ClockProtocol

logger = logging.getLogger(__name__)

MAX_TYPE_LENGTH = 50
MAX_JID_LENGTH = 255
MAX_SENDER_BIO_LENGTH = 500

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


class ReceiverMessageNormalizer:
    """Converte payload bruto em MessageRecord.

    Args:
        clock: Fonte de "agora" usada quando o payload não traz horário
    """

    def __init__(self, clock: ClockProtocol | None = None) -> None:
        self._clock = clock or utc_now

    def normalize(self, payload: Mapping[str, Any]) -> MessageRecord:
        """Normaliza um payload.

        Raises:
            MissingRequiredFieldError: sender e/ou chat ausentes
            InvalidFieldError: campo com formato inválido
        """
        if not isinstance(payload, Mapping):
            raise InvalidFieldError("payload", "not_an_object")

        sender = _as_jid("sender", resolve(payload, "sender"))
        chat = _as_jid("chat", resolve(payload, "chat")) or sender

        missing = [name for name, value in (("sender", sender), ("chat", chat)) if not value]
        if missing:
            logger.info(
                "normalize_missing_required_field",
                extra={"missing": missing},
            )
            raise MissingRequiredFieldError(missing)

        message_type = _parse_type(resolve(payload, "type"))
        is_media = message_type in MEDIA_TYPES
        is_reaction = message_type == REACTION_TYPE

        return MessageRecord(
            sender=sender,
            chat=chat,
            type=message_type,
            content=sanitize_text(_text(payload, "content")) or "",
            sending_time=self._parse_sending_time(resolve(payload, "sending_time")),
            message_id=_parse_message_id(resolve(payload, "message_id")),
            is_group=_as_bool(resolve(payload, "is_group")),
            media=_text(payload, "media") if is_media else None,
            mime_type=sanitize_text(_text(payload, "mime_type")) if is_media else None,
            file_name=sanitize_filename(_text(payload, "file_name")) if is_media else None,
            media_size_bytes=(
                _parse_size(resolve(payload, "media_size_bytes")) if is_media else None
            ),
            context_info=_as_mapping("context_info", resolve(payload, "context_info")),
            quoted_message=_as_mapping("quoted_message", resolve(payload, "quoted_message")),
            poll_data=_as_mapping("poll_data", resolve(payload, "poll_data")),
            poll_message_id=_text(payload, "poll_message_id"),
            reacted_message_id=_text(payload, "reacted_message_id") if is_reaction else None,
            emoji=_text(payload, "emoji") if is_reaction else None,
            sender_jid=_as_jid("sender_jid", resolve(payload, "sender_jid")),
            sender_profile_picture_url=sanitize_url(
                _text(payload, "sender_profile_picture_url")
            ),
            sender_bio=sanitize_text(
                _text(payload, "sender_bio"), max_length=MAX_SENDER_BIO_LENGTH
            ),
        )

    def _parse_sending_time(self, value: Any) -> datetime:
        if value is None:
            return _ensure_utc(self._clock())
        return parse_timestamp(value)


def normalize_payload(
    payload: Mapping[str, Any],
    clock: ClockProtocol | None = None,
) -> MessageRecord:
    """Atalho funcional para ReceiverMessageNormalizer(clock).normalize()."""
    return ReceiverMessageNormalizer(clock=clock).normalize(payload)


def parse_timestamp(value: Any) -> datetime:
    """Converte datetime, epoch (s) ou ISO-8601 em datetime UTC.

    Datetimes sem timezone são tratados como UTC.

    Raises:
        InvalidFieldError: valor não interpretável como instante
    """
    if isinstance(value, datetime):
        return _ensure_utc(value)
    if isinstance(value, bool):
        raise InvalidFieldError("sending_time", "unparseable")

    try:
        if isinstance(value, int | float):
            return datetime.fromtimestamp(value, tz=UTC)
        text = str(value).strip()
        if text.isdigit():
            return datetime.fromtimestamp(int(text), tz=UTC)
        return _ensure_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError, OSError) as exc:
        raise InvalidFieldError("sending_time", "unparseable") from exc


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _parse_type(value: Any) -> str:
    if value is None:
        return DEFAULT_MESSAGE_TYPE
    text = (_require_str("type", value) or "").strip()
    if len(text) > MAX_TYPE_LENGTH:
        raise InvalidFieldError("type", f"longer_than_{MAX_TYPE_LENGTH}")
    return sanitize_text(text) or DEFAULT_MESSAGE_TYPE


def _parse_size(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidFieldError("media_size_bytes", "not_an_integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidFieldError("media_size_bytes", "not_an_integer")
        value = int(value)
    try:
        size = int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidFieldError("media_size_bytes", "not_an_integer") from exc
    if size < 0:
        raise InvalidFieldError("media_size_bytes", "negative")
    return size


def _as_mapping(field_name: str, value: Any) -> dict[str, Any] | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise InvalidFieldError(field_name, "not_an_object")
    return copy.deepcopy(dict(value))


def _require_str(field_name: str, value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidFieldError(field_name, "not_a_string")
    return value


def _text(payload: Mapping[str, Any], canonical: str) -> str | None:
    return _require_str(canonical, resolve(payload, canonical))


def _as_jid(field_name: str, value: Any) -> str:
    text = _require_str(field_name, value)
    if text is None:
        return ""
    if len(text) > MAX_JID_LENGTH:
        raise InvalidFieldError(field_name, f"longer_than_{MAX_JID_LENGTH}")
    return sanitize_jid(text) or ""


def _parse_message_id(value: Any) -> str | None:
    # ids numéricos (epoch) chegam como int em alguns receivers
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return _require_str("message_id", value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)
