"""Sanitização de campos livres, identificadores e nomes de arquivo.

Responsabilidades:
- Remover tags HTML e caracteres de controle de texto livre
- Canonicalizar JIDs do WhatsApp (usuário e grupo)
- Impedir path traversal em nomes de arquivo
- Aceitar apenas URLs http/https

Funções puras: nunca levantam exceção; None e "" passam inalterados.
"""

from __future__ import annotations

import html
import re
from re import Pattern
from typing import Final
from urllib.parse import urlsplit

MAX_FILENAME_LENGTH: Final[int] = 255

_TAG_PATTERN: Final[Pattern[str]] = re.compile(r"<[^>]*>")
# Controles C0/C1, exceto \t \n \r
_CONTROL_PATTERN: Final[Pattern[str]] = re.compile(
    r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]"
)
_USER_JID_PATTERN: Final[Pattern[str]] = re.compile(r"^(\+?\d{5,})@s\.whatsapp\.net$")
_GROUP_JID_PATTERN: Final[Pattern[str]] = re.compile(r"^(\d{5,})@g\.us$")
_PHONE_DISALLOWED: Final[Pattern[str]] = re.compile(r"[^0-9+@]")
_JID_DISALLOWED: Final[Pattern[str]] = re.compile(r"[^0-9+@a-z.]")
_ALLOWED_URL_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})


def _as_text(value: object) -> str:
    return value if isinstance(value, str) else str(value)


def sanitize_text(value: object, max_length: int | None = None) -> str | None:
    """Sanitiza texto livre contra XSS.

    Remove tags, descarta caracteres de controle e escapa entidades HTML.
    O corte por max_length acontece antes do escape para não partir
    entidades ao meio.

    Exemplos:
        >>> sanitize_text("<b>oi</b> & tchau")
        'oi &amp; tchau'
    """
    if value is None:
        return None
    text = _as_text(value)
    if text == "":
        return text

    text = _TAG_PATTERN.sub("", text)
    text = _CONTROL_PATTERN.sub("", text)
    if max_length is not None and max_length >= 0:
        text = text[:max_length]
    return html.escape(text, quote=True)


def sanitize_phone(value: object) -> str | None:
    """Mantém apenas dígitos, '+' e '@'."""
    if value is None:
        return None
    return _PHONE_DISALLOWED.sub("", _as_text(value))


def sanitize_jid(value: object) -> str | None:
    """Canonicaliza um JID do WhatsApp.

    Exemplos:
        >>> sanitize_jid(" 5511999999999@S.WhatsApp.net ")
        '5511999999999@s.whatsapp.net'
        >>> sanitize_jid("+55 (11) 99999-9999")
        '+5511999999999'
    """
    if value is None:
        return None
    jid = _as_text(value).strip()
    if jid == "":
        return jid

    if "@" not in jid:
        return _PHONE_DISALLOWED.sub("", jid)

    jid = jid.lower()

    match = _USER_JID_PATTERN.match(jid)
    if match:
        return f"{match.group(1)}@s.whatsapp.net"

    match = _GROUP_JID_PATTERN.match(jid)
    if match:
        return f"{match.group(1)}@g.us"

    return _JID_DISALLOWED.sub("", jid)


def sanitize_filename(value: object) -> str | None:
    """Remove separadores de caminho, NUL e pontos iniciais (máx. 255 chars)."""
    if value is None:
        return None
    name = _as_text(value)
    if name == "":
        return name

    for token in ("/", "\\", "\x00"):
        name = name.replace(token, "")
    name = name.lstrip(".")
    return name[:MAX_FILENAME_LENGTH]


def sanitize_url(value: object) -> str | None:
    """Retorna a URL se for http/https com host; caso contrário None."""
    if value is None:
        return None
    url = _as_text(value).strip()
    if url == "":
        return url

    try:
        parts = urlsplit(url)
    except ValueError:
        return None

    if parts.scheme.lower() not in _ALLOWED_URL_SCHEMES or not parts.netloc:
        return None
    if any(ch.isspace() for ch in url):
        return None
    return url
