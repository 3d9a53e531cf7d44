"""User and group normalization for sudoers and polkit identities."""

from __future__ import annotations

import logging
from typing import List

logger = logging.getLogger(__name__)

# Characters Windows refuses in account names, plus the group marker itself.
# Whitespace is removed as well.
INVALID_CHARS = ("/", "[", "]", ":", "|", "<", ">", "=", ";", "?", "*", "%")

GROUP_MARKER = "%"


def _split(raw: str) -> List[str]:
    # one identity per line and comma separated lists can be mixed
    return ",".join(raw.split("\n")).split(",")


def _normalize_token(token: str) -> str:
    is_group = token.startswith(GROUP_MARKER)
    for char in INVALID_CHARS:
        token = token.replace(char, "")
    token = "".join(token.split())

    domain, sep, name = token.partition("\\")
    if sep:
        name = name.replace("\\", "")
        if not name:
            return ""
        token = f"{name}@{domain}" if domain else name

    if is_group and token:
        token = GROUP_MARKER + token
    return token


def normalize(raw: str) -> List[str]:
    """Split raw administrator input into canonical ``user`` / ``%group`` tokens.

    Invalid characters and whitespace are removed and ``DOMAIN\\user`` is rewritten as
    ``user@DOMAIN``. Empty results are dropped, order and duplicates are kept.
    """
    identities: List[str] = []
    for initial in _split(raw):
        token = _normalize_token(initial)
        if not token:
            continue
        if token != initial:
            logger.warning(
                "Changed user or group %r to %r: Invalid characters or domain\\user format",
                initial,
                token,
            )
        identities.append(token)
    return identities


def polkit_identity(token: str) -> str:
    if token.startswith(GROUP_MARKER):
        return f"unix-group:{token[len(GROUP_MARKER):]}"
    return f"unix-user:{token}"
