"""Normalise captured bodies into indented, pretty-printed JSON blocks."""
from __future__ import annotations

import json
from typing import Any, Final, Optional

from ..records import EMPTY
from ..utils.errors import MalformedBodyText

# Column at which block content sits under ``+ Headers`` and ``+ Body``.
BLOCK_INDENT: Final[int] = 12


def is_empty_body(body: Any) -> bool:
    if body is None or body is EMPTY:
        return True
    return isinstance(body, (str, dict, list, tuple)) and len(body) == 0


def indent_lines(spaces: int, text: str) -> str:
    pad = " " * spaces
    return "\n".join(pad + line for line in text.split("\n"))


def _decode(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedBodyText(text, exc.msg) from exc


def normalize_body(body: Any, *, indent: int = BLOCK_INDENT) -> Optional[str]:
    """Return ``body`` as an indented JSON block, or ``None`` when empty.

    Text bodies are decoded exactly once, so a value and its serialized form
    render identically and ``'"42"'`` renders as the string ``"42"``. Decoded
    scalars are re-encoded as JSON; key order is preserved.
    """

    if is_empty_body(body):
        return None
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    if isinstance(body, str):
        body = _decode(body)
        if is_empty_body(body):
            return None
    if isinstance(body, tuple):
        body = list(body)
    return indent_lines(indent, json.dumps(body, indent=2, ensure_ascii=False))


__all__ = ["BLOCK_INDENT", "indent_lines", "is_empty_body", "normalize_body"]
