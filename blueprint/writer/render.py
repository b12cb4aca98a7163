"""Emit grouped records as API Blueprint markdown."""
from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, TextIO
from urllib.parse import quote

from ..records import InteractionRecord
from ..utils.config import document_title
from ..utils.errors import EmptyActionGroup
from ..utils.logging import count_section
from .anchor import resolve_anchor
from .body import BLOCK_INDENT, indent_lines, normalize_body
from .grouping import ActionGroup, group_records, sort_by_status

log = logging.getLogger(__name__)

DEFAULT_INTRO = "# API Documentation\n"

# Characters left untouched when percent-encoding parameter names and values.
_URI_SAFE = ":/?#[]@!$&'()*+,;="


def _puts(stream: TextIO, text: str) -> None:
    stream.write(text)
    stream.write("\n")


def _encode(value: str) -> str:
    return quote(value, safe=_URI_SAFE)


def _first(group: str, action: str, records: List[InteractionRecord]) -> InteractionRecord:
    if not records:
        raise EmptyActionGroup(group, action)
    return records[0]


def write_intro(stream: TextIO, intro: Optional[str]) -> None:
    if intro is None:
        _puts(stream, DEFAULT_INTRO)
        return
    _puts(stream, intro)
    _puts(stream, "\n\n## Endpoints\n\n")


def write_parameters(stream: TextIO, params: Mapping[str, str]) -> None:
    if not params:
        return
    bullets = "\n".join(
        f"    + {_encode(name)}: `{_encode(value)}`" for name, value in params.items()
    )
    _puts(stream, f"\n+ Parameters\n{bullets}")
    for name, value in params.items():
        _puts(stream, indent_lines(BLOCK_INDENT, f"{name}: {value}"))


def write_body(stream: TextIO, body: object) -> None:
    block = normalize_body(body)
    if block is not None:
        _puts(stream, block)


def write_example(stream: TextIO, record: InteractionRecord) -> None:
    _puts(stream, f"\n\n+ Request {record.description}")
    _puts(stream, f"**{record.method}** `{record.full_path}`\n")
    _puts(stream, indent_lines(4, "+ Headers\n"))
    for name, value in record.request_headers:
        _puts(stream, indent_lines(BLOCK_INDENT, f"{name}: {value}"))
    _puts(stream, indent_lines(4, "+ Body\n"))
    write_body(stream, record.request_body)

    _puts(stream, f"\n+ Response {record.status}\n")
    _puts(stream, indent_lines(4, "+ Body\n"))
    write_body(stream, record.response_body)
    count_section("example")


def write_action(stream: TextIO, group: str, action: str, records: List[InteractionRecord]) -> None:
    """Write one action heading and its examples.

    ``records`` arrive most-recent-first; the heading is taken from the
    earliest capture and examples are listed by status code.
    """

    chronological = list(reversed(records))
    first = _first(group, action, chronological)
    _puts(stream, f"### {action} [{first.method} {resolve_anchor(first)}]")
    _puts(stream, f"\n\n {first.detail}")
    write_parameters(stream, first.path_params)
    for record in sort_by_status(chronological):
        write_example(stream, record)
    count_section("action")


def write_group(stream: TextIO, group: str, actions: List[ActionGroup]) -> None:
    if not actions:
        raise EmptyActionGroup(group, "")
    first_action, first_records = actions[0]
    base = resolve_anchor(_first(group, first_action, first_records))
    log.debug("render.group", extra={"group": group, "actions": len(actions)})
    _puts(stream, f"\n# Group {group}")
    _puts(stream, f"## {group} [{base}]")
    for action, records in actions:
        write_action(stream, group, action, records)
    count_section("group")


def render_document(
    records: Iterable[InteractionRecord],
    stream: TextIO,
    *,
    title: Optional[str] = None,
    intro: Optional[str] = None,
) -> None:
    """Write the full blueprint for ``records`` to ``stream``.

    ``title`` falls back to the configured document title; ``intro`` is the raw
    text of an intro fragment, or ``None`` for the default heading.
    """

    grouped = group_records(records)
    _puts(stream, f"# {title if title is not None else document_title()}\n\n")
    write_intro(stream, intro)
    for group, actions in grouped:
        write_group(stream, group, actions)
    _puts(stream, "")


__all__ = [
    "DEFAULT_INTRO",
    "render_document",
    "write_action",
    "write_body",
    "write_example",
    "write_group",
    "write_intro",
    "write_parameters",
]
