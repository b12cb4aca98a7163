"""Write a blueprint document to disk."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from ..records import InteractionRecord
from ..utils.config import document_title
from ..utils.logging import generation_scope
from .intro import IntroLookup, find_intro
from .render import render_document

log = logging.getLogger(__name__)


def output_file(path: str | os.PathLike[str]) -> Path:
    return Path(f"{os.fspath(path)}.md")


def write_blueprint(
    records: Iterable[InteractionRecord],
    path: str | os.PathLike[str],
    *,
    title: Optional[str] = None,
    intro_lookup: IntroLookup = find_intro,
) -> Path:
    """Render ``records`` into ``<path>.md`` and return the written file.

    A failed run removes the partially written file before re-raising.
    """

    records = list(records)
    target = output_file(path)
    resolved_title = title if title is not None else document_title()
    with generation_scope(str(target), records=len(records)):
        intro = intro_lookup(os.fspath(path))
        if intro is None:
            log.info("No intro fragment found for %s; using default heading", path)
        try:
            with target.open("w", encoding="utf-8") as handle:
                render_document(records, handle, title=resolved_title, intro=intro)
        except Exception:
            target.unlink(missing_ok=True)
            raise
    return target


__all__ = ["output_file", "write_blueprint"]
