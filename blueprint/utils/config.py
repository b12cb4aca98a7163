"""Runtime configuration helpers for document generation."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Final, Optional


DEFAULT_TITLE: Final[str] = "API Documentation"


def document_title() -> str:
    """Return the configured document title.

    Read at call time so tests and ``.env`` files loaded after import are honoured.
    """

    value = os.getenv("BLUEPRINT_TITLE", "").strip()
    return value or DEFAULT_TITLE


def default_output_path() -> Optional[Path]:
    value = os.getenv("BLUEPRINT_OUTPUT", "").strip()
    return Path(value).expanduser() if value else None


__all__ = ["DEFAULT_TITLE", "default_output_path", "document_title"]
