"""Locate an optional hand-written intro next to the output file."""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Callable, List, Optional

IntroLookup = Callable[[str], Optional[str]]

_MD_SUFFIX = re.compile(r"\.md$", re.IGNORECASE)


def intro_candidates(path: str) -> List[str]:
    """Return the intro paths tried for ``path``, in lookup order."""

    candidates = [
        # /path/to/API.md -> /path/to/API_INTRO.md
        _MD_SUFFIX.sub(lambda match: "_INTRO" + match.group(0), path),
        # /path/to/api.md -> /path/to/api_intro.md
        _MD_SUFFIX.sub(lambda match: "_intro" + match.group(0), path),
        # /path/to/API -> /path/to/API_INTRO
        f"{path}_INTRO",
        # /path/to/api -> /path/to/api_intro
        f"{path}_intro",
    ]
    # a path without an .md suffix yields itself from the first two patterns
    return [candidate for candidate in candidates if candidate != path]


def _read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def find_intro(
    path: str | os.PathLike[str],
    *,
    exists: Callable[[str], bool] = os.path.isfile,
    read: Callable[[str], str] = _read_text,
) -> Optional[str]:
    """Return the contents of the first intro file found for ``path``."""

    for candidate in intro_candidates(os.fspath(path)):
        if exists(candidate):
            return read(candidate)
    return None


__all__ = ["IntroLookup", "find_intro", "intro_candidates"]
