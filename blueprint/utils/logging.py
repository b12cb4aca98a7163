"""Logging for document generation runs.

A run logs ``generation.start`` with the output path and record count, then
either ``generation.finish`` with the number of groups, actions and examples
written, or ``generation.failed`` with the error code that aborted it.
"""
from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from time import monotonic
from typing import Dict, Iterator, Optional


_ACTIVE_STATS: contextvars.ContextVar["GenerationStats | None"] = contextvars.ContextVar(
    "blueprint_generation_stats", default=None
)

SECTION_KINDS = ("group", "action", "example")


def configure_root(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")


@dataclass(slots=True)
class GenerationStats:
    """Sections written so far in one generation run."""

    groups: int = 0
    actions: int = 0
    examples: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def count_section(kind: str) -> None:
    """Count one rendered ``group``, ``action`` or ``example`` on the active run."""

    if kind not in SECTION_KINDS:
        raise ValueError(f"Unknown section kind: {kind!r}")
    stats = _ACTIVE_STATS.get()
    if stats is None:
        return
    field_name = f"{kind}s"
    setattr(stats, field_name, getattr(stats, field_name) + 1)


def _error_code(exc: BaseException) -> str:
    code = getattr(exc, "code", None)
    return getattr(code, "value", None) or type(exc).__name__


@contextmanager
def generation_scope(
    output: str, *, records: int, logger: Optional[logging.Logger] = None
) -> Iterator[GenerationStats]:
    """Track and log one document generation run writing ``output``."""

    logger = logger or logging.getLogger("blueprint.run")
    stats = GenerationStats()
    token = _ACTIVE_STATS.set(stats)
    start = monotonic()
    logger.info("generation.start", extra={"output": output, "records": records})
    try:
        yield stats
    except Exception as exc:
        logger.error(
            "generation.failed",
            exc_info=True,
            extra={"output": output, "records": records, "error_code": _error_code(exc)},
        )
        raise
    else:
        logger.info(
            "generation.finish",
            extra={
                "output": output,
                "records": records,
                "duration_s": monotonic() - start,
                **stats.as_dict(),
            },
        )
    finally:
        _ACTIVE_STATS.reset(token)


__all__ = ["GenerationStats", "configure_root", "count_section", "generation_scope"]
