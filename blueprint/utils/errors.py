"""Error codes and exceptions raised while generating a blueprint."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence


class ErrorCode(str, Enum):
    """Stable error codes reported by the writer and the CLI."""

    MALFORMED_BODY_TEXT = "MALFORMED_BODY_TEXT"
    EMPTY_ACTION_GROUP = "EMPTY_ACTION_GROUP"
    INVALID_CAPTURE_FILE = "INVALID_CAPTURE_FILE"
    MISSING_IDENTITY = "MISSING_IDENTITY"


@dataclass(frozen=True)
class ErrorTemplate:
    """Default message and recovery hints for an error code."""

    message: str
    recovery: Sequence[str] = ()


_TEMPLATES: Mapping[ErrorCode, ErrorTemplate] = {
    ErrorCode.MALFORMED_BODY_TEXT: ErrorTemplate(
        message="A captured body is not valid JSON.",
        recovery=(
            "Check the test that produced the record sends and returns JSON bodies.",
            "Record non-JSON payloads as empty bodies instead.",
        ),
    ),
    ErrorCode.EMPTY_ACTION_GROUP: ErrorTemplate(
        message="An action was grouped without any records.",
        recovery=(
            "This is an internal error; report it with the capture file attached.",
        ),
    ),
    ErrorCode.INVALID_CAPTURE_FILE: ErrorTemplate(
        message="Capture file was malformed or failed validation.",
        recovery=(
            "Regenerate the capture file by re-running the test suite.",
        ),
    ),
    ErrorCode.MISSING_IDENTITY: ErrorTemplate(
        message="A record has no group or action name.",
        recovery=(
            "Record responses with an app so the endpoint can be resolved.",
            "Or pass group_title and action_description when recording.",
        ),
    ),
}


def _resolve_template(code: ErrorCode) -> ErrorTemplate:
    try:
        return _TEMPLATES[code]
    except KeyError:  # pragma: no cover
        raise ValueError(f"No error template registered for {code!s}") from None


class BlueprintError(RuntimeError):
    """Base class for failures that abort document generation."""

    code: ErrorCode = ErrorCode.INVALID_CAPTURE_FILE

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or _resolve_template(self.code).message)


class MalformedBodyText(BlueprintError):
    """Raised when a pre-serialized body fails to decode."""

    code = ErrorCode.MALFORMED_BODY_TEXT

    def __init__(self, text: str, reason: str) -> None:
        preview = text if len(text) <= 60 else text[:57] + "..."
        super().__init__(f"Body is not valid JSON ({reason}): {preview!r}")
        self.text = text
        self.reason = reason


class EmptyActionGroup(BlueprintError):
    """Raised when an action bucket unexpectedly holds no records."""

    code = ErrorCode.EMPTY_ACTION_GROUP

    def __init__(self, group: str, action: str) -> None:
        super().__init__(f"Action {action!r} in group {group!r} has no records")
        self.group = group
        self.action = action


class MissingIdentity(BlueprintError):
    """Raised when a record names neither its group/action nor its source."""

    code = ErrorCode.MISSING_IDENTITY

    def __init__(self, method: str, path: str, missing: str) -> None:
        super().__init__(f"Record for {method} {path} has no {missing}")
        self.method = method
        self.path = path
        self.missing = missing


class InvalidCaptureFile(BlueprintError):
    """Raised when a persisted capture file cannot be loaded."""

    code = ErrorCode.INVALID_CAPTURE_FILE

    def __init__(self, message: str, errors: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.errors: List[str] = list(errors)


def make_error(
    code: ErrorCode,
    message: Optional[str] = None,
    *,
    recovery: Optional[Iterable[str]] = None,
) -> Dict[str, object]:
    """Create a JSON-serialisable error dict."""

    template = _resolve_template(code)
    return {
        "code": code.value,
        "message": message if message is not None else template.message,
        "recovery": list(recovery) if recovery is not None else list(template.recovery),
    }


__all__ = [
    "BlueprintError",
    "EmptyActionGroup",
    "ErrorCode",
    "ErrorTemplate",
    "InvalidCaptureFile",
    "MalformedBodyText",
    "MissingIdentity",
    "make_error",
]
