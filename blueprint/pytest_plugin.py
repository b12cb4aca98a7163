"""pytest plugin that turns recorded test traffic into a blueprint.

Enable it from a ``conftest.py``::

    pytest_plugins = ["blueprint.pytest_plugin"]

then record responses through the ``blueprint_recorder`` fixture and run
``pytest --blueprint-output docs/API``.
"""
from __future__ import annotations

import logging
from typing import Optional

import pytest

from .capture import Recorder
from .utils.config import default_output_path
from .utils.errors import BlueprintError, make_error
from .writer import write_blueprint

log = logging.getLogger(__name__)

_RECORDER_KEY = pytest.StashKey[Recorder]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("blueprint", "API Blueprint generation")
    group.addoption(
        "--blueprint-output",
        action="store",
        default=None,
        help="Write an API Blueprint to PATH.md when the session finishes.",
    )
    group.addoption(
        "--blueprint-capture",
        action="store",
        default=None,
        help="Also dump the recorded interactions as JSON to this file.",
    )
    group.addoption(
        "--blueprint-title",
        action="store",
        default=None,
        help="Document title, overriding BLUEPRINT_TITLE.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.stash[_RECORDER_KEY] = Recorder()


def _output_path(config: pytest.Config) -> Optional[str]:
    value = config.getoption("blueprint_output")
    if value:
        return value
    fallback = default_output_path()
    return str(fallback) if fallback is not None else None


@pytest.fixture(scope="session")
def blueprint_recorder(request: pytest.FixtureRequest) -> Recorder:
    """Session-wide recorder; set ``blueprint_recorder.app`` to resolve routes."""
    return request.config.stash[_RECORDER_KEY]


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    config = session.config
    recorder = config.stash.get(_RECORDER_KEY, None)
    if recorder is None or not len(recorder):
        return
    capture = config.getoption("blueprint_capture")
    if capture:
        recorder.dump(capture)
    output = _output_path(config)
    if output is None:
        return
    try:
        written = write_blueprint(
            recorder.records, output, title=config.getoption("blueprint_title")
        )
    except BlueprintError as exc:
        error = make_error(exc.code, str(exc))
        reporter = config.pluginmanager.get_plugin("terminalreporter")
        if reporter is not None:
            reporter.write_line(f"blueprint: [{error['code']}] {error['message']}", red=True)
            for hint in error["recovery"]:
                reporter.write_line(f"blueprint: hint: {hint}")
        log.error("Blueprint generation failed: %s", exc)
        session.exitstatus = pytest.ExitCode.TESTS_FAILED
        return
    log.info("Wrote API Blueprint with %d records to %s", len(recorder), written)


__all__ = ["blueprint_recorder"]
