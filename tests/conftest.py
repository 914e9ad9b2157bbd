import logging
import os
import stat
from collections.abc import Callable
from pathlib import Path

import pytest

from tapstream.sources import SourceRegistry, build_registry


@pytest.fixture
def registry() -> SourceRegistry:
    """A frozen registry with the default detectors."""
    return build_registry()


@pytest.fixture
def make_script(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a shell script into tmp_path."""

    def _make(name: str = "test.sh", body: str = "echo ok 1\n", executable: bool = True) -> Path:
        script = tmp_path / name
        script.write_text(f"#!/bin/sh\n{body}")
        mode = script.stat().st_mode
        if executable:
            script.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        else:
            script.chmod(mode & ~(stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))
        return script

    return _make


@pytest.fixture(autouse=True)
def clean_tapstream_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("TAPSTREAM_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handlers installed by CLI logging setup so later tests don't log to closed streams."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_level)
