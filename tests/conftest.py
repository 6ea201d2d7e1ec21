"""Shared test fixtures for invisible-char-detector tests."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Generator

import pytest

from invisible_detector.config import ENV_PREFIX


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep INVISIBLE_DETECTOR_* settings from the host out of the tests."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def reset_logger() -> Generator[None, None, None]:
    """The CLI installs its own stderr handler; undo that after each test."""
    yield
    log = logging.getLogger("invisible_detector")
    log.handlers[:] = []
    log.setLevel(logging.NOTSET)
    log.propagate = True


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[dict[str, bytes | str]], Path]:
    """Write {relative path: content} under tmp_path. str content is UTF-8 encoded."""

    def _make(files: dict[str, bytes | str]) -> Path:
        for rel, content in files.items():
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            data = content.encode("utf-8") if isinstance(content, str) else content
            target.write_bytes(data)
        return tmp_path

    return _make
