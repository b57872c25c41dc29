"""Shared fixtures for runner tests."""

from __future__ import annotations

import io
import logging
import signal
import tarfile
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Let caplog see package records and drop handlers bound to closed streams."""
    logger = logging.getLogger("e2erun")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def restore_signal_handlers():
    """The CLI installs SIGTERM/SIGINT handlers; put the originals back."""
    saved = {sig: signal.getsignal(sig) for sig in (signal.SIGTERM, signal.SIGINT)}
    yield
    for sig, handler in saved.items():
        signal.signal(sig, handler)


@pytest.fixture
def make_tarball(tmp_path):
    """Build a .tar.gz from a {relative path: content} mapping."""

    def _make(
        files: dict[str, str],
        root: str = "ai-dial-chat-development",
        name: str = "src.tar.gz",
        mode: int = 0o644,
    ) -> Path:
        path = tmp_path / name
        with tarfile.open(path, "w:gz") as tar:
            if root:
                info = tarfile.TarInfo(root)
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            for rel, content in files.items():
                data = content.encode("utf-8")
                info = tarfile.TarInfo(f"{root}/{rel}" if root else rel)
                info.size = len(data)
                info.mode = mode
                tar.addfile(info, io.BytesIO(data))
        return path

    return _make
