"""Test workspace lifecycle."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Optional

from e2erun.logging import get_logger


logger = get_logger("workspace")


class Workspace:
    """
    Directory holding the downloaded test sources.

    Used as a context manager. The directory is removed on exit, whether
    the body succeeded or raised, unless ``keep`` is set.

    Example usage:
        with Workspace(keep=False) as tests_dir:
            fetch_tarball(url, tests_dir)
    """

    PREFIX = "tests."

    def __init__(self, path: Optional[Path] = None, keep: bool = False):
        """
        Args:
            path: Directory to use. If None, a temp directory is created.
            keep: Do not delete the directory on exit.
        """
        self.requested_path = Path(path) if path else None
        self.keep = keep
        self.path: Optional[Path] = None

    def setup(self) -> Path:
        """Create (or reset) the workspace directory and return it."""
        if self.requested_path is None:
            self.path = Path(tempfile.mkdtemp(prefix=self.PREFIX))
        else:
            self.path = self.requested_path
            if not self.keep and self.path.exists():
                shutil.rmtree(self.path)
            self.path.mkdir(parents=True, exist_ok=True)

        logger.info(f"Using tests dir: {self.path}")
        return self.path

    def cleanup(self) -> None:
        """Remove the workspace unless it is retained."""
        if self.keep or self.path is None or not self.path.is_dir():
            return
        logger.debug(f"Removing tests dir: {self.path}")
        shutil.rmtree(self.path, ignore_errors=True)

    def __enter__(self) -> Path:
        return self.setup()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
