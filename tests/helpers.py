"""Test doubles shared across runner tests."""

from __future__ import annotations

from pathlib import Path

import requests


def make_executable(path: Path, body: str = "exit 0") -> Path:
    """Write a small shell script and mark it executable."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!/bin/sh\n{body}\n")
    path.chmod(0o755)
    return path


class FakeResponse:
    """Minimal streaming response for requests.Session.get."""

    def __init__(self, content: bytes = b"", status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]


class FakeSession:
    """Serves canned responses by URL and records requests."""

    def __init__(self, responses: dict[str, FakeResponse]):
        self.responses = responses
        self.requested: list[str] = []

    def get(self, url, stream=False, timeout=None):
        self.requested.append(url)
        return self.responses[url]
