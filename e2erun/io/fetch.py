"""
Archive download and extraction.

Test sources and the Allure CLI are both distributed as ``.tar.gz``
archives over HTTPS. Downloads are retried at the transport level only.
"""
from __future__ import annotations

import tarfile
import tempfile
from pathlib import Path
from typing import Iterator, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from e2erun.core.errors import FetchError
from e2erun.logging import get_logger


logger = get_logger("io.fetch")

CHUNK_SIZE = 1024 * 1024
TIMEOUT_S = 60
RETRY_STATUSES = (429, 500, 502, 503, 504)


def make_session(retries: int = 5, backoff_factor: float = 1.0) -> requests.Session:
    """Create a session that retries failed requests."""
    retry = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=("GET", "HEAD"),
        raise_on_status=False,
    )
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _strip_members(
    archive: tarfile.TarFile,
    strip_components: int,
) -> Iterator[tarfile.TarInfo]:
    """Yield members with their leading path components removed."""
    for member in archive.getmembers():
        parts = Path(member.name).parts[strip_components:]
        if not parts:
            continue
        member.name = str(Path(*parts))
        if member.islnk():
            link_parts = Path(member.linkname).parts[strip_components:]
            if not link_parts:
                continue
            member.linkname = str(Path(*link_parts))
        yield member


def extract_tarball(
    archive_path: Path,
    dest: Path,
    strip_components: int = 0,
) -> None:
    """
    Extract a gzipped tarball into ``dest``.

    Args:
        archive_path: Path to the .tar.gz file
        dest: Destination directory (created if missing)
        strip_components: Leading path components to drop from each member
    """
    dest = Path(dest)
    dest.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive_path, mode="r:gz") as archive:
            archive.extractall(
                dest,
                members=_strip_members(archive, strip_components),
                filter="data",
            )
    except (tarfile.TarError, OSError) as e:
        raise FetchError(f"Failed to extract {archive_path}: {e}") from e


def download(
    url: str,
    target: Path,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Stream ``url`` into the file ``target``.

    Raises:
        FetchError: On HTTP or connection failure
    """
    session = session or make_session()
    try:
        with session.get(url, stream=True, timeout=TIMEOUT_S) as resp:
            resp.raise_for_status()
            with open(target, "wb") as f:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
    except requests.RequestException as e:
        raise FetchError(f"Failed to download {url}: {e}") from e
    return target


def fetch_tarball(
    url: str,
    dest: Path,
    strip_components: int = 1,
    retries: int = 5,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download a .tar.gz archive and extract it into ``dest``.

    Args:
        url: Archive URL
        dest: Destination directory
        strip_components: Leading path components to drop (GitHub archives
            wrap everything in a single top-level directory)
        retries: Transport-level retry count
        session: Optional pre-configured session

    Returns:
        The destination directory
    """
    dest = Path(dest)
    session = session or make_session(retries=retries)

    with tempfile.TemporaryDirectory(prefix="e2erun-dl.") as tmp:
        archive_path = Path(tmp) / "archive.tar.gz"
        download(url, archive_path, session=session)
        extract_tarball(archive_path, dest, strip_components=strip_components)

    return dest
