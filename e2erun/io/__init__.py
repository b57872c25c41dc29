"""Network I/O for test sources and tool distributions."""

from e2erun.io.fetch import fetch_tarball

__all__ = ["fetch_tarball"]
