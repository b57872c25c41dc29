"""Runner for the external chat end-to-end test suites."""

from e2erun.runner import E2ERunner, run_suite

__version__ = "0.1.0"
__all__ = ["E2ERunner", "run_suite"]
