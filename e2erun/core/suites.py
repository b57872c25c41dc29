"""Static suite table."""

from __future__ import annotations

from typing import Optional

from e2erun.core.types import SuiteTarget


RESULTS_ROOT = "./apps/chat-e2e"

SUITES: dict[str, tuple[str, str]] = {
    "chat": ("chat-e2e:e2e:chat", f"{RESULTS_ROOT}/allure-chat-results"),
    "overlay": ("chat-e2e:e2e:overlay", f"{RESULTS_ROOT}/allure-overlay-results"),
}


def resolve_suite(
    suite: str,
    nx_target: Optional[str] = None,
    allure_results_path: Optional[str] = None,
) -> SuiteTarget:
    """
    Resolve a suite name to its Nx target and Allure results path.

    Unknown names are treated as an Nx target and get a derived
    results path. Non-empty explicit values win over the table.

    Args:
        suite: Suite name (chat, overlay, or an Nx target)
        nx_target: Explicit Nx target override
        allure_results_path: Explicit results path override

    Returns:
        SuiteTarget for the suite
    """
    default_target, default_results = SUITES.get(
        suite, (suite, f"{RESULTS_ROOT}/allure-{suite}-results")
    )
    return SuiteTarget(
        suite=suite,
        nx_target=nx_target or default_target,
        allure_results_path=allure_results_path or default_results,
    )
