"""Provisioning of the external tools the test suites depend on."""

from e2erun.toolchain.allure import allure_version, generate_report, install_allure
from e2erun.toolchain.java import ensure_java
from e2erun.toolchain.node import ensure_node, load_nvm
from e2erun.toolchain.playwright import install_playwright, installed_playwright_version

__all__ = [
    "allure_version",
    "ensure_java",
    "ensure_node",
    "generate_report",
    "install_allure",
    "install_playwright",
    "installed_playwright_version",
    "load_nvm",
]
