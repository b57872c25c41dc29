"""Java runtime check. Allure needs a JVM."""

from __future__ import annotations

from typing import Mapping

from e2erun.core.errors import ToolchainError
from e2erun.core.process import which


def ensure_java(env: Mapping[str, str]) -> str:
    """
    Verify a Java installation.

    Returns:
        Path of the java executable

    Raises:
        ToolchainError: If JAVA_HOME is unset or java is not on PATH
    """
    if not env.get("JAVA_HOME"):
        raise ToolchainError("JAVA_HOME is not set")
    java = which("java", env)
    if java is None:
        raise ToolchainError("Java installation is not found")
    return java
