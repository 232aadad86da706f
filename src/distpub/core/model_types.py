# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Model types and enumerations for distpub.

This module defines the small set of enumerations shared across distpub:

- Target package indexes and their upload/install conventions
- Pipeline step names used for reporting failures
- Log formats and logging components
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

TESTPYPI_SIMPLE_URL: Final[str] = "https://test.pypi.org/simple/"


class Target(StrEnum):
    """Destination package index for an upload.

    Attributes:
        PYPI: The production index.
        TESTPYPI: The staging index.
    """

    PYPI = "pypi"
    TESTPYPI = "testpypi"

    @classmethod
    def from_str(cls, raw: str) -> Target:
        """Create a Target enum from a string value.

        Args:
            raw: String representation of the target index.

        Returns:
            Target enum value.

        Raises:
            ValueError: If the string does not match any Target value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown target index '{raw}'"
            raise ValueError(msg) from exc

    @property
    def display_name(self) -> str:
        return "TestPyPI" if self is Target.TESTPYPI else "PyPI"

    def upload_args(self) -> list[str]:
        """Return the twine arguments that select this index."""
        if self is Target.TESTPYPI:
            return ["--repository", "testpypi"]
        return []

    def install_hint(self, package_name: str) -> str:
        """Return the pip command users run to install the uploaded package."""
        if self is Target.TESTPYPI:
            return f"pip install --index-url {TESTPYPI_SIMPLE_URL} {package_name}"
        return f"pip install {package_name}"


class StepName(StrEnum):
    """Named stages of the publish pipeline, in execution order."""

    ENVIRONMENT = "environment"
    TOOLS = "tools"
    TESTS = "tests"
    CLEAN = "clean"
    BUILD = "build"
    CHECK = "check"
    UPLOAD = "upload"


class LogFormat(StrEnum):
    """Enumeration of log output formats.

    Attributes:
        TEXT: Human-readable text format.
        JSON: Machine-readable JSON format.
    """

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> LogFormat:
        """Create a LogFormat enum from a string value.

        Args:
            raw: String representation of the log format.

        Returns:
            LogFormat enum value.

        Raises:
            ValueError: If the string does not match any LogFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log format '{raw}'"
            raise ValueError(msg) from exc


class LogComponent(StrEnum):
    """Enumeration of loggable system components.

    Attributes:
        CLI: Command-line interface component.
        CONFIG: Configuration loading.
        PIPELINE: Publish pipeline orchestration.
        PROCESS: Subprocess execution.
        TOOLS: Tool discovery and installation.
    """

    CLI = "cli"
    CONFIG = "config"
    PIPELINE = "pipeline"
    PROCESS = "process"
    TOOLS = "tools"


__all__ = [
    "TESTPYPI_SIMPLE_URL",
    "LogComponent",
    "LogFormat",
    "StepName",
    "Target",
]
