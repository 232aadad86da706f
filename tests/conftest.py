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

"""Pytest entry point that wires shared fixtures and markers."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from distpub._infra.logging_utils import CHILD_LOGGERS, ROOT_LOGGER_NAME  # noqa: E402

if TYPE_CHECKING:
    from collections.abc import Iterator

PYPROJECT_TEMPLATE = """\
[project]
name = "sample-pkg"
version = "0.1.0"
"""


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with the custom markers used by the test suite."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line(
        "markers",
        "integration: Integration tests (slower, multiple components)",
    )
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "cli: CLI-related tests")


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Return a temporary project root containing a minimal ``pyproject.toml``."""
    root = tmp_path / "project"
    root.mkdir()
    _ = (root / "pyproject.toml").write_text(PYPROJECT_TEMPLATE, encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def _reset_distpub_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep logging configuration and environment overrides from leaking between tests."""
    monkeypatch.delenv("DISTPUB_LOG_FORMAT", raising=False)
    monkeypatch.delenv("DISTPUB_LOG_LEVEL", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    yield
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.propagate = True
    root_logger.setLevel(logging.NOTSET)
    for child in CHILD_LOGGERS:
        logging.getLogger(child).setLevel(logging.NOTSET)
