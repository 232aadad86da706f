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

"""Filesystem helpers for locating the project root and its artifacts."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Final

from distpub._infra.exceptions import ProjectEnvironmentError
from distpub.core.model_types import LogComponent
from distpub.logging import structured_extra

if TYPE_CHECKING:
    from collections.abc import Iterable

logger: logging.Logger = logging.getLogger("distpub.pipeline")

PROJECT_DESCRIPTOR: Final[str] = "pyproject.toml"

__all__ = ["PROJECT_DESCRIPTOR", "expand_targets", "list_distributions", "remove_paths", "require_project_root"]


def require_project_root(start: Path | None = None) -> Path:
    """Return the project root, which must be the current directory.

    The descriptor must sit directly in ``start``; parent directories are not
    searched.

    Args:
        start: Directory to check (defaults to the current working directory).

    Returns:
        The resolved project root.

    Raises:
        ProjectEnvironmentError: If ``pyproject.toml`` is absent.
    """
    base = (start or Path.cwd()).resolve()
    if not (base / PROJECT_DESCRIPTOR).is_file():
        message = f"{PROJECT_DESCRIPTOR} not found. Are you in the project root?"
        raise ProjectEnvironmentError(message)
    return base


def expand_targets(root: Path, patterns: Iterable[str]) -> list[Path]:
    """Expand relative names and glob patterns beneath ``root``.

    Args:
        root: Directory the patterns are relative to.
        patterns: Plain names (``"build"``) or globs (``"*.egg-info"``).

    Returns:
        Existing paths matched by the patterns, without duplicates.
    """
    seen: set[Path] = set()
    matches: list[Path] = []
    for pattern in patterns:
        candidates = sorted(root.glob(pattern)) if any(ch in pattern for ch in "*?[") else [root / pattern]
        for candidate in candidates:
            if candidate.exists() and candidate not in seen:
                seen.add(candidate)
                matches.append(candidate)
    return matches


def remove_paths(paths: Iterable[Path]) -> list[Path]:
    """Delete directories and files, best-effort.

    Returns:
        The paths that were removed. Failures are logged and skipped.
    """
    removed: list[Path] = []
    for path in paths:
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as exc:
            logger.warning(
                "Could not remove %s: %s",
                path,
                exc,
                extra=structured_extra(LogComponent.PIPELINE, path=path),
            )
            continue
        removed.append(path)
    return removed


def list_distributions(dist_dir: Path) -> list[Path]:
    """Return the built distribution files in ``dist_dir``, sorted by name."""
    if not dist_dir.is_dir():
        return []
    return sorted(path for path in dist_dir.iterdir() if path.is_file())
