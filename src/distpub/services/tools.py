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

"""Discovery and on-demand installation of the external publishing tools."""

from __future__ import annotations

import importlib
import importlib.util
import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Final, Protocol

from distpub._infra.exceptions import DependencyError
from distpub._infra.utils import python_executable
from distpub.core.model_types import LogComponent, StepName
from distpub.logging import structured_extra

if TYPE_CHECKING:
    from pathlib import Path

    from distpub._infra.utils import CommandOutput

logger: logging.Logger = logging.getLogger("distpub.tools")

BUILD_MODULE: Final[str] = "build"
TWINE_MODULE: Final[str] = "twine"
PYTEST_MODULE: Final[str] = "pytest"
REQUIRED_MODULES: Final[tuple[str, ...]] = (BUILD_MODULE, TWINE_MODULE)

ModuleProbe = Callable[[str], bool]


class CommandRunner(Protocol):
    """Callable shape shared by ``run_command`` and test doubles."""

    def __call__(
        self,
        args: Iterable[str],
        cwd: Path | None = None,
        *,
        capture: bool = False,
    ) -> CommandOutput: ...


def module_available(name: str) -> bool:
    """Return whether ``name`` can be imported by the running interpreter."""
    return importlib.util.find_spec(name) is not None


def require_interpreter(python: str | None = None) -> str:
    """Return the interpreter that runs every tool.

    Raises:
        DependencyError: If no interpreter path is known.
    """
    selected = python if python is not None else python_executable()
    if not selected:
        msg = "python3 is not installed"
        raise DependencyError(msg)
    return selected


def ensure_modules(
    python: str,
    modules: Iterable[str],
    *,
    runner: CommandRunner,
    probe: ModuleProbe = module_available,
    cwd: Path | None = None,
) -> list[str]:
    """Install any of ``modules`` the interpreter cannot import.

    Args:
        python: Interpreter used for ``-m pip install``.
        modules: Module names that must be importable (also their PyPI names).
        runner: Command runner used for pip.
        probe: Predicate reporting whether a module is importable.
        cwd: Working directory for pip.

    Returns:
        The modules that had to be installed.

    Raises:
        DependencyError: If pip cannot install a missing module.
    """
    installed: list[str] = []
    for module in modules:
        if probe(module):
            logger.debug(
                "%s module found",
                module,
                extra=structured_extra(LogComponent.TOOLS, step=StepName.TOOLS, tool=module),
            )
            continue
        logger.warning(
            "%s module not found. Installing...",
            module,
            extra=structured_extra(LogComponent.TOOLS, step=StepName.TOOLS, tool=module),
        )
        result = runner([python, "-m", "pip", "install", module], cwd)
        if not result.ok:
            msg = f"Failed to install {module} (pip exited with {result.exit_code})"
            raise DependencyError(msg)
        importlib.invalidate_caches()
        installed.append(module)
    return installed


__all__ = [
    "BUILD_MODULE",
    "PYTEST_MODULE",
    "REQUIRED_MODULES",
    "TWINE_MODULE",
    "CommandRunner",
    "ModuleProbe",
    "ensure_modules",
    "module_available",
    "require_interpreter",
]
