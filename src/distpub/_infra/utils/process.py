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

"""Subprocess helpers and typed command wrappers."""

from __future__ import annotations

import logging
import subprocess  # noqa: S404  # JUSTIFIED: centralised wrapper for shell-free subprocess execution
import sys
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from distpub.core.model_types import LogComponent
from distpub.logging import structured_extra

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger: logging.Logger = logging.getLogger("distpub.process")

COMMAND_NOT_EXECUTABLE_EXIT: Final[int] = 126
COMMAND_NOT_FOUND_EXIT: Final[int] = 127

__all__ = [
    "COMMAND_NOT_EXECUTABLE_EXIT",
    "COMMAND_NOT_FOUND_EXIT",
    "CommandOutput",
    "python_executable",
    "run_command",
]


@dataclass(slots=True, frozen=True)
class CommandOutput:
    args: list[str]
    stdout: str
    stderr: str
    exit_code: int
    duration_ms: float

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def run_command(
    args: Iterable[str],
    cwd: Path | None = None,
    *,
    capture: bool = False,
) -> CommandOutput:
    """Run a subprocess without a shell and report how it exited.

    Tool output is streamed straight to the terminal unless ``capture`` is set,
    so interactive prompts (for example twine asking for credentials) keep
    working.

    Args:
        args: Command line to execute. The first element is treated as the
            executable and must be a non-empty string.
        cwd: Optional working directory for the child process.
        capture: Capture stdout/stderr instead of inheriting the terminal.

    Returns:
        ``CommandOutput`` containing the executed argument vector, any captured
        output, the exit code, and the duration in milliseconds. A missing
        executable is reported with exit code 127; any other launch failure
        (permissions, bad interpreter) with 126.

    Raises:
        ValueError: If ``args`` is empty.
        TypeError: If any argument is falsy (for example ``""``).
    """
    argv = list(args)
    if not argv:
        raise ValueError
    if not all(a for a in argv):
        raise TypeError
    logger.debug(
        "Executing command: %s",
        " ".join(argv),
        extra=structured_extra(LogComponent.PROCESS, tool=argv[0], path=cwd),
    )
    start = time.perf_counter()
    try:
        completed = subprocess.run(  # noqa: S603 - command arguments provided by caller
            argv,
            check=False,
            cwd=str(cwd) if cwd else None,
            capture_output=capture,
            text=True,
        )
    except OSError as exc:
        duration_ms = (time.perf_counter() - start) * 1000
        exit_code = COMMAND_NOT_FOUND_EXIT if isinstance(exc, FileNotFoundError) else COMMAND_NOT_EXECUTABLE_EXIT
        logger.warning(
            "Could not start %s: %s",
            argv[0],
            exc,
            extra=structured_extra(LogComponent.PROCESS, tool=argv[0], exit_code=exit_code),
        )
        return CommandOutput(
            args=argv,
            stdout="",
            stderr=str(exc),
            exit_code=exit_code,
            duration_ms=duration_ms,
        )
    duration_ms = (time.perf_counter() - start) * 1000
    if completed.returncode != 0:
        logger.warning(
            "Command failed (exit=%s): %s",
            completed.returncode,
            " ".join(argv),
            extra=structured_extra(
                LogComponent.PROCESS,
                tool=argv[0],
                exit_code=completed.returncode,
                duration_ms=duration_ms,
            ),
        )
    return CommandOutput(
        args=argv,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        exit_code=completed.returncode,
        duration_ms=duration_ms,
    )


def python_executable() -> str | None:
    """Return the interpreter used to run tools, or ``None`` when it is unknown."""
    return sys.executable or None
