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

"""CLI entry point and orchestration for distpub."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final

from distpub import __version__
from distpub._infra.error_codes import error_code_for
from distpub._infra.exceptions import PublishError, UsageError
from distpub._infra.utils import require_project_root
from distpub.cli.helpers import echo
from distpub.config import load_config
from distpub.core.model_types import LogComponent
from distpub.logging import configure_logging, structured_extra
from distpub.services import run_publish

from .options import build_parser, parse_arguments, wants_help

if TYPE_CHECKING:
    from collections.abc import Sequence

logger: logging.Logger = logging.getLogger("distpub.cli")

EXIT_OK: Final[int] = 0
EXIT_FAILURE: Final[int] = 1


def main(argv: Sequence[str] | None = None, *, cwd: Path | None = None) -> int:
    """Main CLI entry point for the distpub command-line interface.

    Args:
        argv: Command-line arguments to parse. If None, uses ``sys.argv[1:]``.
        cwd: Directory treated as the project root (defaults to the current
            working directory).

    Returns:
        int: ``0`` on success, help or version; ``1`` on any failure.
    """
    args = list(argv) if argv is not None else sys.argv[1:]
    parser = build_parser()
    if wants_help(args):
        echo(parser.format_help(), newline=False)
        return EXIT_OK
    try:
        parsed = parse_arguments(args, parser)
    except UsageError as exc:
        _ = configure_logging()
        _report_failure(exc)
        echo("Use --help for usage information")
        return EXIT_FAILURE
    if parsed.version:
        echo(f"distpub {__version__}")
        return EXIT_OK

    _ = configure_logging(parsed.log_format, log_level=parsed.log_level)
    try:
        root = require_project_root(cwd)
        config = load_config(root)
        _ = run_publish(root, parsed.options, config)
    except PublishError as exc:
        _report_failure(exc)
        return EXIT_FAILURE
    return EXIT_OK


def _report_failure(exc: PublishError) -> None:
    code = error_code_for(exc)
    step = exc.step
    context = f"{code}, step: {step.value}" if step is not None else code
    logger.error(
        "%s (%s)",
        exc,
        context,
        extra=structured_extra(
            LogComponent.CLI,
            step=step,
            exit_code=EXIT_FAILURE,
            details={"error_code": code, "error": type(exc).__name__},
        ),
    )


__all__ = ["EXIT_FAILURE", "EXIT_OK", "main"]
