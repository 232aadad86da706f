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

"""Command-line parsing for ``distpub``.

Help is resolved before anything else: ``--help`` anywhere before a ``--``
separator prints usage and succeeds, whatever else is on the command line.
Every other parse problem raises ``UsageError`` instead of exiting with
argparse's status 2.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, NoReturn, override

from distpub._infra.exceptions import UsageError
from distpub._infra.logging_utils import LOG_FORMATS, LOG_LEVELS
from distpub.core.model_types import Target
from distpub.core.types import PublishOptions

if TYPE_CHECKING:
    from collections.abc import Sequence

HELP_FLAGS: Final[frozenset[str]] = frozenset({"-h", "--help"})
END_OF_OPTIONS: Final[str] = "--"


class PublishArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ``UsageError`` instead of exiting."""

    @override
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


@dataclass(slots=True, frozen=True)
class ParsedArguments:
    """Publish options plus the CLI-only switches that accompany them."""

    options: PublishOptions
    log_format: str | None = None
    log_level: str | None = None
    version: bool = False


def build_parser() -> PublishArgumentParser:
    """Build the argument parser for the distpub CLI.

    Returns:
        Parser recognising the publish flags and logging switches.
    """
    parser = PublishArgumentParser(
        prog="distpub",
        description="Build, check and upload this project's distributions to PyPI or TestPyPI.",
        add_help=False,
        allow_abbrev=False,
    )
    _ = parser.add_argument(
        "--test",
        dest="target",
        action="store_const",
        const=Target.TESTPYPI.value,
        default=Target.PYPI.value,
        help="Upload to TestPyPI instead of PyPI",
    )
    _ = parser.add_argument(
        "--skip-tests",
        action="store_true",
        help="Skip running tests before publishing",
    )
    _ = parser.add_argument(
        "--skip-clean",
        action="store_true",
        help="Skip cleaning build artifacts before building",
    )
    _ = parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Logging output format (default: $DISTPUB_LOG_FORMAT or text)",
    )
    _ = parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Logging verbosity (default: $DISTPUB_LOG_LEVEL or info)",
    )
    _ = parser.add_argument(
        "--version",
        action="store_true",
        help="Print the distpub version and exit",
    )
    _ = parser.add_argument(
        "-h",
        "--help",
        action="store_true",
        help="Show this help message",
    )
    return parser


def wants_help(argv: Sequence[str]) -> bool:
    """Return whether a help flag appears before any ``--`` separator."""
    for arg in argv:
        if arg == END_OF_OPTIONS:
            return False
        if arg in HELP_FLAGS:
            return True
    return False


def parse_arguments(argv: Sequence[str], parser: PublishArgumentParser | None = None) -> ParsedArguments:
    """Parse ``argv`` into publish options.

    Args:
        argv: Command-line arguments, without the program name.
        parser: Optional pre-built parser.

    Returns:
        Parsed publish options and CLI switches.

    Raises:
        UsageError: If an argument is unknown or malformed.
    """
    active = parser or build_parser()
    namespace, extras = active.parse_known_args(list(argv))
    if extras:
        msg = f"Unknown option: {extras[0]}"
        raise UsageError(msg)
    options = PublishOptions(
        target=Target.from_str(namespace.target),
        skip_tests=bool(namespace.skip_tests),
        skip_clean=bool(namespace.skip_clean),
    )
    return ParsedArguments(
        options=options,
        log_format=namespace.log_format,
        log_level=namespace.log_level,
        version=bool(namespace.version),
    )


__all__ = [
    "HELP_FLAGS",
    "ParsedArguments",
    "PublishArgumentParser",
    "build_parser",
    "parse_arguments",
    "wants_help",
]
