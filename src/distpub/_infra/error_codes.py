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

"""Stable error code registry used across distpub."""

from __future__ import annotations

from typing import TYPE_CHECKING, NewType

from distpub.config import ConfigReadError, ConfigValidationError, InvalidConfigFileError

from .exceptions import (
    BuildError,
    DependencyError,
    ProjectEnvironmentError,
    PublishError,
    TestFailure,
    UploadError,
    UsageError,
    ValidationError,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

ErrorCode = NewType("ErrorCode", str)

_ERROR_CODES: dict[type[BaseException], ErrorCode] = {
    PublishError: ErrorCode("DP000"),
    ProjectEnvironmentError: ErrorCode("DP100"),
    UsageError: ErrorCode("DP101"),
    ConfigValidationError: ErrorCode("DP110"),
    ConfigReadError: ErrorCode("DP111"),
    InvalidConfigFileError: ErrorCode("DP112"),
    DependencyError: ErrorCode("DP200"),
    TestFailure: ErrorCode("DP300"),
    BuildError: ErrorCode("DP301"),
    ValidationError: ErrorCode("DP302"),
    UploadError: ErrorCode("DP303"),
}


def error_code_for(exc: BaseException) -> ErrorCode:
    """Return a stable error code for a structured distpub exception.

    Args:
        exc: Exception instance raised by distpub code paths.

    Returns:
        Error code mapped from the exception's class hierarchy.
    """
    for cls in type(exc).__mro__:
        code = _ERROR_CODES.get(cls)
        if code:
            return code
    return ErrorCode("DP000")


def error_code_catalog() -> Mapping[str, ErrorCode]:
    """Return a mapping of fully-qualified exception names to error codes.

    Returns:
        Mapping of ``<module>.<ExceptionName>`` strings to error codes.
    """
    return {f"{exc_type.__module__}.{exc_type.__name__}": code for exc_type, code in _ERROR_CODES.items()}


__all__ = ["ErrorCode", "error_code_catalog", "error_code_for"]
