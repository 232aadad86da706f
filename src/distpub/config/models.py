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

"""Configuration models and validation for distpub.

A Pydantic model validates the ``[tool.distpub]`` table read from
``pyproject.toml``; it is then converted into a frozen dataclass that the
publish pipeline consumes.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Final, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

from distpub._infra.exceptions import PublishError
from distpub.core.model_types import StepName

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_TEST_PATHS: Final[tuple[str, ...]] = ("tests",)
DEFAULT_DIST_DIR: Final[str] = "dist"
DEFAULT_CLEAN_TARGETS: Final[tuple[str, ...]] = ("build", "dist", "*.egg-info")


class ConfigValidationError(PublishError, ValueError):
    """Raised when configuration data contains invalid values."""

    step = StepName.ENVIRONMENT


class ConfigReadError(ConfigValidationError):
    """Raised when a configuration file cannot be read or parsed."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialize the exception with file path and underlying error.

        Args:
            path: The path to the configuration file that could not be read.
            error: The underlying exception that caused the read failure.
        """
        self.path = path
        self.error = error
        super().__init__(f"Unable to read {path}: {error}")


class InvalidConfigFileError(ConfigValidationError):
    """Raised when the ``[tool.distpub]`` table fails validation."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialize the exception with configuration file path and validation error.

        Args:
            path: The path to the configuration file that failed validation.
            error: The underlying validation exception.
        """
        self.path = path
        self.error = error
        super().__init__(f"Invalid distpub configuration in {path}: {error}")


def ensure_list(value: object) -> list[str] | None:
    """Normalise a string or iterable of strings into a list of stripped entries."""
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return [stripped] if stripped else []
    if not isinstance(value, Iterable):
        return []
    result: list[str] = []
    for item in cast("Iterable[object]", value):
        if isinstance(item, str):
            stripped = item.strip()
            if stripped and stripped not in result:
                result.append(stripped)
    return result


@dataclass(slots=True, frozen=True)
class PublishConfig:
    """Runtime settings for a publish run.

    Attributes:
        package_name: Distribution name used in install instructions.
        test_paths: Paths handed to pytest.
        pytest_args: Extra arguments appended to the pytest command.
        dist_dir: Directory the build writes distributions to.
        clean_targets: Names or globs removed by the clean step.
    """

    package_name: str | None = None
    test_paths: tuple[str, ...] = DEFAULT_TEST_PATHS
    pytest_args: tuple[str, ...] = ()
    dist_dir: str = DEFAULT_DIST_DIR
    clean_targets: tuple[str, ...] = DEFAULT_CLEAN_TARGETS


class PublishConfigModel(BaseModel):
    """Pydantic model for the ``[tool.distpub]`` table."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid", populate_by_name=True)

    package_name: str | None = Field(default=None, alias="package-name")
    test_paths: list[str] = Field(default_factory=lambda: list(DEFAULT_TEST_PATHS), alias="test-paths")
    pytest_args: list[str] = Field(default_factory=list, alias="pytest-args")
    dist_dir: str = Field(default=DEFAULT_DIST_DIR, alias="dist-dir")
    clean_targets: list[str] = Field(default_factory=lambda: list(DEFAULT_CLEAN_TARGETS), alias="clean-targets")

    @field_validator("test_paths", "pytest_args", "clean_targets", mode="before")
    @classmethod
    def _coerce_list(cls, value: object) -> list[str]:
        return ensure_list(value) or []

    @field_validator("package_name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> str | None:
        if value is None:
            return None
        if isinstance(value, str):
            return value.strip() or None
        msg = "package-name must be a string"
        raise ValueError(msg)

    @field_validator("dist_dir", mode="after")
    @classmethod
    def _require_dist_dir(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            msg = "dist-dir must not be empty"
            raise ValueError(msg)
        return stripped


def config_from_model(model: PublishConfigModel, *, project_name: str | None = None) -> PublishConfig:
    """Convert a validated model into a runtime ``PublishConfig``.

    Args:
        model: Validated ``[tool.distpub]`` payload.
        project_name: ``[project].name`` used when no package name is configured.

    Returns:
        Frozen configuration for the publish pipeline.
    """
    return PublishConfig(
        package_name=model.package_name or project_name,
        test_paths=tuple(model.test_paths),
        pytest_args=tuple(model.pytest_args),
        dist_dir=model.dist_dir,
        clean_targets=tuple(model.clean_targets),
    )


__all__ = [
    "DEFAULT_CLEAN_TARGETS",
    "DEFAULT_DIST_DIR",
    "DEFAULT_TEST_PATHS",
    "ConfigReadError",
    "ConfigValidationError",
    "InvalidConfigFileError",
    "PublishConfig",
    "PublishConfigModel",
    "config_from_model",
    "ensure_list",
]
