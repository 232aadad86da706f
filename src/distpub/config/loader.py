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

"""Configuration loading for distpub.

Settings live in the ``[tool.distpub]`` table of the project's
``pyproject.toml``. Every key is optional; a project without the table
publishes with the defaults. The ``[project].name`` entry supplies the package
name printed in install instructions.
"""

from __future__ import annotations

import logging
import tomllib
from typing import TYPE_CHECKING, cast

from pydantic import ValidationError

from distpub._infra.utils import PROJECT_DESCRIPTOR
from distpub.core.model_types import LogComponent
from distpub.logging import structured_extra

from .models import (
    ConfigReadError,
    InvalidConfigFileError,
    PublishConfig,
    PublishConfigModel,
    config_from_model,
)

if TYPE_CHECKING:
    from pathlib import Path

logger: logging.Logger = logging.getLogger("distpub.config")


def load_config(root: Path) -> PublishConfig:
    """Load distpub configuration from ``<root>/pyproject.toml``.

    Args:
        root: Project root containing the descriptor.

    Returns:
        PublishConfig built from ``[tool.distpub]`` (or defaults).

    Raises:
        ConfigReadError: If the descriptor cannot be read or parsed.
        InvalidConfigFileError: If the ``[tool.distpub]`` table is malformed.
    """
    path = root / PROJECT_DESCRIPTOR
    try:
        with path.open("rb") as handle:
            raw_map: dict[str, object] = tomllib.load(handle)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigReadError(path, exc) from exc

    payload = _extract_distpub_payload(path, raw_map)
    try:
        model = PublishConfigModel.model_validate(payload)
    except ValidationError as exc:
        raise InvalidConfigFileError(path, exc) from exc

    config = config_from_model(model, project_name=_project_name(raw_map))
    logger.debug(
        "Loaded configuration from %s",
        path,
        extra=structured_extra(
            LogComponent.CONFIG,
            path=path,
            details={"package_name": config.package_name, "dist_dir": config.dist_dir},
        ),
    )
    return config


def _extract_distpub_payload(path: Path, raw_map: dict[str, object]) -> dict[str, object]:
    """Return the ``[tool.distpub]`` table, or an empty mapping when absent.

    Raises:
        InvalidConfigFileError: If ``[tool]`` or ``[tool.distpub]`` is not a table.
    """
    tool_section = raw_map.get("tool")
    if tool_section is None:
        return {}
    if not isinstance(tool_section, dict):
        raise InvalidConfigFileError(path, ValueError("[tool] must be a TOML table"))
    section = cast("dict[str, object]", tool_section).get("distpub")
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise InvalidConfigFileError(path, ValueError("[tool.distpub] must be a TOML table"))
    return cast("dict[str, object]", section)


def _project_name(raw_map: dict[str, object]) -> str | None:
    project = raw_map.get("project")
    if not isinstance(project, dict):
        return None
    name = cast("dict[str, object]", project).get("name")
    if isinstance(name, str) and name.strip():
        return name.strip()
    return None


__all__ = ["load_config"]
