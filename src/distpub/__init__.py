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

"""distpub - build, check and upload Python distributions.

Runs a project's tests, cleans stale artifacts, builds an sdist and wheel with
``build``, validates them with ``twine check`` and uploads them to PyPI or
TestPyPI with ``twine upload``.
"""

from __future__ import annotations

from distpub._infra.exceptions import (
    BuildError,
    DependencyError,
    ProjectEnvironmentError,
    PublishError,
    TestFailure,
    UploadError,
    UsageError,
    ValidationError,
)

from .config import PublishConfig, load_config
from .core.model_types import StepName, Target
from .core.types import PublishOptions, PublishReport
from .services import PublishPipeline, run_publish

__all__ = [
    "__version__",
    "BuildError",
    "DependencyError",
    "ProjectEnvironmentError",
    "PublishConfig",
    "PublishError",
    "PublishOptions",
    "PublishPipeline",
    "PublishReport",
    "StepName",
    "Target",
    "TestFailure",
    "UploadError",
    "UsageError",
    "ValidationError",
    "load_config",
    "run_publish",
]

__version__ = "0.1.0"
