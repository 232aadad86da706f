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

"""Common exception hierarchy for distpub.

Every failure a publish run can hit is terminal. Each exception carries the
pipeline step it was raised from so the CLI can report where the run stopped.
"""

from __future__ import annotations

from distpub.core.model_types import StepName

__all__ = [
    "BuildError",
    "DependencyError",
    "ProjectEnvironmentError",
    "PublishError",
    "StepFailedError",
    "TestFailure",
    "UploadError",
    "UsageError",
    "ValidationError",
]


class PublishError(Exception):
    """Base error for all distpub exceptions."""

    step: StepName | None = None


class ProjectEnvironmentError(PublishError):
    """Raised when the working directory is not a project root."""

    step = StepName.ENVIRONMENT


class UsageError(PublishError, ValueError):
    """Raised when the command line contains unknown flags or arguments."""


class DependencyError(PublishError):
    """Raised when a required tool is unavailable and cannot be installed."""

    step = StepName.TOOLS


class StepFailedError(PublishError):
    """Raised when an external tool exits non-zero during a pipeline step."""

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        """Initialise the exception with the tool's exit status.

        Args:
            message: Human-readable description of the failure.
            exit_code: Exit status of the failing process, when one ran.
        """
        self.exit_code = exit_code
        super().__init__(message)


class TestFailure(StepFailedError):
    """Raised when the test suite fails."""

    __test__ = False
    step = StepName.TESTS


class BuildError(StepFailedError):
    """Raised when building distributions fails."""

    step = StepName.BUILD


class ValidationError(StepFailedError):
    """Raised when built distributions fail ``twine check``."""

    step = StepName.CHECK


class UploadError(StepFailedError):
    """Raised when uploading distributions fails."""

    step = StepName.UPLOAD
