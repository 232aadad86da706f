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

"""Dataclasses describing a publish run and its outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from .model_types import StepName, Target


@dataclass(slots=True, frozen=True)
class PublishOptions:
    """Flags parsed once from the command line.

    Attributes:
        target: Index the distributions are uploaded to.
        skip_tests: Bypass the test step.
        skip_clean: Keep artifacts from previous builds.
    """

    target: Target = Target.PYPI
    skip_tests: bool = False
    skip_clean: bool = False


class StepStatus(StrEnum):
    COMPLETED = "completed"
    SKIPPED = "skipped"


@dataclass(slots=True, frozen=True)
class StepRecord:
    name: StepName
    status: StepStatus
    duration_ms: float = 0.0


@dataclass(slots=True)
class PublishReport:
    """Ordered record of the steps a pipeline run went through."""

    target: Target
    steps: list[StepRecord] = field(default_factory=list)

    def status_of(self, name: StepName) -> StepStatus | None:
        for record in self.steps:
            if record.name is name:
                return record.status
        return None

    def ran(self, name: StepName) -> bool:
        return self.status_of(name) is StepStatus.COMPLETED


__all__ = ["PublishOptions", "PublishReport", "StepRecord", "StepStatus"]
