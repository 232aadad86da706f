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

"""Process and filesystem helpers used across distpub internals."""

from __future__ import annotations

from .paths import PROJECT_DESCRIPTOR, expand_targets, list_distributions, remove_paths, require_project_root
from .process import COMMAND_NOT_EXECUTABLE_EXIT, COMMAND_NOT_FOUND_EXIT, CommandOutput, python_executable, run_command

__all__ = [
    "COMMAND_NOT_EXECUTABLE_EXIT",
    "COMMAND_NOT_FOUND_EXIT",
    "PROJECT_DESCRIPTOR",
    "CommandOutput",
    "expand_targets",
    "list_distributions",
    "python_executable",
    "remove_paths",
    "require_project_root",
    "run_command",
]
