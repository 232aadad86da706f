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

"""Shared Hypothesis strategies for command-line property tests."""

from __future__ import annotations

from typing import Final

from hypothesis import strategies as st

__all__ = ["KNOWN_FLAGS", "help_flags", "known_flag_lists", "unknown_flags"]

KNOWN_FLAGS: Final[tuple[str, ...]] = ("--test", "--skip-tests", "--skip-clean")


def known_flag_lists(max_size: int = 6) -> st.SearchStrategy[list[str]]:
    """Return a strategy yielding publish flags in any order, repeats allowed."""
    return st.lists(st.sampled_from(KNOWN_FLAGS), max_size=max_size)


def help_flags() -> st.SearchStrategy[str]:
    return st.sampled_from(("-h", "--help"))


def unknown_flags() -> st.SearchStrategy[str]:
    """Return a strategy yielding long options the CLI does not define.

    Returns:
        Hypothesis strategy producing --<name> strings outside the known set.
    """
    name = st.from_regex(r"[a-z][a-z0-9]{0,11}", fullmatch=True)
    reserved = {flag.removeprefix("--") for flag in KNOWN_FLAGS} | {"help", "version", "log-format", "log-level"}
    return name.filter(lambda value: value not in reserved).map(lambda value: f"--{value}")
