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

"""Publish pipeline: test, clean, build, check and upload a distribution.

The pipeline is a fixed sequence of steps. Each step either completes, is
skipped, or raises a ``PublishError`` subclass that stops the run; nothing is
retried.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Final

from distpub._infra.exceptions import BuildError, TestFailure, UploadError, ValidationError
from distpub._infra.logging_utils import SUCCESS
from distpub._infra.utils import expand_targets, list_distributions, remove_paths, run_command
from distpub.config import DEFAULT_DIST_DIR
from distpub.core.model_types import LogComponent, StepName
from distpub.core.types import PublishOptions, PublishReport, StepRecord, StepStatus
from distpub.logging import structured_extra

from .tools import (
    PYTEST_MODULE,
    REQUIRED_MODULES,
    CommandRunner,
    ModuleProbe,
    ensure_modules,
    module_available,
    require_interpreter,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from distpub.config import PublishConfig

logger: logging.Logger = logging.getLogger("distpub.pipeline")

FALLBACK_PACKAGE_NAME: Final[str] = "<package>"


class PublishPipeline:
    """Run the publish steps for one project root.

    Args:
        root: Project root; every tool runs with it as working directory.
        options: Parsed command-line flags.
        config: Project settings from ``[tool.distpub]``.
        runner: Command runner (defaults to ``run_command``).
        probe: Predicate reporting whether a module is importable.
        python: Interpreter override; defaults to the running interpreter.
    """

    def __init__(
        self,
        root: Path,
        options: PublishOptions,
        config: PublishConfig,
        *,
        runner: CommandRunner = run_command,
        probe: ModuleProbe = module_available,
        python: str | None = None,
    ) -> None:
        self.root = root
        self.options = options
        self.config = config
        self._runner = runner
        self._probe = probe
        self._python_override = python
        self._python: str | None = None

    @property
    def dist_dir(self) -> Path:
        return self.root / self.config.dist_dir

    @property
    def package_name(self) -> str:
        return self.config.package_name or FALLBACK_PACKAGE_NAME

    def steps(self) -> list[tuple[StepName, Callable[[], StepStatus]]]:
        return [
            (StepName.TOOLS, self.check_tools),
            (StepName.TESTS, self.run_tests),
            (StepName.CLEAN, self.clean),
            (StepName.BUILD, self.build),
            (StepName.CHECK, self.check),
            (StepName.UPLOAD, self.upload),
        ]

    def run(self) -> PublishReport:
        """Execute every step in order, stopping at the first failure.

        Returns:
            Report listing each step and whether it completed or was skipped.

        Raises:
            PublishError: Subclass identifying the step that failed.
        """
        target = self.options.target
        report = PublishReport(target=target)
        logger.info(
            "Publishing to %s...",
            target.value,
            extra=structured_extra(LogComponent.PIPELINE, target=target, path=self.root),
        )
        for name, handler in self.steps():
            start = time.perf_counter()
            status = handler()
            duration_ms = (time.perf_counter() - start) * 1000
            report.steps.append(StepRecord(name=name, status=status, duration_ms=duration_ms))
            logger.debug(
                "Step %s %s",
                name.value,
                status.value,
                extra=structured_extra(LogComponent.PIPELINE, step=name, duration_ms=duration_ms),
            )
        _success("Publishing complete!", step=StepName.UPLOAD)
        return report

    # Steps

    def check_tools(self) -> StepStatus:
        logger.info("Checking required tools...", extra=_extra(StepName.TOOLS))
        python = self._interpreter()
        ensure_modules(python, REQUIRED_MODULES, runner=self._runner, probe=self._probe, cwd=self.root)
        return StepStatus.COMPLETED

    def run_tests(self) -> StepStatus:
        if self.options.skip_tests:
            logger.warning("Skipping tests as requested.", extra=_extra(StepName.TESTS))
            return StepStatus.SKIPPED
        logger.info("Running tests...", extra=_extra(StepName.TESTS))
        if not self._probe(PYTEST_MODULE):
            logger.warning("pytest not found. Skipping tests.", extra=_extra(StepName.TESTS))
            return StepStatus.SKIPPED
        args = [
            self._interpreter(),
            "-m",
            "pytest",
            *self.config.test_paths,
            *self.config.pytest_args,
        ]
        result = self._runner(args, self.root)
        if not result.ok:
            msg = "Tests failed. Fix tests before publishing."
            raise TestFailure(msg, exit_code=result.exit_code)
        _success("All tests passed!", step=StepName.TESTS)
        return StepStatus.COMPLETED

    def clean(self) -> StepStatus:
        if self.options.skip_clean:
            logger.warning("Skipping clean as requested.", extra=_extra(StepName.CLEAN))
            return StepStatus.SKIPPED
        logger.info("Cleaning previous build artifacts...", extra=_extra(StepName.CLEAN))
        # dist_dir is always cleared, whatever clean_targets lists
        patterns = [*self.config.clean_targets, self.config.dist_dir]
        removed = remove_paths(expand_targets(self.root, patterns))
        for path in removed:
            logger.debug("Removed %s", path, extra=structured_extra(LogComponent.PIPELINE, path=path))
        _success("Build artifacts cleaned.", step=StepName.CLEAN)
        return StepStatus.COMPLETED

    def build(self) -> StepStatus:
        logger.info("Building package...", extra=_extra(StepName.BUILD))
        args = [self._interpreter(), "-m", "build"]
        if self.config.dist_dir != DEFAULT_DIST_DIR:
            args.extend(["--outdir", str(self.dist_dir)])
        result = self._runner(args, self.root)
        if not result.ok:
            msg = "Build failed."
            raise BuildError(msg, exit_code=result.exit_code)
        _success("Package built successfully!", step=StepName.BUILD)
        return StepStatus.COMPLETED

    def check(self) -> StepStatus:
        logger.info("Checking distribution...", extra=_extra(StepName.CHECK))
        files = self._distributions(ValidationError)
        result = self._runner([self._interpreter(), "-m", "twine", "check", *files], self.root)
        if not result.ok:
            msg = "Distribution check failed."
            raise ValidationError(msg, exit_code=result.exit_code)
        _success("Distribution check passed!", step=StepName.CHECK)
        return StepStatus.COMPLETED

    def upload(self) -> StepStatus:
        target = self.options.target
        logger.info(
            "Uploading to %s...",
            target.display_name,
            extra=structured_extra(LogComponent.PIPELINE, step=StepName.UPLOAD, target=target),
        )
        files = self._distributions(UploadError)
        args = [self._interpreter(), "-m", "twine", "upload", *target.upload_args(), *files]
        result = self._runner(args, self.root)
        if not result.ok:
            msg = f"Upload to {target.display_name} failed."
            raise UploadError(msg, exit_code=result.exit_code)
        _success(f"Package uploaded to {target.display_name} successfully!", step=StepName.UPLOAD)
        logger.info(
            "Install with: %s",
            target.install_hint(self.package_name),
            extra=structured_extra(LogComponent.PIPELINE, step=StepName.UPLOAD, target=target),
        )
        return StepStatus.COMPLETED

    # Helpers

    def _interpreter(self) -> str:
        if self._python is None:
            self._python = require_interpreter(self._python_override)
        return self._python

    def _distributions(self, error: type[ValidationError | UploadError]) -> list[str]:
        files = list_distributions(self.dist_dir)
        if not files:
            msg = f"No distributions found in {self.dist_dir}"
            raise error(msg)
        return [str(path) for path in files]


def _extra(step: StepName) -> dict[str, object]:
    return dict(structured_extra(LogComponent.PIPELINE, step=step))


def _success(message: str, *, step: StepName) -> None:
    logger.log(SUCCESS, message, extra=_extra(step))


def run_publish(
    root: Path,
    options: PublishOptions,
    config: PublishConfig,
    *,
    runner: CommandRunner = run_command,
    probe: ModuleProbe = module_available,
) -> PublishReport:
    """Build a ``PublishPipeline`` for ``root`` and run it."""
    return PublishPipeline(root, options, config, runner=runner, probe=probe).run()


__all__ = ["FALLBACK_PACKAGE_NAME", "PublishPipeline", "run_publish"]
