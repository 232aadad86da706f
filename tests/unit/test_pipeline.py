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

"""Unit tests for the publish pipeline steps."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from distpub._infra.exceptions import BuildError, DependencyError, TestFailure, UploadError, ValidationError
from distpub._infra.utils import COMMAND_NOT_EXECUTABLE_EXIT
from distpub.config import PublishConfig
from distpub.core.model_types import StepName, Target
from distpub.core.types import PublishOptions, StepStatus
from distpub.services.publish import PublishPipeline
from tests.fixtures.stubs import ModuleProbeStub, RecordingRunner

pytestmark = pytest.mark.unit

PYTHON = "/usr/bin/python3"


def _pipeline(
    root: Path,
    *,
    options: PublishOptions | None = None,
    config: PublishConfig | None = None,
    runner: RecordingRunner | None = None,
    probe: ModuleProbeStub | None = None,
) -> PublishPipeline:
    return PublishPipeline(
        root,
        options or PublishOptions(),
        config or PublishConfig(package_name="sample-pkg"),
        runner=runner or RecordingRunner(),
        probe=probe or ModuleProbeStub(),
        python=PYTHON,
    )


def test_full_run_invokes_tools_in_order(project_root: Path) -> None:
    runner = RecordingRunner()
    report = _pipeline(project_root, runner=runner).run()

    assert runner.tools == ["pytest", "build", "twine check", "twine upload"]
    assert [record.name for record in report.steps] == [
        StepName.TOOLS,
        StepName.TESTS,
        StepName.CLEAN,
        StepName.BUILD,
        StepName.CHECK,
        StepName.UPLOAD,
    ]
    assert all(record.status is StepStatus.COMPLETED for record in report.steps)
    assert all(cwd == project_root for _, cwd in runner.calls)


def test_test_command_uses_configured_paths(project_root: Path) -> None:
    runner = RecordingRunner()
    config = PublishConfig(package_name="sample-pkg", test_paths=("tests/unit",), pytest_args=("-q", "-x"))
    _ = _pipeline(project_root, config=config, runner=runner).run()
    assert runner.find("pytest") == [PYTHON, "-m", "pytest", "tests/unit", "-q", "-x"]


def test_upload_targets_production_by_default(project_root: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="distpub")
    runner = RecordingRunner()
    _ = _pipeline(project_root, runner=runner).run()

    upload = runner.find("twine upload")
    assert upload is not None
    assert "--repository" not in upload
    assert upload[-2:] == [
        str(project_root / "dist" / "sample_pkg-0.1.0-py3-none-any.whl"),
        str(project_root / "dist" / "sample_pkg-0.1.0.tar.gz"),
    ]
    assert "Package uploaded to PyPI successfully!" in caplog.messages
    assert "Install with: pip install sample-pkg" in caplog.messages


def test_upload_targets_staging_with_test_flag(project_root: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="distpub")
    runner = RecordingRunner()
    options = PublishOptions(target=Target.TESTPYPI)
    _ = _pipeline(project_root, options=options, runner=runner).run()

    upload = runner.find("twine upload")
    assert upload is not None
    assert upload[3:6] == ["upload", "--repository", "testpypi"]
    assert "Uploading to TestPyPI..." in caplog.messages
    assert "Install with: pip install --index-url https://test.pypi.org/simple/ sample-pkg" in caplog.messages


def test_skip_tests_never_invokes_test_runner(project_root: Path, caplog: pytest.LogCaptureFixture) -> None:
    runner = RecordingRunner()
    probe = ModuleProbeStub()
    options = PublishOptions(skip_tests=True)
    report = _pipeline(project_root, options=options, runner=runner, probe=probe).run()

    assert "pytest" not in runner.tools
    assert "pytest" not in probe.queries
    assert report.status_of(StepName.TESTS) is StepStatus.SKIPPED
    assert not report.ran(StepName.TESTS)
    assert report.ran(StepName.UPLOAD)
    assert "Skipping tests as requested." in caplog.messages


def test_missing_pytest_skips_tests_with_warning(project_root: Path, caplog: pytest.LogCaptureFixture) -> None:
    runner = RecordingRunner()
    probe = ModuleProbeStub(available={"build", "twine"})
    report = _pipeline(project_root, runner=runner, probe=probe).run()

    assert "pytest" not in runner.tools
    assert report.status_of(StepName.TESTS) is StepStatus.SKIPPED
    assert "pytest not found. Skipping tests." in caplog.messages


def test_failing_tests_stop_the_run(project_root: Path) -> None:
    runner = RecordingRunner(failures={"pytest": 2})
    with pytest.raises(TestFailure, match="Tests failed") as excinfo:
        _ = _pipeline(project_root, runner=runner).run()
    assert excinfo.value.exit_code == 2
    assert excinfo.value.step is StepName.TESTS
    assert runner.tools == ["pytest"]


def test_clean_removes_previous_artifacts(project_root: Path) -> None:
    for name in ("build", "dist", "sample_pkg.egg-info"):
        (project_root / name).mkdir()
    _ = (project_root / "dist" / "old-0.0.1.tar.gz").write_text("old", encoding="utf-8")

    _ = _pipeline(project_root).run()

    assert not (project_root / "build").exists()
    assert not (project_root / "sample_pkg.egg-info").exists()
    assert not (project_root / "dist" / "old-0.0.1.tar.gz").exists()


def test_skip_clean_keeps_artifacts(project_root: Path, caplog: pytest.LogCaptureFixture) -> None:
    for name in ("build", "sample_pkg.egg-info"):
        (project_root / name).mkdir()
    options = PublishOptions(skip_clean=True)
    report = _pipeline(project_root, options=options).run()

    assert (project_root / "build").is_dir()
    assert (project_root / "sample_pkg.egg-info").is_dir()
    assert report.status_of(StepName.CLEAN) is StepStatus.SKIPPED
    assert "Skipping clean as requested." in caplog.messages


def test_build_failure_raises_build_error(project_root: Path) -> None:
    runner = RecordingRunner(failures={"build": 1})
    with pytest.raises(BuildError, match="Build failed"):
        _ = _pipeline(project_root, runner=runner).run()
    assert "twine check" not in runner.tools


def test_check_failure_raises_validation_error(project_root: Path) -> None:
    runner = RecordingRunner(failures={"twine check": 1})
    with pytest.raises(ValidationError, match="Distribution check failed"):
        _ = _pipeline(project_root, runner=runner).run()
    assert "twine upload" not in runner.tools


def test_empty_dist_dir_fails_validation(project_root: Path) -> None:
    runner = RecordingRunner(produce_dists=False)
    with pytest.raises(ValidationError, match="No distributions found"):
        _ = _pipeline(project_root, runner=runner).run()
    assert "twine check" not in runner.tools


def test_upload_failure_names_target(project_root: Path) -> None:
    runner = RecordingRunner(failures={"twine upload": 1})
    options = PublishOptions(target=Target.TESTPYPI)
    with pytest.raises(UploadError, match="Upload to TestPyPI failed"):
        _ = _pipeline(project_root, options=options, runner=runner).run()


def test_missing_tools_are_installed_first(project_root: Path) -> None:
    runner = RecordingRunner()
    probe = ModuleProbeStub(available={"pytest"})
    _ = _pipeline(project_root, runner=runner, probe=probe).run()
    assert runner.tools[:2] == ["pip install", "pip install"]
    assert runner.calls[0][0][-1] == "build"
    assert runner.calls[1][0][-1] == "twine"


def test_missing_interpreter_raises_dependency_error(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("distpub.services.tools.python_executable", lambda: None)
    runner = RecordingRunner()
    pipeline = PublishPipeline(
        project_root,
        PublishOptions(),
        PublishConfig(),
        runner=runner,
        probe=ModuleProbeStub(),
    )
    with pytest.raises(DependencyError):
        _ = pipeline.run()
    assert runner.calls == []


def test_custom_dist_dir_is_passed_to_build(project_root: Path) -> None:
    runner = RecordingRunner()
    config = PublishConfig(package_name="sample-pkg", dist_dir="out", clean_targets=("build", "out"))
    _ = _pipeline(project_root, config=config, runner=runner).run()
    assert runner.find("build") == [PYTHON, "-m", "build", "--outdir", str(project_root / "out")]
    check = runner.find("twine check")
    assert check is not None
    assert all(arg.startswith(str(project_root / "out")) for arg in check[4:])


def test_clean_removes_custom_dist_dir_with_default_targets(project_root: Path) -> None:
    stale_dir = project_root / "out"
    stale_dir.mkdir()
    stale = stale_dir / "stale-0.0.1.tar.gz"
    _ = stale.write_text("stale", encoding="utf-8")
    runner = RecordingRunner()
    config = PublishConfig(package_name="sample-pkg", dist_dir="out")

    _ = _pipeline(project_root, config=config, runner=runner).run()

    assert not stale.exists()
    upload = runner.find("twine upload")
    assert upload is not None
    assert str(stale) not in upload
    assert sorted(Path(arg).name for arg in upload[4:]) == [
        "sample_pkg-0.1.0-py3-none-any.whl",
        "sample_pkg-0.1.0.tar.gz",
    ]


def test_unknown_package_name_uses_placeholder(project_root: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="distpub")
    _ = _pipeline(project_root, config=PublishConfig()).run()
    assert "Install with: pip install <package>" in caplog.messages


def test_unlaunchable_tool_becomes_step_error(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def refuse(*_args: object, **_kwargs: object) -> None:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr("distpub._infra.utils.process.subprocess.run", refuse)
    pipeline = PublishPipeline(
        project_root,
        PublishOptions(skip_tests=True),
        PublishConfig(package_name="sample-pkg"),
        probe=ModuleProbeStub(),
        python=PYTHON,
    )
    with pytest.raises(BuildError, match="Build failed") as excinfo:
        _ = pipeline.run()
    assert excinfo.value.exit_code == COMMAND_NOT_EXECUTABLE_EXIT
