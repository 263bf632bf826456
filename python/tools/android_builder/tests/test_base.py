#!/usr/bin/env python3
"""
Tests for the default asynchronous command runner.
"""

import sys
from pathlib import Path

import pytest

from android_builder.builders.project_builder import ProjectBuilder
from android_builder.core.errors import RequirementsError
from android_builder.core.models import BuildStatus


@pytest.fixture
def live_builder(tmp_path: Path) -> ProjectBuilder:
    return ProjectBuilder(tmp_path, stream_output=False)


@pytest.mark.asyncio
async def test_captures_stdout_and_stderr(live_builder: ProjectBuilder):
    script = "import sys; print('out line'); print('err line', file=sys.stderr)"
    result = await live_builder.run_command([sys.executable, "-c", script])

    assert result.success
    assert result.output == "out line"
    assert result.error == "err line"
    assert live_builder.get_last_result() is result


@pytest.mark.asyncio
async def test_runs_in_project_root(live_builder: ProjectBuilder):
    script = "import os; print(os.getcwd())"
    result = await live_builder.run_command([sys.executable, "-c", script])
    assert Path(result.output).resolve() == live_builder.root


@pytest.mark.asyncio
async def test_non_zero_exit_is_reported(live_builder: ProjectBuilder):
    result = await live_builder.run_command([sys.executable, "-c", "raise SystemExit(3)"])

    assert result.failed
    assert result.exit_code == 3
    assert live_builder.get_status() is BuildStatus.FAILED


@pytest.mark.asyncio
async def test_env_vars_are_passed(tmp_path: Path):
    builder = ProjectBuilder(tmp_path, stream_output=False, env_vars={"CDV_TEST": "42"})
    script = "import os; print(os.environ['CDV_TEST'])"
    result = await builder.run_command([sys.executable, "-c", script])
    assert result.output == "42"


@pytest.mark.asyncio
async def test_missing_executable_raises(live_builder: ProjectBuilder):
    with pytest.raises(RequirementsError):
        await live_builder.run_command([str(live_builder.root / "gradlew")])


@pytest.mark.asyncio
async def test_streams_output_to_console(tmp_path: Path, capsys):
    builder = ProjectBuilder(tmp_path)
    await builder.run_command([sys.executable, "-c", "print('streamed')"])
    assert "streamed" in capsys.readouterr().out
