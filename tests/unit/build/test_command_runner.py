"""
Unit tests for CommandRunner.

Tests command rendering, sequential execution and failure aggregation.
"""

import sys
from pathlib import Path
from unittest.mock import Mock, call, patch

import pytest

from cbuild.build.build_status import BuildStatus
from cbuild.build.command_runner import CommandRunner
from cbuild.config.workspace import Command


def completed(returncode):
    result = Mock()
    result.returncode = returncode
    return result


class TestRender:
    """Test suite for command line rendering."""

    def test_program_only(self):
        assert CommandRunner.render(Command("ar")) == "ar"

    def test_space_joined_in_order(self):
        cmd = Command("g++", ("-DDEBUG", "-c", "main.cpp", "-o", "main.o"))
        assert CommandRunner.render(cmd) == "g++ -DDEBUG -c main.cpp -o main.o"

    def test_no_quoting(self):
        """Test arguments containing spaces are not quoted."""
        cmd = Command("g++", ("-Xlinker --out-implib out/App.lib",))
        assert CommandRunner.render(cmd) == "g++ -Xlinker --out-implib out/App.lib"


class TestRun:
    """Test suite for command execution."""

    @pytest.fixture
    def commands(self):
        return [
            Command("g++", ("-c", "a.cpp", "-o", "a.o")),
            Command("g++", ("-c", "b.cpp", "-o", "b.o")),
            Command("g++", ("a.o", "b.o", "-o", "app.exe")),
        ]

    @patch("cbuild.build.command_runner.subprocess.run")
    def test_all_succeed(self, mock_run, commands, capsys):
        """Test success when every command exits 0."""
        mock_run.return_value = completed(0)

        status = CommandRunner().run(commands)

        assert status == BuildStatus.SUCCESS
        assert mock_run.call_count == 3
        out = capsys.readouterr().out.splitlines()
        assert out == [CommandRunner.render(c) for c in commands]

    @patch("cbuild.build.command_runner.subprocess.run")
    def test_middle_failure_keeps_running(self, mock_run, commands):
        """Test the third command still runs after the second fails."""
        mock_run.side_effect = [completed(0), completed(1), completed(0)]

        status = CommandRunner().run(commands)

        assert status == BuildStatus.BUILD_FAILED
        assert mock_run.call_count == 3
        assert mock_run.call_args_list[2].args[0] == "g++ a.o b.o -o app.exe"

    @patch("cbuild.build.command_runner.subprocess.run")
    def test_runs_through_shell_in_cwd(self, mock_run, tmp_path):
        """Test commands run through the shell in the configured directory."""
        mock_run.return_value = completed(0)

        CommandRunner(cwd=tmp_path).run([Command("echo", ("hi",))])

        mock_run.assert_called_once_with("echo hi", shell=True, cwd=str(tmp_path), check=False)

    @patch("cbuild.build.command_runner.subprocess.run")
    def test_default_cwd(self, mock_run):
        mock_run.return_value = completed(0)

        CommandRunner().run([Command("echo")])

        assert mock_run.call_args.kwargs["cwd"] is None

    @patch("cbuild.build.command_runner.subprocess.run")
    def test_start_failure_counts_as_failure(self, mock_run, commands):
        """Test an OSError fails the run without stopping it."""
        mock_run.side_effect = [OSError("no such directory"), completed(0), completed(0)]

        assert CommandRunner(cwd=Path("/missing")).run(commands) == BuildStatus.BUILD_FAILED
        assert mock_run.call_count == 3

    @patch("cbuild.build.command_runner.subprocess.run")
    def test_invalid_command_not_executed(self, mock_run, caplog):
        """Test an empty program name is reported and skipped."""
        mock_run.return_value = completed(0)

        status = CommandRunner().run([Command(""), Command("echo", ("ok",))])

        assert status == BuildStatus.BUILD_FAILED
        assert mock_run.call_args_list == [call("echo ok", shell=True, cwd=None, check=False)]
        assert "invalid command" in caplog.text

    @patch("cbuild.build.command_runner.subprocess.run")
    def test_empty_command_list(self, mock_run):
        assert CommandRunner().run([]) == BuildStatus.SUCCESS
        mock_run.assert_not_called()


@pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX shell builtins")
class TestRunRealShell:
    """Run real shell commands."""

    def test_aggregate_with_real_processes(self, tmp_path):
        """Test a real failing command does not stop the next one."""
        marker = tmp_path / "ran"
        commands = [
            Command("true"),
            Command("false"),
            Command("touch", (str(marker),)),
        ]

        status = CommandRunner(cwd=tmp_path).run(commands)

        assert status == BuildStatus.BUILD_FAILED
        assert marker.exists()
