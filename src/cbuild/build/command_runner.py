"""Command Runner.

This module executes assembled build commands through the host shell.

Design:
    - Renders each command as a single space-joined line (no quoting)
    - Prints every line before running it
    - Runs commands strictly in order and never stops early
    - Reports BUILD_FAILED if any command failed
"""

import logging
import subprocess
from pathlib import Path
from typing import Iterable, Optional

from ..config.workspace import Command
from .build_status import BuildStatus


class CommandRunner:
    """Runs build commands sequentially and aggregates their outcome.

    A failing command does not stop later ones; the child's output goes
    straight to the console.
    """

    def __init__(self, cwd: Optional[Path] = None):
        """Initialize command runner.

        Args:
            cwd: Directory the shell runs commands in (default: current directory)
        """
        self.cwd = cwd

    @staticmethod
    def render(command: Command) -> str:
        """Render a command as a shell line.

        Arguments containing spaces are not quoted; callers that need
        quoting must embed it in the argument.
        """
        return " ".join([command.program, *command.args])

    def run(self, commands: Iterable[Command]) -> BuildStatus:
        """Execute commands in order.

        Args:
            commands: Commands to run

        Returns:
            BuildStatus.BUILD_FAILED if any command failed, otherwise SUCCESS
        """
        status = BuildStatus.SUCCESS
        for command in commands:
            if not self.run_one(command):
                status = BuildStatus.BUILD_FAILED
        return status

    def run_one(self, command: Command) -> bool:
        """Print and execute a single command.

        Returns:
            True if the command exited with status 0
        """
        if not command:
            logging.error(f"Skipping invalid command with empty program name: {command}")
            return False

        cmdline = self.render(command)
        print(cmdline, flush=True)

        try:
            result = subprocess.run(
                cmdline,
                shell=True,
                cwd=None if self.cwd is None else str(self.cwd),
                check=False
            )
        except OSError as e:
            logging.error(f"Failed to start `{cmdline}`: {e}")
            return False

        logging.debug(f"`{command.program}` exited with code {result.returncode}")
        return result.returncode == 0
