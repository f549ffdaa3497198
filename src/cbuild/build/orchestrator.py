"""
Build orchestration for cbuild workspaces.

This module builds every project of a workspace, in workspace order, for a
single configuration.

Status policy: every project is built even after a failure, and the
workspace status is the status of the first project that did not succeed.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config.workspace import Workspace
from .build_component_factory import BuildComponentFactory
from .build_status import BuildStatus
from .command_runner import CommandRunner


@dataclass
class BuildResult:
    """Result of building a whole workspace."""

    status: BuildStatus
    project_statuses: Dict[str, BuildStatus] = field(default_factory=dict)
    build_time: float = 0.0

    @property
    def success(self) -> bool:
        return self.status.success


class WorkspaceOrchestrator:
    """
    Builds all projects of a workspace.

    Example usage:
        orchestrator = WorkspaceOrchestrator(workspace)
        result = orchestrator.build("Debug")
        if not result.success:
            sys.exit(int(result.status))
    """

    def __init__(self, workspace: Workspace, runner: Optional[CommandRunner] = None):
        """
        Initialize orchestrator.

        Args:
            workspace: Loaded workspace
            runner: Command runner handed to every builder (default: one per builder)
        """
        self.workspace = workspace
        self.runner = runner

    def build(self, configuration: str) -> BuildResult:
        """
        Build every project for the given configuration.

        Args:
            configuration: Configuration name (e.g., 'Debug')

        Returns:
            BuildResult whose status is the first failing project's status,
            or SUCCESS if all projects built
        """
        start_time = time.time()
        result = BuildResult(status=BuildStatus.SUCCESS)

        for project in self.workspace.projects:
            builder = BuildComponentFactory.create_builder(
                project.output_kind, project, runner=self.runner
            )
            print(f"=========== Building `{project.name}` ===========", flush=True)
            status = builder.build(configuration)
            print()

            result.project_statuses[project.name] = status
            if not status.success:
                logging.warning(f"Project '{project.name}' failed: {status.name}")
                if result.status.success:
                    result.status = status

        result.build_time = time.time() - start_time
        return result
