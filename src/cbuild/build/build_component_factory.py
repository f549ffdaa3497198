"""
Build component factory for cbuild.

This module maps a project's output kind onto the builder class that knows
how to produce it.
"""

from typing import Dict, Optional, Type

from ..config.workspace import BuildOutputKind, Project
from .command_runner import CommandRunner
from .project_builder import (
    ConsoleAppBuilder,
    ProjectBuilder,
    SharedLibraryBuilder,
    StaticLibraryBuilder,
)


class BuildComponentFactory:
    """
    Factory for creating project builders.

    Example usage:
        builder = BuildComponentFactory.create_builder(project.output_kind, project)
        status = builder.build("Release")
    """

    BUILDERS: Dict[BuildOutputKind, Type[ProjectBuilder]] = {
        BuildOutputKind.CONSOLE_APP: ConsoleAppBuilder,
        BuildOutputKind.STATIC_LIBRARY: StaticLibraryBuilder,
        BuildOutputKind.SHARED_LIBRARY: SharedLibraryBuilder,
    }

    @staticmethod
    def create_builder(
        kind: BuildOutputKind,
        project: Project,
        runner: Optional[CommandRunner] = None
    ) -> ProjectBuilder:
        """
        Create the builder matching an output kind.

        Args:
            kind: Output kind of the project
            project: Project to build
            runner: Optional command runner shared with the caller

        Returns:
            New builder instance (one per build)

        Raises:
            ValueError: If the kind has no builder
        """
        builder_class = BuildComponentFactory.BUILDERS.get(kind)
        if builder_class is None:
            raise ValueError(f"Invalid build output kind: {kind!r}")
        return builder_class(project, runner=runner)
