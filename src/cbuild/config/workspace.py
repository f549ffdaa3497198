"""
Workspace data model.

A workspace is the top-level build unit. It owns an ordered list of projects,
and every project owns its named build configurations. The model is built
once by the workspace loader and treated as read-only during a build run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class BuildOutputKind(Enum):
    """Kind of artifact a project produces."""

    CONSOLE_APP = "ConsoleApp"
    STATIC_LIBRARY = "StaticLibrary"
    SHARED_LIBRARY = "SharedLibrary"

    @staticmethod
    def from_string(value: str) -> "BuildOutputKind":
        """
        Parse an output kind from its workspace file spelling.

        Args:
            value: Kind attribute value (e.g., 'ConsoleApp', 'StaticLib')

        Returns:
            Matching BuildOutputKind

        Raises:
            ValueError: If the value names no known kind
        """
        kind = _KIND_ALIASES.get(value.strip())
        if kind is None:
            raise ValueError(
                f"Unknown output kind '{value}'. "
                + f"Expected one of: {', '.join(_KIND_ALIASES)}"
            )
        return kind


_KIND_ALIASES = {
    "ConsoleApp": BuildOutputKind.CONSOLE_APP,
    "StaticLib": BuildOutputKind.STATIC_LIBRARY,
    "StaticLibrary": BuildOutputKind.STATIC_LIBRARY,
    "SharedLib": BuildOutputKind.SHARED_LIBRARY,
    "SharedLibrary": BuildOutputKind.SHARED_LIBRARY,
}


@dataclass(frozen=True)
class Command:
    """An external program invocation: program name plus ordered arguments."""

    program: str
    args: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return len(self.program) > 0

    def with_args(self, *extra: str) -> "Command":
        """Return a new command with extra arguments appended."""
        return Command(self.program, self.args + tuple(extra))


@dataclass
class Configuration:
    """Named build variant layered on top of project-wide settings."""

    name: str
    flags: List[str] = field(default_factory=list)
    defines: List[str] = field(default_factory=list)


@dataclass
class Project:
    """
    One buildable unit of a workspace.

    The `workspace` back-reference is used to resolve shared output and
    intermediate directories. It is excluded from comparison and repr to
    avoid recursing through the owning workspace.
    """

    name: str
    workspace: Optional["Workspace"] = field(default=None, repr=False, compare=False)
    arch: str = ""
    language: str = "C++"
    c_version: str = "89"
    cpp_version: str = "14"
    compiler: str = "g++"
    output_kind: BuildOutputKind = BuildOutputKind.CONSOLE_APP
    flags: List[str] = field(default_factory=list)
    defines: List[str] = field(default_factory=list)
    include_dirs: List[str] = field(default_factory=list)
    source_dirs: List[str] = field(default_factory=list)
    library_dirs: List[str] = field(default_factory=list)
    references: List[str] = field(default_factory=list)
    pre_build_commands: List[Command] = field(default_factory=list)
    post_build_commands: List[Command] = field(default_factory=list)
    configurations: Dict[str, Configuration] = field(default_factory=dict)


@dataclass
class Workspace:
    """Top-level build unit holding projects and shared directory settings."""

    name: str
    cwd: str = "./"
    output_dir: str = "./"
    intermediate_dir: str = "./"
    projects: List[Project] = field(default_factory=list)
    delete_output_files_if_build_fails: bool = False
    execute_pre_build_commands: bool = False
    execute_post_build_commands: bool = False

    def add_project(self, project: Project) -> Project:
        """Attach a project to this workspace and return it."""
        project.workspace = self
        self.projects.append(project)
        return project
