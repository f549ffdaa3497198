"""
Project builders for the three output kinds.

A builder turns one (project, configuration) pair into an ordered list of
commands and runs them:

    <CC> -D<def>... -I<inc>... -m64 -std=<std> <flags>... -c FILE -o OBJ    (per source)
    ...
    <final link/archive command consuming every OBJ>

Only the final command differs between executables, static libraries and
shared libraries; everything else lives in ProjectBuilder.
"""

import logging
import platform
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple

from ..config.workspace import BuildOutputKind, Command, Configuration, Project, Workspace
from .build_status import BuildStatus
from .command_runner import CommandRunner
from .path_variables import set_variables
from .source_scanner import SourceScanner


class BuildConfigurationError(Exception):
    """Raised when a project cannot be turned into build commands."""
    pass


class ConfigurationNotFoundError(BuildConfigurationError):
    """Raised when the requested configuration is missing or none are defined."""
    pass


class PathVariableError(BuildConfigurationError):
    """Raised when a `$(...)` marker in a library directory cannot be resolved."""
    pass


def shared_library_extension() -> str:
    """Shared library file extension for the host platform."""
    return "dll" if platform.system() == "Windows" else "so"


class ProjectBuilder(ABC):
    """
    Base class for project builders.

    A builder is created for a single build() call. Its command list and
    output-file list only ever grow while that call assembles commands.

    Example usage:
        builder = ConsoleAppBuilder(project)
        status = builder.build("Debug")
        if status.success:
            print(builder.output_files[-1])
    """

    OUTPUT_KIND: BuildOutputKind

    def __init__(self, project: Project, runner: Optional[CommandRunner] = None):
        """
        Initialize builder.

        Args:
            project: Project to build (must belong to a workspace)
            runner: Command runner (default: runs in the workspace directory)
        """
        if project.workspace is None:
            raise ValueError(f"Project '{project.name}' does not belong to a workspace")

        self._project = project
        self._commands: List[Command] = []
        self._output_files: List[str] = []
        self._runner = runner or CommandRunner(cwd=Path(project.workspace.cwd))

    @property
    def project(self) -> Project:
        return self._project

    @property
    def workspace(self) -> Workspace:
        return self._project.workspace

    @property
    def output_kind(self) -> BuildOutputKind:
        return self.OUTPUT_KIND

    @property
    def commands(self) -> Tuple[Command, ...]:
        return tuple(self._commands)

    @property
    def output_files(self) -> Tuple[str, ...]:
        return tuple(self._output_files)

    def build(self, configuration: Optional[str]) -> BuildStatus:
        """
        Assemble and execute every command for the given configuration.

        Configuration problems are detected before anything runs and
        reported as CONFIGURATION_PROCESSING_FAILED.

        Args:
            configuration: Configuration name (e.g., 'Debug')

        Returns:
            Aggregate BuildStatus of the run
        """
        start_time = time.time()

        try:
            config = self.resolve_configuration(configuration)
            if self.workspace.execute_pre_build_commands:
                self._commands.extend(self._project.pre_build_commands)
            base_command = self.prepare_base_command(config)
            self.generate_build_commands_and_output_files(config.name, base_command)
            self.prepare_final_command(config.name)
            if self.workspace.execute_post_build_commands:
                self._commands.extend(self._project.post_build_commands)
        except BuildConfigurationError as e:
            logging.error(f"[{self._project.name}] {e}")
            return BuildStatus.CONFIGURATION_PROCESSING_FAILED

        logging.debug(
            f"[{self._project.name}] Running {len(self._commands)} command(s) "
            f"for configuration '{config.name}'"
        )
        status = self._runner.run(self._commands)

        if not status.success and self.workspace.delete_output_files_if_build_fails:
            self.delete_output_files()

        logging.info(
            f"[{self._project.name}] {status.name} in {time.time() - start_time:.2f}s"
        )
        return status

    def verify_configuration(self, configuration: Optional[str]) -> None:
        """
        Check that a configuration can be looked up at all.

        Raises:
            ConfigurationNotFoundError: If the project defines no configurations
                or the name is empty
        """
        if not self._project.configurations:
            raise ConfigurationNotFoundError(
                f"No configurations defined for project '{self._project.name}'"
            )
        if not configuration:
            raise ConfigurationNotFoundError("Invalid (empty) configuration name")

    def resolve_configuration(self, configuration: Optional[str]) -> Configuration:
        """
        Look up a configuration by name.

        Raises:
            ConfigurationNotFoundError: If verification fails or the name is unknown
        """
        self.verify_configuration(configuration)
        config = self._project.configurations.get(configuration)
        if config is None:
            raise ConfigurationNotFoundError(
                f"Configuration `{configuration}` was not found "
                + f"(defined: {', '.join(self._project.configurations)})"
            )
        return config

    def prepare_base_command(self, config: Configuration) -> Command:
        """
        Build the compiler invocation shared by every source file.

        Args:
            config: Active configuration

        Returns:
            Command template without source/output arguments
        """
        project = self._project
        args: List[str] = []

        args.extend(f"-D{define}" for define in project.defines)
        args.extend(f"-D{define}" for define in config.defines)
        args.extend(f"-I{include}" for include in project.include_dirs)

        if project.arch == "x64":
            args.append("-m64")
        if project.language == "C++":
            args.append(f"-std=c++{project.cpp_version}")
        else:
            args.append(f"-std=c{project.c_version}")

        args.extend(project.flags)
        args.extend(config.flags)

        return Command(project.compiler, tuple(args))

    def generate_build_commands_and_output_files(
        self,
        configuration: str,
        base_command: Command
    ) -> None:
        """Queue one compile command per discovered source file."""
        scanner = SourceScanner(Path(self.workspace.cwd))
        result = scanner.scan(
            self._project.source_dirs,
            base_command,
            self.intermediate_dir(configuration)
        )
        self._commands.extend(result.commands)
        self._output_files.extend(result.output_files)

    def intermediate_dir(self, configuration: str) -> Path:
        return Path(self.workspace.intermediate_dir) / configuration

    def output_dir(self, configuration: str) -> Path:
        return Path(self.workspace.output_dir) / configuration

    def library_args(self, configuration: str) -> List[str]:
        """
        Library search directories and references for the final command.

        Raises:
            PathVariableError: If a library directory cannot be resolved
        """
        args = []
        for library_dir in self._project.library_dirs:
            resolved = set_variables(library_dir, "Configuration", configuration)
            if not resolved.succeeded:
                raise PathVariableError(
                    f"Cannot resolve path variables in library directory '{library_dir}'"
                )
            args.append(f"-L{resolved.value}")
        args.extend(f"-l{reference}" for reference in self._project.references)
        return args

    def prepare_final_command(self, configuration: str) -> None:
        """Queue the link/archive command and record its output file."""
        output_path = str(self.output_path(configuration))
        object_files = list(self._output_files)
        self._commands.append(self.final_command(configuration, object_files, output_path))
        self._output_files.append(output_path)

    @abstractmethod
    def output_path(self, configuration: str) -> Path:
        """Path of the artifact produced for the configuration."""
        pass

    @abstractmethod
    def final_command(
        self,
        configuration: str,
        object_files: List[str],
        output_path: str
    ) -> Command:
        """Link/archive command consuming all object files."""
        pass

    def delete_output_files(self) -> None:
        """Remove every output file this build produced (best effort)."""
        for output_file in self._output_files:
            path = Path(self.workspace.cwd) / output_file
            if not path.is_file():
                continue
            try:
                path.unlink()
                logging.info(f"Deleted {path}")
            except OSError as e:
                logging.warning(f"Failed to delete {path}: {e}")


class ConsoleAppBuilder(ProjectBuilder):
    """Links object files into an executable.

    <CC> OBJ... -L<dir>... -l<ref>... -o <out>/<cfg>/<name>.exe
    """

    OUTPUT_KIND = BuildOutputKind.CONSOLE_APP

    def output_path(self, configuration: str) -> Path:
        return self.output_dir(configuration) / f"{self._project.name}.exe"

    def final_command(self, configuration, object_files, output_path) -> Command:
        args = list(object_files)
        args.extend(self.library_args(configuration))
        args.extend(["-o", output_path])
        return Command(self._project.compiler, tuple(args))


class StaticLibraryBuilder(ProjectBuilder):
    """Archives object files into a static library.

    ar -rcs -o <out>/<cfg>/<name>.lib -L<dir>... -l<ref>... OBJ...
    """

    OUTPUT_KIND = BuildOutputKind.STATIC_LIBRARY
    ARCHIVER = "ar"

    def output_path(self, configuration: str) -> Path:
        return self.output_dir(configuration) / f"{self._project.name}.lib"

    def final_command(self, configuration, object_files, output_path) -> Command:
        args = ["-rcs", "-o", output_path]
        args.extend(self.library_args(configuration))
        args.extend(object_files)
        return Command(self.ARCHIVER, tuple(args))


class SharedLibraryBuilder(ProjectBuilder):
    """Links object files into a shared library with an import library.

    <CC> -shared -Xlinker --out-implib <out>/<cfg>/<name>.lib -L<dir>... -l<ref>...
         -o <out>/<cfg>/<name>.<dll|so> OBJ...
    """

    OUTPUT_KIND = BuildOutputKind.SHARED_LIBRARY

    def output_path(self, configuration: str) -> Path:
        return self.output_dir(configuration) / f"{self._project.name}.{shared_library_extension()}"

    def import_library_path(self, configuration: str) -> Path:
        return self.output_dir(configuration) / f"{self._project.name}.lib"

    def final_command(self, configuration, object_files, output_path) -> Command:
        args = [
            "-shared",
            f"-Xlinker --out-implib {self.import_library_path(configuration)}",
        ]
        args.extend(self.library_args(configuration))
        args.extend(["-o", output_path])
        args.extend(object_files)
        return Command(self._project.compiler, tuple(args))
