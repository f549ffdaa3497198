"""
Workspace XML loader.

This module parses a cbuild workspace file into the in-memory data model
(Workspace, Project, Configuration).

Example workspace file:
    <Workspace Name="Samples">
        <OutputDir>bin</OutputDir>
        <IntermediateDir>bin-int</IntermediateDir>
        <Project Name="App" Kind="ConsoleApp" Arch="x64" Compiler="g++">
            <Configuration Name="Debug" />
            <Configuration Name="Release" />
            <Defines>
                <Item Configuration="Debug">DEBUG</Item>
                <Item>APP_NAME="App"</Item>
            </Defines>
            <SourceDirs>
                <Item>./</Item>
            </SourceDirs>
            <LibraryDirs>
                <Item>bin/$(Configuration)</Item>
            </LibraryDirs>
        </Project>
    </Workspace>

Usage:
    workspace = WorkspaceLoader(Path("workspace.xml")).load()
"""

import logging
import shlex
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional

from .workspace import BuildOutputKind, Command, Configuration, Project, Workspace


class WorkspaceConfigError(Exception):
    """Exception raised for malformed or structurally invalid workspace files."""

    pass


class WorkspaceLoader:
    """
    Parser for cbuild workspace XML files.

    Directory settings default to "./". The working directory is resolved
    against the directory holding the workspace file so builds behave the
    same regardless of where cbuild is launched from.
    """

    DEFAULT_DIR = "./"
    DEFAULT_COMPILER = "g++"
    DEFAULT_C_VERSION = "89"
    DEFAULT_CPP_VERSION = "14"

    TRUE_VALUES = {"true", "1", "yes", "on"}
    FALSE_VALUES = {"false", "0", "no", "off", ""}

    def __init__(self, xml_path: Path):
        """
        Initialize the loader with a workspace file.

        Args:
            xml_path: Path to the workspace XML file

        Raises:
            WorkspaceConfigError: If the file doesn't exist or cannot be parsed
        """
        self.xml_path = Path(xml_path)

        if not self.xml_path.is_file():
            raise WorkspaceConfigError(f"Workspace file not found: {self.xml_path}")

        try:
            self.root = ET.parse(self.xml_path).getroot()
        except ET.ParseError as e:
            raise WorkspaceConfigError(f"Failed to parse {self.xml_path}: {e}") from e
        except OSError as e:
            raise WorkspaceConfigError(f"Failed to read {self.xml_path}: {e}") from e

    def load(self) -> Workspace:
        """
        Build the Workspace described by the file.

        Returns:
            Workspace with all projects attached

        Raises:
            WorkspaceConfigError: If a required name or attribute is missing,
                or an item refers to an undefined configuration
        """
        name = self.root.get("Name")
        if not name:
            raise WorkspaceConfigError(
                f"Workspace must have a name (root element <{self.root.tag}>)"
            )

        workspace = Workspace(
            name=name,
            cwd=self._resolve_working_directory(
                self._child_text(self.root, "WorkingDirectory", self.DEFAULT_DIR)
            ),
            output_dir=self._child_text(self.root, "OutputDir", self.DEFAULT_DIR),
            intermediate_dir=self._child_text(
                self.root, "IntermediateDir", self.DEFAULT_DIR
            ),
            delete_output_files_if_build_fails=self._child_bool(
                self.root, "DeleteOutputFilesIfBuildFails"
            ),
            execute_pre_build_commands=self._child_bool(
                self.root, "ExecutePreBuildCommands"
            ),
            execute_post_build_commands=self._child_bool(
                self.root, "ExecutePostBuildCommands"
            ),
        )

        for x_project in self.root.findall("Project"):
            workspace.add_project(self._load_project(x_project))

        logging.debug(
            f"Loaded workspace '{workspace.name}' with {len(workspace.projects)} project(s) "
            f"from {self.xml_path}"
        )
        return workspace

    def _load_project(self, x_project: ET.Element) -> Project:
        project = self._read_project_attributes(x_project)

        for x_config in x_project.findall("Configuration"):
            config_name = x_config.get("Name")
            if not config_name:
                raise WorkspaceConfigError(
                    f"Project '{project.name}': Configuration has no name"
                )
            if config_name in project.configurations:
                raise WorkspaceConfigError(
                    f"Project '{project.name}': Configuration '{config_name}' is defined more than once"
                )
            project.configurations[config_name] = Configuration(name=config_name)

        # Flags and defines may be routed to a single configuration
        for item, config_name in self._routed_items(x_project, "Flags", project):
            if config_name is None:
                project.flags.append(item)
            else:
                project.configurations[config_name].flags.append(item)

        for item, config_name in self._routed_items(x_project, "Defines", project):
            if config_name is None:
                project.defines.append(item)
            else:
                project.configurations[config_name].defines.append(item)

        project.include_dirs = self._items(x_project, "IncludeDirs", project)
        project.source_dirs = self._items(x_project, "SourceDirs", project)
        project.library_dirs = self._items(x_project, "LibraryDirs", project)
        project.references = self._items(x_project, "References", project)
        project.pre_build_commands = self._commands(x_project, "PreBuildCommands", project)
        project.post_build_commands = self._commands(x_project, "PostBuildCommands", project)

        return project

    def _read_project_attributes(self, x_project: ET.Element) -> Project:
        name = x_project.get("Name", "")
        if not name:
            raise WorkspaceConfigError("Project must have a name")

        language = x_project.get("Language")
        c_version = x_project.get("CVersion")
        cpp_version = x_project.get("CppVersion")
        compiler = x_project.get("Compiler")

        if language is None and c_version is None and cpp_version is None and compiler is None:
            raise WorkspaceConfigError(
                f"Project '{name}': at least one of 'Language', 'CVersion|CppVersion', "
                + "'Compiler' must be set"
            )

        if compiler is None:
            compiler = self.DEFAULT_COMPILER
        if language is None:
            language = "C" if compiler == "gcc" else "C++"

        kind = BuildOutputKind.CONSOLE_APP
        kind_attr = x_project.get("Kind")
        if kind_attr is not None:
            try:
                kind = BuildOutputKind.from_string(kind_attr)
            except ValueError as e:
                raise WorkspaceConfigError(f"Project '{name}': {e}") from e

        return Project(
            name=name,
            arch=x_project.get("Arch", ""),
            language=language,
            c_version=c_version if c_version is not None else self.DEFAULT_C_VERSION,
            cpp_version=cpp_version if cpp_version is not None else self.DEFAULT_CPP_VERSION,
            compiler=compiler,
            output_kind=kind,
        )

    def _routed_items(self, x_project: ET.Element, tag: str, project: Project):
        """Yield (text, configuration name or None) pairs for a routed item list."""
        x_list = x_project.find(tag)
        if x_list is None:
            return

        for x_item in x_list.findall("Item"):
            text = self._item_text(x_item, tag, project)
            if text is None:
                continue

            config_name = x_item.get("Configuration")
            if config_name is not None and config_name not in project.configurations:
                raise WorkspaceConfigError(
                    f"Project '{project.name}': Configuration '{config_name}' not found "
                    + f"(referenced from <{tag}>)"
                )
            yield text, config_name

    def _items(self, x_project: ET.Element, tag: str, project: Project) -> List[str]:
        x_list = x_project.find(tag)
        if x_list is None:
            return []

        items = []
        for x_item in x_list.findall("Item"):
            text = self._item_text(x_item, tag, project)
            if text is not None:
                items.append(text)
        return items

    def _commands(self, x_project: ET.Element, tag: str, project: Project) -> List[Command]:
        commands = []
        for line in self._items(x_project, tag, project):
            try:
                parts = shlex.split(line)
            except ValueError as e:
                raise WorkspaceConfigError(
                    f"Project '{project.name}': invalid command line in <{tag}>: {line!r} ({e})"
                ) from e
            if parts:
                # Re-quote so the runner's space-joined line keeps the written words
                commands.append(
                    Command(shlex.quote(parts[0]), tuple(shlex.quote(p) for p in parts[1:]))
                )
        return commands

    @staticmethod
    def _item_text(x_item: ET.Element, tag: str, project: Project) -> Optional[str]:
        text = (x_item.text or "").strip()
        if not text:
            logging.warning(f"Ignoring empty <Item> in <{tag}> of project '{project.name}'")
            return None
        return text

    @staticmethod
    def _child_text(parent: ET.Element, tag: str, default: str) -> str:
        child = parent.find(tag)
        if child is None:
            return default
        return (child.text or "").strip() or default

    def _child_bool(self, parent: ET.Element, tag: str) -> bool:
        value = self._child_text(parent, tag, "false").lower()
        if value in self.TRUE_VALUES:
            return True
        if value in self.FALSE_VALUES:
            return False
        raise WorkspaceConfigError(f"<{tag}> must be true or false, got '{value}'")

    def _resolve_working_directory(self, value: str) -> str:
        path = Path(value)
        if not path.is_absolute():
            path = self.xml_path.resolve().parent / path
        return str(path.resolve())
