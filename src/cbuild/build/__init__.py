"""
Build system components for cbuild.

This module provides the build engine:
- Path variable substitution for library directories
- Source file discovery and compile command generation
- Project builders (console app, static library, shared library)
- Sequential command execution
- Workspace orchestration
"""

from .build_component_factory import BuildComponentFactory
from .build_status import BuildStatus
from .command_runner import CommandRunner
from .orchestrator import BuildResult, WorkspaceOrchestrator
from .path_variables import ResolveResult, set_variables
from .project_builder import (
    BuildConfigurationError,
    ConfigurationNotFoundError,
    ConsoleAppBuilder,
    PathVariableError,
    ProjectBuilder,
    SharedLibraryBuilder,
    StaticLibraryBuilder,
)
from .source_scanner import ScanResult, SourceScanner, SourceScannerError

__all__ = [
    "BuildComponentFactory",
    "BuildStatus",
    "CommandRunner",
    "BuildResult",
    "WorkspaceOrchestrator",
    "ResolveResult",
    "set_variables",
    "BuildConfigurationError",
    "ConfigurationNotFoundError",
    "PathVariableError",
    "ProjectBuilder",
    "ConsoleAppBuilder",
    "StaticLibraryBuilder",
    "SharedLibraryBuilder",
    "ScanResult",
    "SourceScanner",
    "SourceScannerError",
]
