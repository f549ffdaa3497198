"""Configuration parsing modules for cbuild."""

from .workspace import (
    BuildOutputKind,
    Command,
    Configuration,
    Project,
    Workspace,
)
from .workspace_loader import WorkspaceConfigError, WorkspaceLoader

__all__ = [
    "BuildOutputKind",
    "Command",
    "Configuration",
    "Project",
    "Workspace",
    "WorkspaceLoader",
    "WorkspaceConfigError",
]
