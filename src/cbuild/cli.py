"""
Command-line interface for cbuild.

This module provides the `cbuild` CLI tool:

    cbuild <workspace-file> --config <configuration-name>

Exit codes:
     0  success
    -1  malformed or missing arguments, or the workspace file is missing
    -2  workspace load failure
    -3  configuration or command-processing failure
    -4  build (toolchain) failure
"""

import argparse
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, NoReturn, Optional

from cbuild import __version__
from cbuild.build import BuildStatus, WorkspaceOrchestrator
from cbuild.cli_utils import BannerFormatter, ErrorFormatter, setup_logging
from cbuild.config import WorkspaceConfigError, WorkspaceLoader

EXIT_SUCCESS = 0
EXIT_INVALID_ARGUMENTS = -1
EXIT_LOAD_FAILED = -2

FAILURE_MESSAGES = {
    BuildStatus.CONFIGURATION_PROCESSING_FAILED: (
        "Configuration processing failed (please check that the workspace file is well defined)."
    ),
    BuildStatus.BUILD_FAILED: "Build failed (fix errors and try again).",
}


@dataclass
class BuildArgs:
    """Arguments for a build."""

    workspace_file: Path
    configuration: str
    verbose: bool = False


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with the cbuild exit code."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        sys.exit(EXIT_INVALID_ARGUMENTS)


def build_command(args: BuildArgs) -> None:
    """Build every project of a workspace.

    Examples:
        cbuild workspace.xml --config Debug
        cbuild samples/workspace.xml --config Release --verbose
    """
    BannerFormatter.print_banner(f"cbuild v{__version__}")
    print()

    if not args.workspace_file.is_file():
        ErrorFormatter.print_error(
            "Workspace file not found",
            f"'{args.workspace_file}' is not a file"
        )
        sys.exit(EXIT_INVALID_ARGUMENTS)

    try:
        try:
            workspace = WorkspaceLoader(args.workspace_file).load()
        except WorkspaceConfigError as e:
            ErrorFormatter.print_error("Failed to load workspace", str(e))
            sys.exit(EXIT_LOAD_FAILED)

        if args.verbose:
            print(f"Workspace: {workspace.name} ({len(workspace.projects)} project(s))")
            print(f"Working directory: {workspace.cwd}")
            print(f"Configuration: {args.configuration}")
            print()

        start_time = time.time()
        result = WorkspaceOrchestrator(workspace).build(args.configuration)
        build_time = time.time() - start_time

        if result.success:
            ErrorFormatter.print_success("Build successful!")
            print(f"Build time: {build_time:.2f}s")
            sys.exit(EXIT_SUCCESS)

        failed = [name for name, status in result.project_statuses.items() if not status.success]
        message = FAILURE_MESSAGES.get(result.status, result.status.name)
        ErrorFormatter.print_error(
            "Build failed!",
            f"{message}\nFailed project(s): {', '.join(failed)}"
        )
        sys.exit(int(result.status))

    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def main(argv: Optional[List[str]] = None) -> None:
    """cbuild - workspace-driven C/C++ build tool."""
    parser = ArgumentParser(
        prog="cbuild",
        description="cbuild - build C/C++ workspaces described in XML",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"cbuild {__version__}",
    )
    parser.add_argument(
        "workspace_file",
        type=Path,
        help="Workspace XML file",
    )
    parser.add_argument(
        "--config",
        required=True,
        dest="configuration",
        help="Build configuration name (e.g., Debug)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    parsed_args = parser.parse_args(argv)

    setup_logging(parsed_args.verbose)

    build_command(
        BuildArgs(
            workspace_file=parsed_args.workspace_file,
            configuration=parsed_args.configuration,
            verbose=parsed_args.verbose,
        )
    )


if __name__ == "__main__":
    main()
