"""Build status codes shared by builders, the orchestrator and the CLI."""

from enum import IntEnum


class BuildStatus(IntEnum):
    """Outcome of building a project or workspace.

    Values double as the process exit codes of the `cbuild` command.
    """

    SUCCESS = 0
    CONFIGURATION_PROCESSING_FAILED = -3  # bad/missing configuration or path variable
    BUILD_FAILED = -4  # a toolchain command exited non-zero

    @property
    def success(self) -> bool:
        return self is BuildStatus.SUCCESS
