"""
Source file discovery and compile command generation.

This module handles:
- Recursively scanning project source directories for .c/.cpp files
- Bounding the recursion depth so cyclic or pathological trees terminate
- Deriving one compile command per discovered source from a base command
- Mapping every source onto a flat intermediate (object file) directory
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List

from ..config.workspace import Command

SOURCE_EXTENSIONS = frozenset({".c", ".cpp"})
MAX_SCAN_DEPTH = 8
CWD_ALIASES = frozenset({".", "./"})


@dataclass
class ScanResult:
    """Compile commands produced by a scan plus the object files they write."""

    commands: List[Command] = field(default_factory=list)
    object_sources: Dict[str, Path] = field(default_factory=dict)  # object path -> last source

    @property
    def output_files(self) -> List[str]:
        """Object file paths, one per distinct path, in first-seen order."""
        return list(self.object_sources)


class SourceScanner:
    """
    Scans source directories and produces per-file compile commands.

    Files directly inside a source root are at depth 0, files in its
    subdirectories at depth 1, and so on up to MAX_SCAN_DEPTH. Entries are
    visited in name order.

    All object files land in the same flat directory as `<stem>.o`. Two
    sources sharing a stem therefore share an object path; the later one
    wins the entry in `ScanResult.object_sources`.
    """

    def __init__(self, cwd: Path, max_depth: int = MAX_SCAN_DEPTH):
        """
        Initialize source scanner.

        Args:
            cwd: Workspace working directory that source roots are relative to
            max_depth: Deepest subdirectory level whose files are compiled
        """
        if max_depth < 0:
            raise SourceScannerError(f"max_depth must be >= 0, got {max_depth}")
        self.cwd = Path(cwd)
        self.max_depth = max_depth

    def scan(
        self,
        source_dirs: Iterable[str],
        base_command: Command,
        object_dir: Path
    ) -> ScanResult:
        """
        Scan all source roots and build compile commands.

        Args:
            source_dirs: Source roots ("." / "./" for the working directory)
            base_command: Compiler invocation template
            object_dir: Directory receiving the object files

        Returns:
            ScanResult with one command per discovered source
        """
        result = ScanResult()
        for source_dir in source_dirs:
            root = self.resolve_root(source_dir)
            if not root.is_dir():
                logging.warning(f"Source directory not found, skipping: {root}")
                continue
            sources: List[Path] = []
            self._scan_directory(root, sources, 0)
            for source in sources:
                self._add_compile_command(result, source, base_command, Path(object_dir))
        return result

    def resolve_root(self, source_dir: str) -> Path:
        """Map a source directory entry onto a path below the working directory."""
        if source_dir in CWD_ALIASES:
            return self.cwd
        return self.cwd / source_dir

    def _scan_directory(self, directory: Path, sources: List[Path], depth: int) -> None:
        """
        Collect source files below `directory` into `sources`.

        Args:
            directory: Directory to list
            sources: Accumulator for discovered source files
            depth: Nesting level of `directory` below its source root
        """
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logging.warning(f"Cannot list {directory}: {e}")
            return

        for entry in entries:
            if entry.is_file():
                if entry.suffix in SOURCE_EXTENSIONS:
                    sources.append(entry)
            elif entry.is_dir() and depth < self.max_depth:
                self._scan_directory(entry, sources, depth + 1)

    @staticmethod
    def _add_compile_command(
        result: ScanResult,
        source: Path,
        base_command: Command,
        object_dir: Path
    ) -> None:
        object_file = str(object_dir / f"{source.stem}.o")

        previous = result.object_sources.get(object_file)
        if previous is not None:
            logging.warning(
                f"Object file collision: {source} and {previous} both compile to {object_file}"
            )

        result.commands.append(base_command.with_args("-c", str(source), "-o", object_file))
        result.object_sources[object_file] = source


class SourceScannerError(Exception):
    """Raised when source scanning is misconfigured."""
    pass
