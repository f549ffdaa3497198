"""cbuild - workspace-driven C/C++ build tool."""

__version__ = "0.1.0"
