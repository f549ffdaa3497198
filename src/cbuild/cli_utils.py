"""CLI utility functions for cbuild.

This module provides common utilities used by the command line including:
- Logging setup
- Error handling and formatting
- Banner formatting
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_handler: Optional[logging.Handler] = None


def setup_logging(verbose: bool = False) -> None:
    """Setup logging for the command line.

    Installs a single stderr handler on the root logger. Calling this again
    replaces the handler instead of adding another one.

    Args:
        verbose: Log DEBUG messages instead of only warnings and errors
    """
    global _handler

    logger = logging.getLogger()
    level = logging.DEBUG if verbose else logging.WARNING
    logger.setLevel(level)

    if _handler is not None:
        logger.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setLevel(level)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Build failed")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        if message:
            print()
            print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        """Print formatted success message."""
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        """Print formatted warning message."""
        print()
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Build interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)


class BannerFormatter:
    """Formats and displays banner messages with borders."""

    DEFAULT_WIDTH = 80
    DEFAULT_BORDER_CHAR = "="

    @staticmethod
    def format_banner(
        message: str,
        width: int = DEFAULT_WIDTH,
        border_char: str = DEFAULT_BORDER_CHAR,
        center: bool = True,
    ) -> str:
        """Format a banner message with top and bottom borders.

        Args:
            message: The message to display (can be multi-line)
            width: Width of the banner in characters (default: 80)
            border_char: Character to use for borders (default: "=")
            center: Whether to center text (default: True)

        Returns:
            Formatted banner string with borders
        """
        border = border_char * width
        formatted_lines = [border]

        for line in message.split("\n"):
            if center:
                padding = max(width - len(line), 0) // 2
                formatted_lines.append(" " * padding + line)
            else:
                formatted_lines.append("  " + line)

        formatted_lines.append(border)
        return "\n".join(formatted_lines)

    @staticmethod
    def print_banner(
        message: str,
        width: int = DEFAULT_WIDTH,
        border_char: str = DEFAULT_BORDER_CHAR,
        center: bool = True,
    ) -> None:
        """Print a banner message with top and bottom borders."""
        print(BannerFormatter.format_banner(message, width=width, border_char=border_char, center=center))
