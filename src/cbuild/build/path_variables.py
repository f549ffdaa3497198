"""Path variable substitution.

Library directories may reference configuration-scoped values with
`$(Name)` markers, e.g. `bin/$(Configuration)/lib`. This module resolves
those markers for the active configuration.

Design:
    - Fixed allow-list of variable names
    - Paths without a `$` are returned untouched after a single scan
    - Failures are reported through the result, never raised
"""

import logging
import re
from dataclasses import dataclass

RECOGNIZED_VARIABLES = frozenset({"Configuration"})

# Every `$` must open a well-formed marker: `$(` name `)`
_MARKER_RE = re.compile(r"\$(\((\w+)\))?")


class MalformedVariableError(ValueError):
    """Raised internally when a path contains a malformed variable marker."""
    pass


@dataclass(frozen=True)
class ResolveResult:
    """Outcome of a substitution: resolved path plus success flag."""

    value: str
    succeeded: bool

    def __bool__(self) -> bool:
        return self.succeeded


def set_variables(path: str, name: str, value: str) -> ResolveResult:
    """Replace every `$(name)` marker in `path` with `value`.

    Markers naming other variables are left as-is.

    Args:
        path: Path string possibly containing `$(...)` markers
        name: Variable name to substitute (must be recognized)
        value: Replacement text

    Returns:
        ResolveResult with the resolved path, or ("", False) if the variable
        name is not recognized or the path could not be processed
    """
    if name not in RECOGNIZED_VARIABLES:
        logging.debug(f"Unrecognized path variable '{name}'")
        return ResolveResult("", False)

    if "$" not in path:
        return ResolveResult(path, True)

    try:
        return ResolveResult(_substitute(path, name, value), True)
    except (MalformedVariableError, re.error) as e:
        logging.warning(f"Failed to resolve $({name}) in '{path}': {e}")
        return ResolveResult("", False)


def _substitute(path: str, name: str, value: str) -> str:
    def replace(match: "re.Match[str]") -> str:
        if match.group(1) is None:
            raise MalformedVariableError(f"malformed variable marker at offset {match.start()}")
        if match.group(2) == name:
            return value
        return match.group(0)

    return _MARKER_RE.sub(replace, path)
