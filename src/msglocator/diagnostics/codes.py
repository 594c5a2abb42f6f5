"""Diagnostic codes and data structures.

Defines error codes and the structured diagnostic carried by every
msglocator exception.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Locale and country parsing errors
        2000-2999: Configuration errors (fatal at construction)
        3000-3999: Asset loading errors (recorded in load reports)
    """

    # Locale parsing (1000-1999)
    LOCALE_EMPTY = 1001
    LOCALE_TOO_MANY_SEPARATORS = 1002
    LOCALE_INVALID_CHARACTERS = 1003
    COUNTRY_INVALID = 1004

    # Configuration (2000-2999)
    UNKNOWN_DEFAULT_LOCALE = 2001
    UNKNOWN_LOCALE_IN_FALLBACK = 2002

    # Loading (3000-3999)
    ASSET_NOT_FOUND = 3001
    ASSET_FETCH_FAILED = 3002
    ASSET_PARSE_FAILED = 3003
    ASSET_PATH_UNSAFE = 3004


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        locale_code: Locale involved, if any
        source_path: Asset path involved, if any
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    locale_code: str | None = None
    source_path: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like a compiler message.

        Example output:
            error[UNKNOWN_DEFAULT_LOCALE]: Default locale 'fr' is not supported
              = locale: fr
              = help: Add 'fr' to supported_locales

        Returns:
            Formatted error message
        """
        lines = [f"{self.severity}[{self.code.name}]: {self.message}"]
        if self.locale_code is not None:
            lines.append(f"  = locale: {self.locale_code}")
        if self.source_path is not None:
            lines.append(f"  --> {self.source_path}")
        if self.hint is not None:
            lines.append(f"  = help: {self.hint}")
        return "\n".join(lines)
