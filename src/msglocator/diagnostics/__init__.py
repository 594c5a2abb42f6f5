"""Diagnostic system for msglocator errors.

Provides structured error diagnostics with codes and hints.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    ConfigurationError,
    FetchError,
    MalformedCountryError,
    MalformedLocaleError,
    MessageLocatorError,
    ParseError,
    UnknownDefaultLocaleError,
    UnknownLocaleInFallbackError,
)

__all__ = [
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticCode",
    "FetchError",
    "MalformedCountryError",
    "MalformedLocaleError",
    "MessageLocatorError",
    "ParseError",
    "UnknownDefaultLocaleError",
    "UnknownLocaleInFallbackError",
]
