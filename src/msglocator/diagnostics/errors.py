"""msglocator exception hierarchy with structured diagnostics.

All exceptions optionally store a Diagnostic for rich error information.

Hierarchy:
    MessageLocatorError
    ├─ MalformedLocaleError (also ValueError)
    ├─ MalformedCountryError (also ValueError)
    ├─ ConfigurationError
    │  ├─ UnknownDefaultLocaleError
    │  └─ UnknownLocaleInFallbackError
    ├─ FetchError
    └─ ParseError

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode


class MessageLocatorError(Exception):
    """Base exception for all msglocator errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize MessageLocatorError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class MalformedLocaleError(MessageLocatorError, ValueError):
    """Locale identifier cannot be parsed.

    Raised for empty input, more than one separator, or segments containing
    characters outside [A-Za-z].

    Attributes:
        input_value: The string that failed to parse
    """

    def __init__(self, message: str | Diagnostic, *, input_value: str = "") -> None:
        super().__init__(message)
        self.input_value = input_value


class MalformedCountryError(MessageLocatorError, ValueError):
    """Country (region) identifier cannot be parsed.

    Attributes:
        input_value: The string that failed to parse
    """

    def __init__(self, message: str | Diagnostic, *, input_value: str = "") -> None:
        super().__init__(message)
        self.input_value = input_value


class ConfigurationError(MessageLocatorError):
    """Locator configuration is inconsistent. Fatal at construction."""


class UnknownDefaultLocaleError(ConfigurationError):
    """Default locale is not one of the supported locales.

    Attributes:
        locale_code: Canonical form of the offending default locale
    """

    def __init__(self, locale_code: str) -> None:
        diagnostic = Diagnostic(
            code=DiagnosticCode.UNKNOWN_DEFAULT_LOCALE,
            message=f"Default locale '{locale_code}' is not a supported locale",
            hint=f"Add '{locale_code}' to supported_locales",
            locale_code=locale_code,
        )
        super().__init__(diagnostic)
        self.locale_code = locale_code


class UnknownLocaleInFallbackError(ConfigurationError):
    """Fallback mapping references a locale that is not supported.

    Attributes:
        source: Locale whose fallback list was being read
        target: The unsupported locale (equals source for an unsupported key)
    """

    def __init__(self, source: str, target: str) -> None:
        if source == target:
            message = f"Fallback list declared for unsupported locale '{source}'"
        else:
            message = f"Fallback of '{source}' references unsupported locale '{target}'"
        diagnostic = Diagnostic(
            code=DiagnosticCode.UNKNOWN_LOCALE_IN_FALLBACK,
            message=message,
            hint=f"Add '{target}' to supported_locales or remove it from fallbacks",
            locale_code=target,
        )
        super().__init__(diagnostic)
        self.source = source
        self.target = target


class FetchError(MessageLocatorError):
    """Asset bytes could not be fetched.

    Recorded in LoadReport; never propagated out of a load.

    Attributes:
        locale_code: Locale path component that was requested
        base_file_name: Base file name that was requested
        source_path: Human-readable path or URL of the asset
        not_found: True when the asset does not exist (as opposed to a
            transport or permission failure)
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        locale_code: str = "",
        base_file_name: str = "",
        source_path: str = "",
        not_found: bool = False,
    ) -> None:
        super().__init__(message)
        self.locale_code = locale_code
        self.base_file_name = base_file_name
        self.source_path = source_path
        self.not_found = not_found


class ParseError(MessageLocatorError):
    """Asset bytes are not a valid message asset.

    Recorded in LoadReport; never propagated out of a load.
    """


__all__ = [
    "ConfigurationError",
    "FetchError",
    "MalformedCountryError",
    "MalformedLocaleError",
    "MessageLocatorError",
    "ParseError",
    "UnknownDefaultLocaleError",
    "UnknownLocaleInFallbackError",
]
