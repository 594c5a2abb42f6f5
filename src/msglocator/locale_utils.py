"""Locale and country identifiers.

Parses language/region identifiers ("en", "en-US", "pt_br") into immutable,
canonical value objects and provides the Babel bridge used for display names.

Canonical form:
    language lower-cased, region upper-cased, joined by "-": "pt-BR".
    Both "-" and "_" are accepted as separators on input.

Babel is an optional dependency. Only display-name lookups need it; parsing,
comparison and hashing work without it.

Python 3.13+.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import TYPE_CHECKING

from msglocator.constants import MAX_LOCALE_CACHE_SIZE
from msglocator.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    MalformedCountryError,
    MalformedLocaleError,
)

if TYPE_CHECKING:
    from babel import Locale

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Value types
    "LocaleCode",
    "CountryCode",
    # Parsing
    "parse_locale",
    "parse_country",
    "ensure_locale",
    # Babel bridge
    "normalize_locale",
    "get_babel_locale",
    "clear_locale_cache",
    "BabelImportError",
]


class BabelImportError(ImportError):
    """Raised when Babel is required but not installed.

    Provides installation guidance to users.
    """

    def __init__(self) -> None:
        super().__init__(
            "Babel is required for locale display names. "
            "Install with: pip install msglocator[babel]"
        )


def _is_letters(segment: str) -> bool:
    """Check segment is non-empty ASCII letters only."""
    return bool(segment) and segment.isascii() and segment.isalpha()


@dataclass(frozen=True, slots=True)
class CountryCode:
    """Region identifier (ISO 3166 style), upper-case.

    Immutable, hashable. Independent of LocaleCode: use it when only a
    country is needed.

    Attributes:
        code: Upper-case region letters (e.g., 'BR', 'US')
    """

    code: str

    def __post_init__(self) -> None:
        """Reject non-canonical construction.

        Raises:
            MalformedCountryError: If code is not upper-case ASCII letters
        """
        if not _is_letters(self.code) or not self.code.isupper():
            msg = f"Country code must be upper-case letters, got {self.code!r}"
            raise MalformedCountryError(msg, input_value=self.code)

    def __str__(self) -> str:
        return self.code

    def to_string(self) -> str:
        """Return canonical string form."""
        return self.code

    def display_name(self, in_locale: LocaleCode | str = "en") -> str | None:
        """Return the CLDR name of this country.

        Args:
            in_locale: Locale whose language the name is written in

        Returns:
            Localized country name, or None if CLDR does not know it

        Raises:
            BabelImportError: If Babel is not installed

        Example:
            >>> parse_country("br").display_name("en")
            'Brazil'
        """
        babel_locale = _lookup_babel_locale(str(ensure_locale(in_locale)))
        if babel_locale is None:
            return None
        return babel_locale.territories.get(self.code)

    def alpha3(self) -> str | None:
        """Return the ISO 3166-1 alpha-3 code of this country.

        Returns:
            Three-letter code, or None if CLDR has no alpha-3 alias for it

        Raises:
            BabelImportError: If Babel is not installed

        Example:
            >>> parse_country("BR").alpha3()
            'BRA'
        """
        return _alpha3_by_region().get(self.code)


@dataclass(frozen=True, slots=True)
class LocaleCode:
    """Language with optional region.

    Immutable, hashable. Two LocaleCodes are equal iff their canonical
    strings are equal.

    Attributes:
        language: Lower-case language letters (e.g., 'en', 'pt')
        region: Upper-case region letters or None (e.g., 'US')
    """

    language: str
    region: str | None = None

    def __post_init__(self) -> None:
        """Reject non-canonical construction.

        Raises:
            MalformedLocaleError: If language is not lower-case ASCII letters
                or region is present but not upper-case ASCII letters
        """
        if not _is_letters(self.language) or not self.language.islower():
            msg = f"Language must be lower-case letters, got {self.language!r}"
            raise MalformedLocaleError(msg, input_value=self.language)
        if self.region is not None and (
            not _is_letters(self.region) or not self.region.isupper()
        ):
            msg = f"Region must be upper-case letters, got {self.region!r}"
            raise MalformedLocaleError(msg, input_value=self.region)

    def __str__(self) -> str:
        return self.to_string()

    def to_string(self) -> str:
        """Return canonical string form: 'en' or 'en-US'."""
        if self.region is None:
            return self.language
        return f"{self.language}-{self.region}"

    def country(self) -> CountryCode | None:
        """Return the region as a CountryCode, or None for language-only codes."""
        if self.region is None:
            return None
        return CountryCode(self.region)

    def display_name(self, in_locale: LocaleCode | str | None = None) -> str | None:
        """Return the CLDR name of this locale.

        Args:
            in_locale: Locale whose language the name is written in.
                Defaults to this locale itself (endonym).

        Returns:
            Localized name (e.g., 'português (Brasil)'), or None if CLDR
            does not know the locale

        Raises:
            BabelImportError: If Babel is not installed
        """
        babel_locale = _lookup_babel_locale(self.to_string())
        if babel_locale is None:
            return None
        target = (
            babel_locale
            if in_locale is None
            else _lookup_babel_locale(str(ensure_locale(in_locale)))
        )
        if target is None:
            return None
        return babel_locale.get_display_name(target)


def parse_locale(value: str) -> LocaleCode:
    """Parse a locale identifier.

    Args:
        value: Locale identifier, e.g. 'en', 'en-US', 'pt_br'

    Returns:
        Canonical LocaleCode

    Raises:
        MalformedLocaleError: If value is empty, has more than one separator,
            or a segment is empty or contains characters outside [A-Za-z]

    Example:
        >>> parse_locale("pt-br").to_string()
        'pt-BR'
        >>> parse_locale("EN_us") == parse_locale("en-US")
        True
    """
    if not value:
        diagnostic = Diagnostic(
            code=DiagnosticCode.LOCALE_EMPTY,
            message="Locale code cannot be empty",
        )
        raise MalformedLocaleError(diagnostic, input_value=value)

    normalized = value.replace("_", "-")
    parts = normalized.split("-")
    if len(parts) > 2:
        diagnostic = Diagnostic(
            code=DiagnosticCode.LOCALE_TOO_MANY_SEPARATORS,
            message=f"Locale code has more than one separator: {value!r}",
            hint="Use 'language' or 'language-REGION'",
        )
        raise MalformedLocaleError(diagnostic, input_value=value)

    if not all(_is_letters(part) for part in parts):
        diagnostic = Diagnostic(
            code=DiagnosticCode.LOCALE_INVALID_CHARACTERS,
            message=f"Locale code segments must be letters A-Z: {value!r}",
        )
        raise MalformedLocaleError(diagnostic, input_value=value)

    language = parts[0].lower()
    region = parts[1].upper() if len(parts) == 2 else None
    return LocaleCode(language, region)


def parse_country(value: str) -> CountryCode:
    """Parse a country (region) identifier.

    Args:
        value: Region letters, any case (e.g., 'br', 'US')

    Returns:
        Canonical CountryCode

    Raises:
        MalformedCountryError: If value is empty or contains characters
            outside [A-Za-z]
    """
    if not _is_letters(value):
        diagnostic = Diagnostic(
            code=DiagnosticCode.COUNTRY_INVALID,
            message=f"Country code must be letters A-Z: {value!r}",
        )
        raise MalformedCountryError(diagnostic, input_value=value)
    return CountryCode(value.upper())


def ensure_locale(value: LocaleCode | str) -> LocaleCode:
    """Return value as a LocaleCode, parsing strings.

    Raises:
        MalformedLocaleError: If value is a malformed string
    """
    if isinstance(value, LocaleCode):
        return value
    return parse_locale(value)


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    BCP-47 uses hyphens (en-US), while Babel/POSIX uses underscores (en_US).

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("en")
        'en'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        BabelImportError: If Babel is not installed
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    try:
        # Lazy import: Babel loads CLDR data at import time; defer until needed
        from babel import Locale  # noqa: PLC0415
    except ImportError as e:
        raise BabelImportError from e

    return Locale.parse(normalize_locale(locale_code))


def _lookup_babel_locale(locale_code: str) -> Locale | None:
    """Get a Babel Locale, or None if CLDR has no data for it."""
    try:
        from babel.core import UnknownLocaleError  # noqa: PLC0415
    except ImportError as e:
        raise BabelImportError from e

    try:
        return get_babel_locale(locale_code)
    except (UnknownLocaleError, ValueError):
        return None


# Withdrawn ISO 3166-1 alpha-3 codes that CLDR still aliases to a current region
_WITHDRAWN_ALPHA3 = frozenset(
    {"ANT", "BUR", "DDR", "FXX", "NTZ", "ROM", "SCG", "SUN", "TMP", "YMD", "YUG", "ZAR"}
)


@functools.lru_cache(maxsize=1)
def _alpha3_by_region() -> dict[str, str]:
    """Invert CLDR territory aliases into region -> alpha-3."""
    try:
        from babel.core import get_global  # noqa: PLC0415
    except ImportError as e:
        raise BabelImportError from e

    table: dict[str, str] = {}
    for alias, replacement in sorted(get_global("territory_aliases").items()):
        if (
            len(alias) == 3
            and alias.isalpha()
            and alias not in _WITHDRAWN_ALPHA3
            and len(replacement) == 1
        ):
            table.setdefault(replacement[0], alias)
    return table


def clear_locale_cache() -> None:
    """Clear the Babel Locale cache."""
    get_babel_locale.cache_clear()
