"""msglocator - multi-locale message resolution with fallback chains.

Locates the best translated string for a message key across a set of
supported locales, following per-locale fallback chains, and renders it with
contextual (gender) or quantity variants and $name parameter substitution.
Message assets are JSON files fetched from disk or over HTTP.

Public API:
    MessageLocator - Configured facade: load locales, switch locale, look up
    LocatorOptions / AssetOptions - Frozen configuration
    FallbackGraph - Validated fallback adjacency and chain resolution
    MessageStore - Per-locale message storage with clean/merge reloads
    MessageResolver - get / get_formatted against a store
    LocaleCode / parse_locale - Parsed locale identifiers
    Gender / Quantity - Variant selectors

Exceptions:
    MessageLocatorError - Base exception class
    MalformedLocaleError / MalformedCountryError - Unparseable identifiers
    ConfigurationError - Invalid locale configuration
    FetchError / ParseError - Asset failures (recorded in LoadReport)

Submodules:
    msglocator.localization - Store, resolver, loaders, options, facade
    msglocator.diagnostics - Error types and diagnostic codes
    msglocator.locale_utils - LocaleCode, CountryCode, Babel display names
"""

# Essential Public API - Minimal exports for clean namespace
from .diagnostics import (
    ConfigurationError,
    FetchError,
    MalformedCountryError,
    MalformedLocaleError,
    MessageLocatorError,
    ParseError,
)
from .enums import Gender, LoadVia, Quantity
from .locale_utils import CountryCode, LocaleCode, parse_country, parse_locale
from .localization import (
    AssetOptions,
    FallbackGraph,
    LoadReport,
    LocatorOptions,
    MessageLocator,
    MessageResolver,
    MessageStore,
)

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("msglocator")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "AssetOptions",
    "ConfigurationError",
    "CountryCode",
    "FallbackGraph",
    "FetchError",
    "Gender",
    "LoadReport",
    "LoadVia",
    "LocaleCode",
    "LocatorOptions",
    "MalformedCountryError",
    "MalformedLocaleError",
    "MessageLocator",
    "MessageLocatorError",
    "MessageResolver",
    "MessageStore",
    "ParseError",
    "Quantity",
    "__version__",
    "parse_country",
    "parse_locale",
]
