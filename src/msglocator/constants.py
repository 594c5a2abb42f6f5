"""Shared constants for msglocator.

This module provides centralized configuration constants used across the
locale, loading and resolution layers. Placing constants here avoids circular
imports and provides a single source of truth.

Constants are grouped by domain:
- Cache limits: Memory bounds for caching subsystems
- Asset defaults: Where and how message assets are located
- Fallback strings: What callers see when a message cannot be resolved

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Cache limits
    "MAX_LOCALE_CACHE_SIZE",
    # Asset defaults
    "DEFAULT_ASSETS_SRC",
    "DEFAULT_ASSET_EXTENSION",
    "DEFAULT_HTTP_TIMEOUT",
    "KEY_SEPARATOR",
    "VARIANT_SEPARATOR",
    # Fallback strings
    "FALLBACK_MISSING_MESSAGE",
]

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum number of Babel Locale objects kept by get_babel_locale().
# Applications rarely use more than a few dozen locales.
MAX_LOCALE_CACHE_SIZE: int = 128

# ============================================================================
# ASSET DEFAULTS
# ============================================================================

# Root under which per-locale asset directories live: <src>/<locale>/<base>.json
DEFAULT_ASSETS_SRC: str = "res/lang"

DEFAULT_ASSET_EXTENSION: str = ".json"

# Seconds before an HTTP asset request is abandoned.
DEFAULT_HTTP_TIMEOUT: float = 10.0

# Joins base file name and nested message names: "_.message_id", "menus.main.open"
KEY_SEPARATOR: str = "."

# Joins a message stem and its variant suffix: "greeting_female", "items_one"
VARIANT_SEPARATOR: str = "_"

# ============================================================================
# FALLBACK STRINGS
# ============================================================================

# Rendered when no locale in the chain has the message.
# Format with .format(key=...); the braces keep the gap visible in UIs.
FALLBACK_MISSING_MESSAGE: str = "{{{key}}}"  # e.g., {_.message_id}
