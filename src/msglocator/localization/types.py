"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the localization package
and by user code when annotating MessageLocator call sites.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Mapping
from decimal import Decimal

from msglocator.enums import Gender, Quantity
from msglocator.locale_utils import LocaleCode

__all__ = [
    "BaseFileName",
    "FallbackChain",
    "FormatSelector",
    "LocaleTag",
    "MessageAsset",
    "MessageKey",
]

type MessageKey = str
"""Dotted message key: base file name then message name (e.g., '_.message_id')."""

type LocaleTag = str
"""Locale identifier as written in configuration (e.g., 'en-US', 'pt_BR')."""

type BaseFileName = str
"""Asset file stem shared across locales (e.g., '_', 'menus/main')."""

type MessageAsset = dict[str, str]
"""Flat message-name to raw-template mapping parsed from one asset."""

type FallbackChain = tuple[LocaleCode, ...]
"""Ordered, duplicate-free lookup sequence for one requested locale."""

type FormatSelector = (
    Gender | Quantity | str | int | float | Decimal | Mapping[str, object]
)
"""One argument to get_formatted: a gender, a quantity, or named parameters."""
