"""Enumerations for msglocator type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class LoadStatus(StrEnum):
    """Outcome of loading one asset (one base file for one locale).

    StrEnum provides automatic string conversion: str(LoadStatus.SUCCESS) == "success"
    """

    SUCCESS = "success"
    """Asset fetched and parsed."""

    NOT_FOUND = "not_found"
    """Asset does not exist for this locale."""

    ERROR = "error"
    """Transport failure or malformed asset content."""


class LocaleLoadStatus(StrEnum):
    """Aggregate outcome of loading every base file of one locale."""

    LOADED = "loaded"
    """Every base file loaded and was committed."""

    PARTIAL = "partial"
    """Merge mode: some base files failed, the others were committed."""

    FAILED = "failed"
    """Nothing was committed; the locale keeps its previous entries."""


class LoadVia(StrEnum):
    """Transport used by the default asset fetcher."""

    FILE_SYSTEM = "file_system"
    """Read assets from disk: <src>/<locale>/<base>.json"""

    HTTP = "http"
    """GET assets from a URL prefix: <src>/<locale>/<base>.json"""


class Gender(StrEnum):
    """Contextual variant selector (grammatical gender).

    Member values double as asset key suffixes: greeting_female.
    """

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Quantity(StrEnum):
    """Quantity variant selector.

    Member values double as asset key suffixes: items_one.
    """

    EMPTY = "empty"
    ONE = "one"
    MULTIPLE = "multiple"


__all__ = [
    "Gender",
    "LoadStatus",
    "LoadVia",
    "LocaleLoadStatus",
    "Quantity",
]
