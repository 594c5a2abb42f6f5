"""Configuration for MessageLocator.

Two frozen dataclasses mirror the recognized option names:

    LocatorOptions
        supported_locales   locales that have assets
        default_locale      locale every chain ends with
        fallbacks           locale -> ordered fallback locales
        assets              AssetOptions
    AssetOptions
        src                 directory or URL prefix holding <locale>/<base>.json
        base_file_names     asset stems loaded for every locale
        clean_unused        replace (True) or merge into (False) on reload
        load_via            LoadVia.FILE_SYSTEM or LoadVia.HTTP

Values are normalized to immutable containers and validated shallowly at
construction. Locale names are checked later, when FallbackGraph is built.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from msglocator.constants import DEFAULT_ASSETS_SRC
from msglocator.enums import LoadVia

__all__ = ["AssetOptions", "LocatorOptions", "parse_load_via"]


def parse_load_via(value: LoadVia | str) -> LoadVia:
    """Coerce a LoadVia member or name ('file_system', 'HTTP', ...).

    Raises:
        ValueError: If value names no transport
    """
    if isinstance(value, LoadVia):
        return value
    if isinstance(value, str):
        try:
            return LoadVia(value.strip().lower())
        except ValueError:
            pass
    choices = ", ".join(v.value for v in LoadVia)
    msg = f"load_via must be one of: {choices} (got {value!r})"
    raise ValueError(msg)


def _string_tuple(name: str, values: Iterable[str]) -> tuple[str, ...]:
    if isinstance(values, str):
        msg = f"{name} must be a sequence of strings, not a single string"
        raise ValueError(msg)
    result = tuple(values)
    for value in result:
        if not isinstance(value, str):
            msg = f"{name} entries must be strings (got {value!r})"
            raise ValueError(msg)
    return result


def _reject_unknown(section: str, data: Mapping[str, Any], known: frozenset[str]) -> None:
    unknown = sorted(set(data) - known)
    if unknown:
        msg = f"Unknown {section} option(s): {', '.join(unknown)}"
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class AssetOptions:
    """Where message assets live and how reloads treat old keys.

    Attributes:
        src: Root directory (file_system) or URL prefix (http)
        base_file_names: Asset stems loaded for every locale, in order.
            A stem containing '/' names a nested asset ('menus/main').
        clean_unused: Drop keys no longer present in a reloaded asset
        load_via: Transport of the default fetcher

    Example:
        >>> AssetOptions(src="res/lang", base_file_names=["_"], load_via="file_system")
        AssetOptions(src='res/lang', base_file_names=('_',), clean_unused=True, load_via=<LoadVia.FILE_SYSTEM: 'file_system'>)
    """

    src: str = DEFAULT_ASSETS_SRC
    base_file_names: tuple[str, ...] = ()
    clean_unused: bool = True
    load_via: LoadVia = LoadVia.HTTP

    def __post_init__(self) -> None:
        """Normalize containers and validate values.

        Raises:
            ValueError: If src is empty, base_file_names is not a sequence of
                strings, or load_via names no transport
        """
        if not isinstance(self.src, str) or not self.src:
            msg = "assets.src must be a non-empty string"
            raise ValueError(msg)
        object.__setattr__(
            self,
            "base_file_names",
            _string_tuple("assets.base_file_names", self.base_file_names),
        )
        if not isinstance(self.clean_unused, bool):
            msg = f"assets.clean_unused must be a bool (got {self.clean_unused!r})"
            raise ValueError(msg)
        object.__setattr__(self, "load_via", parse_load_via(self.load_via))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AssetOptions:
        """Build from a mapping using the option names as keys.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        _reject_unknown("assets", data, _ASSET_KEYS)
        return cls(**data)


_ASSET_KEYS = frozenset({"src", "base_file_names", "clean_unused", "load_via"})


@dataclass(frozen=True, slots=True)
class LocatorOptions:
    """Locale set, fallback mapping and asset options.

    The defaults match a single-locale English setup: supported ("en",),
    default "en", no fallbacks, assets under res/lang fetched over HTTP.

    Example:
        >>> options = LocatorOptions(
        ...     supported_locales=["en", "en-US", "pt-BR"],
        ...     default_locale="en-US",
        ...     fallbacks={"en-US": ["en"], "pt-BR": ["en-US"]},
        ...     assets=AssetOptions(base_file_names=["_"], load_via="file_system"),
        ... )
        >>> options.fallbacks["pt-BR"]
        ('en-US',)
    """

    supported_locales: tuple[str, ...] = ("en",)
    default_locale: str = "en"
    fallbacks: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    assets: AssetOptions = field(default_factory=AssetOptions)

    def __post_init__(self) -> None:
        """Normalize containers and validate shapes.

        Raises:
            ValueError: If a field has the wrong shape
        """
        supported = _string_tuple("supported_locales", self.supported_locales)
        if not supported:
            msg = "supported_locales cannot be empty"
            raise ValueError(msg)
        object.__setattr__(self, "supported_locales", supported)

        if not isinstance(self.default_locale, str) or not self.default_locale:
            msg = "default_locale must be a non-empty string"
            raise ValueError(msg)

        if not isinstance(self.fallbacks, Mapping):
            msg = f"fallbacks must be a mapping (got {type(self.fallbacks).__name__})"
            raise ValueError(msg)
        fallbacks = {
            str(source): _string_tuple(f"fallbacks[{source!r}]", targets)
            for source, targets in self.fallbacks.items()
        }
        object.__setattr__(self, "fallbacks", MappingProxyType(fallbacks))

        if isinstance(self.assets, Mapping):
            object.__setattr__(self, "assets", AssetOptions.from_mapping(self.assets))
        elif not isinstance(self.assets, AssetOptions):
            msg = f"assets must be AssetOptions or a mapping (got {type(self.assets).__name__})"
            raise ValueError(msg)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LocatorOptions:
        """Build from a nested mapping (e.g., parsed JSON or TOML).

        Example:
            >>> LocatorOptions.from_mapping({
            ...     "supported_locales": ["en-US"],
            ...     "default_locale": "en-US",
            ...     "assets": {"src": "res/lang", "base_file_names": ["_"]},
            ... }).assets.base_file_names
            ('_',)

        Raises:
            ValueError: On unknown keys (at either level) or invalid values
        """
        _reject_unknown("locator", data, _LOCATOR_KEYS)
        return cls(**data)


_LOCATOR_KEYS = frozenset({"supported_locales", "default_locale", "fallbacks", "assets"})
