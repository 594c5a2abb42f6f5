"""Multi-locale message lookup package for MessageLocator.

Provides the full localization stack: type aliases, fallback graph, asset
loading, the message store, the resolver and the MessageLocator facade.

Submodules:
    types        - PEP 695 type aliases (MessageKey, LocaleTag, BaseFileName, ...)
    fallback     - FallbackGraph (validated fallback adjacency, chain resolution)
    loading      - AssetFetcher/AssetParser protocols, PathAssetFetcher,
                   HttpAssetFetcher, JsonAssetParser, AssetLoadResult, LoadReport
    store        - MessageStore (staged, atomic per-locale commits)
    resolver     - MessageResolver, FallbackInfo, variant selection, substitution
    options      - LocatorOptions, AssetOptions
    orchestrator - MessageLocator (one object wiring it all together)

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from msglocator.enums import LoadStatus, LocaleLoadStatus, LoadVia
from msglocator.localization.fallback import FallbackGraph
from msglocator.localization.loading import (
    AssetFetcher,
    AssetLoadResult,
    AssetParser,
    HttpAssetFetcher,
    JsonAssetParser,
    LoadReport,
    LocaleLoadOutcome,
    PathAssetFetcher,
)
from msglocator.localization.options import AssetOptions, LocatorOptions
from msglocator.localization.orchestrator import MessageLocator
from msglocator.localization.resolver import FallbackInfo, MessageResolver
from msglocator.localization.store import MessageStore
from msglocator.localization.types import (
    BaseFileName,
    FallbackChain,
    FormatSelector,
    LocaleTag,
    MessageAsset,
    MessageKey,
)

__all__ = [
    # Facade and configuration
    "MessageLocator",
    "LocatorOptions",
    "AssetOptions",
    "LoadVia",
    # Core components
    "FallbackGraph",
    "MessageStore",
    "MessageResolver",
    # Fetcher/parser protocols and implementations
    "AssetFetcher",
    "AssetParser",
    "PathAssetFetcher",
    "HttpAssetFetcher",
    "JsonAssetParser",
    # Load tracking
    "LoadStatus",
    "LocaleLoadStatus",
    "AssetLoadResult",
    "LocaleLoadOutcome",
    "LoadReport",
    # Fallback observability
    "FallbackInfo",
    # Type aliases for user code type annotations
    "BaseFileName",
    "FallbackChain",
    "FormatSelector",
    "LocaleTag",
    "MessageAsset",
    "MessageKey",
]
