"""Multi-locale message lookup behind one object.

MessageLocator wires the pieces together from a LocatorOptions:

    FallbackGraph   built once from supported/default/fallbacks
    MessageStore    one owned instance; loads go through it
    AssetFetcher    PathAssetFetcher or HttpAssetFetcher per assets.load_via,
                    unless one is injected
    MessageResolver bound to the current locale

Lifecycle:
    locator = MessageLocator(options)      # nothing loaded yet
    locator.update_locale("pt-BR")         # loads pt-BR and its chain
    locator.get_formatted("_.greeting", [{"name": "Ana"}])

Before the first successful update_locale(), lookups use the default locale's
chain and current_locale is None. A failed update_locale() keeps whatever
was current before.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from msglocator.constants import FALLBACK_MISSING_MESSAGE
from msglocator.enums import LoadVia
from msglocator.locale_utils import LocaleCode, ensure_locale
from msglocator.localization.fallback import FallbackGraph
from msglocator.localization.loading import (
    AssetFetcher,
    AssetParser,
    HttpAssetFetcher,
    LoadReport,
    PathAssetFetcher,
)
from msglocator.localization.options import LocatorOptions
from msglocator.localization.resolver import FallbackInfo, MessageResolver
from msglocator.localization.store import MessageStore

if TYPE_CHECKING:
    from msglocator.localization.types import (
        FallbackChain,
        FormatSelector,
        LocaleTag,
        MessageKey,
    )

__all__ = ["MessageLocator", "default_fetcher"]

logger = logging.getLogger(__name__)


def default_fetcher(options: LocatorOptions) -> AssetFetcher:
    """Fetcher matching options.assets.load_via."""
    match options.assets.load_via:
        case LoadVia.FILE_SYSTEM:
            return PathAssetFetcher(options.assets.src)
        case LoadVia.HTTP:
            return HttpAssetFetcher(options.assets.src)


class MessageLocator:
    """Locale-aware message lookup with fallback chains and asset loading.

    Thread Safety:
        Lookups may run concurrently with each other and with loads.
        update_locale() swaps the current locale and its resolver as one
        step; concurrent lookups see either the old or the new locale.

    Example:
        >>> options = LocatorOptions(
        ...     supported_locales=["en-US"],
        ...     default_locale="en-US",
        ...     assets=AssetOptions(
        ...         src="tests/res/lang", base_file_names=["_"], load_via="file_system"
        ...     ),
        ... )
        >>> locator = MessageLocator(options)
        >>> locator.update_locale("en-US").succeeded
        True
        >>> locator.get("_.message_id")
        'Some message'
    """

    __slots__ = (
        "_current_locale",
        "_fetcher",
        "_graph",
        "_options",
        "_resolver",
        "_state_lock",
        "_store",
    )

    def __init__(
        self,
        options: LocatorOptions | None = None,
        *,
        fetcher: AssetFetcher | None = None,
        parser: AssetParser | None = None,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
        missing_message_format: str = FALLBACK_MISSING_MESSAGE,
    ) -> None:
        """Build the fallback graph and an empty store.

        Args:
            options: Configuration (default: LocatorOptions())
            fetcher: Asset fetcher (default: chosen by assets.load_via)
            parser: Asset parser (default: JsonAssetParser)
            on_fallback: Called when a message comes from a fallback locale
            missing_message_format: Sentinel template with a {key} field

        Raises:
            MalformedLocaleError: If a configured locale name cannot be parsed
            UnknownDefaultLocaleError: If the default locale is not supported
            UnknownLocaleInFallbackError: If a fallback names an unsupported
                locale
            ValueError: If the base file names or missing_message_format are
                invalid
        """
        self._options = options if options is not None else LocatorOptions()
        self._graph = FallbackGraph(
            self._options.supported_locales,
            self._options.default_locale,
            self._options.fallbacks,
        )
        self._store = MessageStore(
            self._options.supported_locales,
            self._options.assets.base_file_names,
            parser=parser,
            clean_unused=self._options.assets.clean_unused,
        )
        self._fetcher = fetcher if fetcher is not None else default_fetcher(self._options)
        self._resolver = MessageResolver(
            self._graph,
            self._store,
            missing_message_format=missing_message_format,
            on_fallback=on_fallback,
        )
        self._current_locale: LocaleCode | None = None
        self._state_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Configuration and state
    # ------------------------------------------------------------------

    @property
    def options(self) -> LocatorOptions:
        """Configuration this locator was built from."""
        return self._options

    @property
    def graph(self) -> FallbackGraph:
        """Fallback graph built from the options."""
        return self._graph

    @property
    def store(self) -> MessageStore:
        """Store holding every loaded locale."""
        return self._store

    @property
    def resolver(self) -> MessageResolver:
        """Resolver bound to the current locale."""
        return self._resolver

    @property
    def fetcher(self) -> AssetFetcher:
        """Fetcher used by load() and update_locale()."""
        return self._fetcher

    @property
    def supported_locales(self) -> frozenset[LocaleCode]:
        """Locales given in the options."""
        return self._graph.supported_locales

    def supports_locale(self, locale: LocaleTag | LocaleCode) -> bool:
        """Check whether locale is supported (malformed names are not)."""
        return self._graph.supports(locale)

    @property
    def default_locale(self) -> LocaleCode:
        """Locale every chain ends with."""
        return self._graph.default_locale

    @property
    def current_locale(self) -> LocaleCode | None:
        """Locale made current by the last successful update_locale()."""
        return self._current_locale

    def current_locale_seq(self) -> FallbackChain:
        """Current locale followed by its fallbacks; empty if none is current."""
        current = self._current_locale
        if current is None:
            return ()
        return self._graph.resolve(current)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, locales: Iterable[LocaleTag | LocaleCode] | None = None) -> LoadReport:
        """Load assets into the store without changing the current locale.

        Args:
            locales: Locales to (re)load; None loads every supported locale

        Raises:
            ValueError: If a locale is not supported
        """
        return self._store.load(locales, via=self._fetcher)

    async def load_async(
        self, locales: Iterable[LocaleTag | LocaleCode] | None = None
    ) -> LoadReport:
        """Awaitable load(); cancelling it leaves the store unchanged."""
        return await self._store.load_async(locales, via=self._fetcher)

    def _chain_to_load(self, locale: LocaleTag | LocaleCode) -> FallbackChain:
        code = ensure_locale(locale)
        if not self._graph.supports(code):
            msg = f"Unsupported locale: {code}"
            raise ValueError(msg)
        return self._graph.resolve(code)

    def _activate(self, locale: LocaleCode, report: LoadReport) -> None:
        if not report.succeeded:
            logger.warning(
                "Locale %s not activated; failed: %s, partial: %s",
                locale,
                [str(c) for c in report.failed_locales],
                [str(c) for c in report.partial_locales],
            )
            return
        with self._state_lock:
            self._resolver = self._resolver.with_locale(locale)
            self._current_locale = locale
        logger.info("Current locale is now %s", locale)

    def update_locale(self, locale: LocaleTag | LocaleCode) -> LoadReport:
        """Load a locale and its fallback chain, then make it current.

        The locale becomes current only if every asset of every locale in
        its chain loaded.

        Args:
            locale: Locale to switch to

        Returns:
            LoadReport of the chain load

        Raises:
            MalformedLocaleError: If locale cannot be parsed
            ValueError: If locale is not supported
        """
        chain = self._chain_to_load(locale)
        report = self._store.load(chain, via=self._fetcher)
        self._activate(chain[0], report)
        return report

    async def update_locale_async(self, locale: LocaleTag | LocaleCode) -> LoadReport:
        """Awaitable update_locale(); cancellation changes nothing."""
        chain = self._chain_to_load(locale)
        report = await self._store.load_async(chain, via=self._fetcher)
        self._activate(chain[0], report)
        return report

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, key: MessageKey) -> str:
        """Raw template for key in the current locale's chain."""
        return self._resolver.get(key)

    def get_formatted(
        self,
        key: MessageKey,
        selectors: Iterable[FormatSelector] | FormatSelector = (),
    ) -> str:
        """Variant-selected, parameter-substituted message for key.

        See MessageResolver.get_formatted for the selector rules.
        """
        return self._resolver.get_formatted(key, selectors)

    def has_message(self, key: MessageKey) -> bool:
        """Check whether the current locale's chain has key."""
        return self._resolver.has_message(key)

    def __repr__(self) -> str:
        current = self._current_locale
        return (
            f"MessageLocator(current={current!s}, "
            f"default={self.default_locale!s}, "
            f"loaded={len(self._store.loaded_locales)})"
        )
