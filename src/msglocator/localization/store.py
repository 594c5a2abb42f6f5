"""Per-locale message store with staged, atomic commits.

The store owns ``dict[LocaleCode, dict[MessageKey, str]]``. It is mutated only
by the commit at the end of a load; lookups never see a half-applied load.

Load pipeline per locale:
    stage   - fetch + parse every base file; no shared state touched
    commit  - build the locale's new mapping and swap it in under the
              write side of the store's RWLock

Commit semantics:
    clean mode (clean_unused=True)
        All base files loaded -> the staged union replaces the locale's
        entries, so keys removed from an asset disappear. Any failure ->
        nothing is written; the locale keeps its last-known-good entries.
    merge mode (clean_unused=False)
        Keys of every base file that loaded are overlaid on the existing
        entries; failed base files leave their previous keys in place.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
import weakref
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from msglocator.constants import KEY_SEPARATOR
from msglocator.diagnostics import FetchError, ParseError
from msglocator.enums import LoadStatus, LocaleLoadStatus
from msglocator.locale_utils import LocaleCode, ensure_locale
from msglocator.localization.loading import (
    AssetFetcher,
    AssetLoadResult,
    AssetParser,
    JsonAssetParser,
    LoadReport,
    LocaleLoadOutcome,
)
from msglocator.localization.types import BaseFileName, LocaleTag, MessageAsset, MessageKey
from msglocator.runtime.rwlock import RWLock

__all__ = ["MessageStore"]

logger = logging.getLogger(__name__)

type _Staged = list[tuple[AssetLoadResult, MessageAsset | None]]


def _key_prefix(base_file_name: BaseFileName) -> str:
    """Key prefix for a base file: 'menus/main' -> 'menus.main'."""
    return base_file_name.replace("/", KEY_SEPARATOR)


class MessageStore:
    """Holds the merged messages of every loaded locale.

    Thread Safety:
        Lookups take the read side of an RWLock and may run concurrently
        with each other and with in-flight loads. Commits take the write side.
        Loads of the same locale are serialized (per-locale threading.Lock for
        load(), per-locale asyncio.Lock for load_async()); loads of disjoint
        locales proceed independently.

    Example:
        >>> store = MessageStore(["en-US"], ["_"])
        >>> report = store.load(via=PathAssetFetcher("res/lang"))
        >>> store.lookup(parse_locale("en-US"), "_.message_id")
        'Some message'
    """

    __slots__ = (
        "_async_locks",
        "_base_file_names",
        "_clean_unused",
        "_entries",
        "_locale_locks",
        "_lock",
        "_parser",
        "_path_components",
        "_prefixes",
    )

    def __init__(
        self,
        supported_locales: Iterable[LocaleTag | LocaleCode],
        base_file_names: Sequence[BaseFileName],
        *,
        parser: AssetParser | None = None,
        clean_unused: bool = True,
    ) -> None:
        """Initialize an empty store.

        Args:
            supported_locales: Locales that may be loaded. The spelling given
                here is passed to the fetcher as the locale path component.
            base_file_names: Asset stems loaded for every locale, in order
            parser: Asset parser (default: JsonAssetParser)
            clean_unused: Replace (True) or merge into (False) a locale's
                entries on reload

        Raises:
            MalformedLocaleError: If a supported locale cannot be parsed
            ValueError: If a base file name is empty or listed twice
        """
        path_components: dict[LocaleCode, str] = {}
        for raw in supported_locales:
            path_components.setdefault(ensure_locale(raw), str(raw))
        self._path_components: Mapping[LocaleCode, str] = MappingProxyType(path_components)

        names = tuple(base_file_names)
        if any(not name for name in names):
            msg = "Base file names cannot be empty"
            raise ValueError(msg)
        if len(set(names)) != len(names):
            msg = f"Duplicate base file names: {names}"
            raise ValueError(msg)
        self._base_file_names: tuple[BaseFileName, ...] = names
        # Longest prefix first so 'menus/main' wins over 'menus' in split_key
        self._prefixes: tuple[tuple[str, BaseFileName], ...] = tuple(
            sorted(((_key_prefix(n), n) for n in names), key=lambda p: -len(p[0]))
        )

        self._parser: AssetParser = parser if parser is not None else JsonAssetParser()
        self._clean_unused = clean_unused

        self._entries: dict[LocaleCode, dict[MessageKey, str]] = {}
        self._lock = RWLock()
        # Fixed at construction so lock lookup never races
        self._locale_locks: Mapping[LocaleCode, threading.Lock] = MappingProxyType(
            {locale: threading.Lock() for locale in path_components}
        )
        # asyncio.Lock binds to one event loop; keep one set per loop
        self._async_locks: weakref.WeakKeyDictionary[
            asyncio.AbstractEventLoop, dict[LocaleCode, asyncio.Lock]
        ] = weakref.WeakKeyDictionary()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def supported_locales(self) -> frozenset[LocaleCode]:
        """Locales this store may load."""
        return frozenset(self._path_components)

    @property
    def base_file_names(self) -> tuple[BaseFileName, ...]:
        """Asset stems loaded for every locale."""
        return self._base_file_names

    @property
    def clean_unused(self) -> bool:
        """Whether reloads replace (True) or merge into (False) a locale."""
        return self._clean_unused

    def split_key(self, key: MessageKey) -> tuple[BaseFileName, str] | None:
        """Split a message key into (base file name, message name).

        The longest configured base file whose key prefix matches wins.

        Returns:
            (base_file_name, message_name), or None if no configured base
            file matches

        Example:
            >>> MessageStore(["en"], ["_", "menus/main"]).split_key("menus.main.open")
            ('menus/main', 'open')
        """
        for prefix, base_file_name in self._prefixes:
            head = f"{prefix}{KEY_SEPARATOR}"
            if key.startswith(head) and len(key) > len(head):
                return base_file_name, key[len(head):]
        return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def lookup(self, locale: LocaleCode, key: MessageKey) -> str | None:
        """Raw template of key in locale, or None if absent."""
        with self._lock.read():
            entries = self._entries.get(locale)
            return None if entries is None else entries.get(key)

    def messages(self, locale: LocaleCode) -> Mapping[MessageKey, str]:
        """Read-only snapshot of a locale's entries (empty if never loaded).

        Committed mappings are never mutated in place, so the snapshot stays
        consistent while later loads swap in new mappings.
        """
        with self._lock.read():
            return MappingProxyType(self._entries.get(locale, {}))

    @property
    def loaded_locales(self) -> frozenset[LocaleCode]:
        """Locales with committed entries."""
        with self._lock.read():
            return frozenset(self._entries)

    def has_locale(self, locale: LocaleCode) -> bool:
        """Check whether a locale has committed entries."""
        with self._lock.read():
            return locale in self._entries

    def message_count(self, locale: LocaleCode | None = None) -> int:
        """Number of entries for one locale, or across all locales."""
        with self._lock.read():
            if locale is not None:
                return len(self._entries.get(locale, {}))
            return sum(len(entries) for entries in self._entries.values())

    def clear(self, locale: LocaleCode | None = None) -> None:
        """Drop the entries of one locale, or of every locale."""
        with self._lock.write():
            if locale is None:
                self._entries.clear()
            else:
                self._entries.pop(locale, None)
        logger.debug("Store cleared: %s", "all locales" if locale is None else locale)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _targets(
        self, locales: Iterable[LocaleTag | LocaleCode] | None
    ) -> tuple[LocaleCode, ...]:
        """Resolve load targets, preserving order and dropping duplicates.

        Raises:
            MalformedLocaleError: If a name cannot be parsed
            ValueError: If a locale is not supported
        """
        if locales is None:
            return tuple(self._path_components)
        targets = tuple(dict.fromkeys(ensure_locale(raw) for raw in locales))
        unsupported = [str(code) for code in targets if code not in self._path_components]
        if unsupported:
            msg = f"Cannot load unsupported locale(s): {', '.join(unsupported)}"
            raise ValueError(msg)
        return targets

    def load(
        self,
        locales: Iterable[LocaleTag | LocaleCode] | None = None,
        *,
        via: AssetFetcher,
    ) -> LoadReport:
        """Fetch, parse and commit assets.

        Fetch and parse failures are recorded in the report, never raised.

        Args:
            locales: Locales to reload; None reloads every supported locale
            via: Fetcher supplying asset bytes

        Returns:
            LoadReport classifying each locale as loaded, partial or failed

        Raises:
            MalformedLocaleError: If a requested name cannot be parsed
            ValueError: If a requested locale is not supported
        """
        outcomes: list[LocaleLoadOutcome] = []
        for locale in self._targets(locales):
            with self._locale_locks[locale]:
                staged = self._stage(locale, via)
                outcomes.append(self._commit(locale, staged))
        report = LoadReport(outcomes=tuple(outcomes))
        logger.info("Load finished: %r", report)
        return report

    async def load_async(
        self,
        locales: Iterable[LocaleTag | LocaleCode] | None = None,
        *,
        via: AssetFetcher,
    ) -> LoadReport:
        """Awaitable load.

        Every targeted locale is staged concurrently in worker threads. Commits
        happen only after all staging finished, with no await in between, so
        cancelling this coroutine leaves the store exactly as it was.

        Args:
            locales: Locales to reload; None reloads every supported locale
            via: Fetcher supplying asset bytes (called from worker threads)

        Returns:
            LoadReport classifying each locale as loaded, partial or failed
        """
        targets = self._targets(locales)
        locks = self._async_locks_for(targets)

        async with contextlib.AsyncExitStack() as stack:
            # Sorted acquisition keeps overlapping loads deadlock-free
            for locale in sorted(targets, key=str):
                await stack.enter_async_context(locks[locale])
            staged = await asyncio.gather(
                *(asyncio.to_thread(self._stage, locale, via) for locale in targets)
            )
            outcomes = tuple(
                self._commit(locale, locale_staged)
                for locale, locale_staged in zip(targets, staged, strict=True)
            )

        report = LoadReport(outcomes=outcomes)
        logger.info("Async load finished: %r", report)
        return report

    def _async_locks_for(
        self, targets: Iterable[LocaleCode]
    ) -> dict[LocaleCode, asyncio.Lock]:
        loop = asyncio.get_running_loop()
        locks = self._async_locks.setdefault(loop, {})
        for locale in targets:
            locks.setdefault(locale, asyncio.Lock())
        return locks

    def _stage(self, locale: LocaleCode, via: AssetFetcher) -> _Staged:
        """Fetch and parse every base file of one locale. No side effects."""
        return [
            self._load_single_asset(locale, base_file_name, via)
            for base_file_name in self._base_file_names
        ]

    def _load_single_asset(
        self,
        locale: LocaleCode,
        base_file_name: BaseFileName,
        via: AssetFetcher,
    ) -> tuple[AssetLoadResult, MessageAsset | None]:
        """Load one asset and record the result.

        Returns:
            (result, prefixed messages) on success, (result, None) otherwise
        """
        path_component = self._path_components[locale]
        describe = getattr(via, "describe_path", None)
        source_path = (
            describe(path_component, base_file_name)
            if describe is not None
            else f"{path_component}/{base_file_name}"
        )

        status = LoadStatus.ERROR
        error: Exception
        try:
            asset = self._parser.parse(via.fetch(path_component, base_file_name))
        except FetchError as e:
            status = LoadStatus.NOT_FOUND if e.not_found else LoadStatus.ERROR
            error = e
        except ParseError as e:
            error = e
        except FileNotFoundError as e:
            # Custom fetchers that let filesystem errors through
            status = LoadStatus.NOT_FOUND
            error = e
        except OSError as e:
            error = e
        else:
            prefix = _key_prefix(base_file_name)
            messages = {f"{prefix}{KEY_SEPARATOR}{name}": value for name, value in asset.items()}
            logger.debug("Parsed %d messages from %s", len(messages), source_path)
            result = AssetLoadResult(
                locale=locale,
                base_file_name=base_file_name,
                status=LoadStatus.SUCCESS,
                source_path=source_path,
                key_count=len(messages),
            )
            return result, messages

        logger.warning("Failed to load asset %s: %s", source_path, error)
        result = AssetLoadResult(
            locale=locale,
            base_file_name=base_file_name,
            status=status,
            error=error,
            source_path=source_path,
        )
        return result, None

    def _commit(self, locale: LocaleCode, staged: _Staged) -> LocaleLoadOutcome:
        """Apply staged assets to one locale and classify the outcome."""
        results = tuple(result for result, _ in staged)
        loaded = [messages for _, messages in staged if messages is not None]
        complete = len(loaded) == len(staged)

        if not complete and (self._clean_unused or not loaded):
            logger.warning(
                "Locale %s not updated: %d of %d assets failed",
                locale,
                len(staged) - len(loaded),
                len(staged),
            )
            return LocaleLoadOutcome(locale, LocaleLoadStatus.FAILED, results)

        with self._lock.write():
            entries: dict[MessageKey, str] = (
                {} if self._clean_unused else dict(self._entries.get(locale, {}))
            )
            for messages in loaded:
                entries.update(messages)
            self._entries[locale] = entries

        status = LocaleLoadStatus.LOADED if complete else LocaleLoadStatus.PARTIAL
        logger.info(
            "Committed %d messages for %s (%s, %s)",
            len(entries),
            locale,
            status,
            "clean" if self._clean_unused else "merge",
        )
        return LocaleLoadOutcome(locale, status, results)

    def __repr__(self) -> str:
        return (
            f"MessageStore(locales={len(self._path_components)}, "
            f"base_file_names={self._base_file_names!r}, "
            f"clean_unused={self._clean_unused})"
        )
