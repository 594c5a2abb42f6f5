"""Locale fallback graph.

Turns the configured supported locales, default locale and fallback mapping
into an explicit adjacency structure, validated eagerly at construction, and
answers "in which order should locales be searched for this request?".

Resolution order for a requested locale:
    1. The requested locale if supported, otherwise the default locale
    2. Its fallbacks in listed order, each expanded depth-first before the next
    3. The default locale, if it has not appeared yet

A locale already in the chain is skipped, never re-inserted, so cyclic or
self-referencing fallback lists terminate. Cycles are legal but reported.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from msglocator.analysis.graph import detect_cycles
from msglocator.diagnostics import (
    MalformedLocaleError,
    UnknownDefaultLocaleError,
    UnknownLocaleInFallbackError,
)
from msglocator.locale_utils import LocaleCode, ensure_locale
from msglocator.localization.types import FallbackChain, LocaleTag

__all__ = ["FallbackGraph"]

logger = logging.getLogger(__name__)


class FallbackGraph:
    """Deterministic, cycle-safe locale resolution order.

    Immutable after construction. Chains are computed lazily and cached per
    start locale (the requested locale if supported, else the default); the
    cache is write-once per key, and every thread computes the same value for
    the same key, so it is shared without locking.

    Example:
        >>> graph = FallbackGraph(
        ...     ["en", "en-US", "pt-BR"],
        ...     "en-US",
        ...     {"en-US": ["en"], "pt-BR": ["en-US"]},
        ... )
        >>> [str(c) for c in graph.resolve("pt-BR")]
        ['pt-BR', 'en-US', 'en']
        >>> [str(c) for c in graph.resolve("fr")]
        ['en-US', 'en']
    """

    __slots__ = (
        "_chain_cache",
        "_cycles",
        "_default_locale",
        "_edges",
        "_path_components",
    )

    def __init__(
        self,
        supported_locales: Iterable[LocaleTag | LocaleCode],
        default_locale: LocaleTag | LocaleCode,
        fallbacks: Mapping[LocaleTag, Sequence[LocaleTag]] | None = None,
    ) -> None:
        """Build and validate the graph.

        Args:
            supported_locales: Locales that have assets. The spelling given
                here is kept as the path component used to fetch assets.
            default_locale: Locale every chain ends with
            fallbacks: Locale -> ordered list of locales to try next

        Raises:
            MalformedLocaleError: If any locale name cannot be parsed
            UnknownDefaultLocaleError: If default_locale is not supported
            UnknownLocaleInFallbackError: If a fallback key or target is not
                supported
        """
        # dict keeps the first configured spelling of each canonical locale
        path_components: dict[LocaleCode, str] = {}
        for raw in supported_locales:
            code = ensure_locale(raw)
            path_components.setdefault(code, str(raw))
        self._path_components: Mapping[LocaleCode, str] = MappingProxyType(path_components)

        default = ensure_locale(default_locale)
        if default not in path_components:
            raise UnknownDefaultLocaleError(str(default))
        self._default_locale = default

        edges: dict[LocaleCode, tuple[LocaleCode, ...]] = {}
        for raw_source, raw_targets in (fallbacks or {}).items():
            source = ensure_locale(raw_source)
            if source not in path_components:
                raise UnknownLocaleInFallbackError(str(source), str(source))
            targets: list[LocaleCode] = []
            for raw_target in raw_targets:
                target = ensure_locale(raw_target)
                if target not in path_components:
                    raise UnknownLocaleInFallbackError(str(source), str(target))
                targets.append(target)
            edges[source] = edges.get(source, ()) + tuple(targets)
        self._edges: Mapping[LocaleCode, tuple[LocaleCode, ...]] = MappingProxyType(edges)

        self._cycles: tuple[tuple[LocaleCode, ...], ...] = self._find_cycles()
        for cycle in self._cycles:
            logger.warning(
                "Fallback cycle detected: %s", " -> ".join(str(c) for c in cycle)
            )

        # Keyed by start locale, so bounded by the number of supported locales
        self._chain_cache: dict[LocaleCode, FallbackChain] = {}

    def _find_cycles(self) -> tuple[tuple[LocaleCode, ...], ...]:
        by_name = {str(code): code for code in self._path_components}
        named_edges = {
            str(source): [str(t) for t in targets] for source, targets in self._edges.items()
        }
        return tuple(
            tuple(by_name[name] for name in cycle) for cycle in detect_cycles(named_edges)
        )

    @property
    def supported_locales(self) -> frozenset[LocaleCode]:
        """All supported locales."""
        return frozenset(self._path_components)

    @property
    def default_locale(self) -> LocaleCode:
        """Locale every chain ends with."""
        return self._default_locale

    @property
    def cycles(self) -> tuple[tuple[LocaleCode, ...], ...]:
        """Fallback cycles found at construction (first node repeated at the end)."""
        return self._cycles

    def supports(self, locale: LocaleTag | LocaleCode) -> bool:
        """Check whether locale is supported. Malformed names are unsupported."""
        try:
            return ensure_locale(locale) in self._path_components
        except MalformedLocaleError:
            return False

    def fallbacks_of(self, locale: LocaleTag | LocaleCode) -> tuple[LocaleCode, ...]:
        """Direct fallbacks of a locale, in configured order."""
        return self._edges.get(ensure_locale(locale), ())

    def path_component(self, locale: LocaleTag | LocaleCode) -> str:
        """Configured spelling of a supported locale, used in asset paths.

        Raises:
            KeyError: If locale is not supported
        """
        return self._path_components[ensure_locale(locale)]

    def resolve(self, requested: LocaleTag | LocaleCode | None = None) -> FallbackChain:
        """Return the lookup order for a requested locale.

        Unsupported, malformed or missing requests start from the default
        locale instead of failing.

        Args:
            requested: Locale asked for by the caller

        Returns:
            Tuple of locales, most preferred first
        """
        start = self._default_locale
        if requested is not None:
            try:
                candidate = ensure_locale(requested)
            except MalformedLocaleError:
                logger.debug("Malformed locale %r requested; using default", requested)
            else:
                if candidate in self._path_components:
                    start = candidate
                else:
                    logger.debug(
                        "Unsupported locale %s requested; using default %s",
                        candidate,
                        self._default_locale,
                    )

        cached = self._chain_cache.get(start)
        if cached is not None:
            return cached

        chain = self._expand(start)
        if self._default_locale not in chain:
            chain.append(self._default_locale)

        result = tuple(chain)
        self._chain_cache[start] = result
        return result

    def _expand(self, start: LocaleCode) -> list[LocaleCode]:
        """Depth-first expansion of fallbacks from start.

        Iterative: each stack entry is a locale whose fallback list still has
        unvisited entries, plus the index of the next entry to inspect.
        """
        chain: list[LocaleCode] = [start]
        visited: set[LocaleCode] = {start}
        stack: list[tuple[LocaleCode, int]] = [(start, 0)]

        while stack:
            node, index = stack.pop()
            targets = self._edges.get(node, ())
            if index >= len(targets):
                continue
            stack.append((node, index + 1))
            target = targets[index]
            if target in visited:
                continue
            visited.add(target)
            chain.append(target)
            stack.append((target, 0))

        return chain

    def __repr__(self) -> str:
        return (
            f"FallbackGraph(supported={len(self._path_components)}, "
            f"default={self._default_locale!s})"
        )
