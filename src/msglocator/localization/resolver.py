"""Message resolution with variant selection and parameter substitution.

Resolves a dotted message key against the store, walking the requested
locale's fallback chain.

Variant selection (asset key suffixes):
    Gender    key_male | key_female | key_other     fallback: key_other
    Quantity  key_empty | key_one | key_multiple    fallback: key_multiple

Several variant selectors combine in order. Their preference lists form an
ordered cartesian product of candidate keys; every candidate is tried in one
locale before the next locale of the chain:

    get_formatted("cart.items", ["female", 1])
    -> cart.items_female_one, cart.items_female_multiple,
       cart.items_other_one, cart.items_other_multiple

Parameter substitution:
    $name is replaced by str(params["name"]); $$ renders a literal $.
    A $name without a parameter is left as literal text.

A key found in no locale renders the missing-message sentinel ("{key}" by
default) instead of raising.

Python 3.13+.
"""

from __future__ import annotations

import itertools
import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from msglocator.constants import FALLBACK_MISSING_MESSAGE, VARIANT_SEPARATOR
from msglocator.enums import Gender, Quantity
from msglocator.locale_utils import LocaleCode

if TYPE_CHECKING:
    from msglocator.localization.fallback import FallbackGraph
    from msglocator.localization.store import MessageStore
    from msglocator.localization.types import (
        FallbackChain,
        FormatSelector,
        LocaleTag,
        MessageKey,
    )

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    "MessageResolver",
    "FallbackInfo",
    "classify_quantity",
    "variant_suffixes",
    "substitute",
]

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\$(\$|[A-Za-z0-9_-]+)")


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a locale fallback event.

    Provided to the on_fallback callback when a message is resolved from a
    locale other than the head of the chain.

    Attributes:
        requested_locale: The first locale of the chain
        resolved_locale: The locale that actually contained the message
        message_key: The key (including variant suffixes) that matched

    Example:
        >>> def log_fallback(info: FallbackInfo) -> None:
        ...     print(f"{info.message_key} from {info.resolved_locale}")
        >>> resolver = MessageResolver(graph, store, on_fallback=log_fallback)
    """

    requested_locale: LocaleCode
    resolved_locale: LocaleCode
    message_key: str


def classify_quantity(count: int | float | Decimal) -> Quantity:
    """Map a count to its quantity class.

    Example:
        >>> classify_quantity(0), classify_quantity(1), classify_quantity(7)
        (<Quantity.EMPTY: 'empty'>, <Quantity.ONE: 'one'>, <Quantity.MULTIPLE: 'multiple'>)
    """
    if count == 0:
        return Quantity.EMPTY
    if count == 1:
        return Quantity.ONE
    return Quantity.MULTIPLE


def variant_suffixes(selector: Gender | Quantity) -> tuple[str, ...]:
    """Ordered key suffixes to try for one variant selector.

    Example:
        >>> variant_suffixes(Gender.FEMALE)
        ('female', 'other')
        >>> variant_suffixes(Quantity.MULTIPLE)
        ('multiple',)
    """
    match selector:
        case Gender.OTHER | Quantity.MULTIPLE:
            return (selector.value,)
        case Gender():
            return (selector.value, Gender.OTHER.value)
        case Quantity():
            return (selector.value, Quantity.MULTIPLE.value)


def substitute(template: str, params: Mapping[str, object]) -> str:
    """Replace $name placeholders in template.

    Example:
        >>> substitute("Here: $x", {"x": "foo"})
        'Here: foo'
        >>> substitute("$missing costs $$5", {})
        '$missing costs $5'
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name == "$":
            return "$"
        if name in params:
            return str(params[name])
        return match.group(0)

    return _PLACEHOLDER.sub(replace, template)


def _parse_selectors(
    selectors: Iterable[FormatSelector] | FormatSelector,
) -> tuple[list[tuple[str, ...]], dict[str, object]]:
    """Split selectors into variant dimensions and merged parameters.

    Raises:
        ValueError: If a string selector is not a gender
        TypeError: If a selector has an unsupported type
    """
    if isinstance(selectors, str | Mapping | int | float | Decimal):
        selectors = (selectors,)

    dimensions: list[tuple[str, ...]] = []
    params: dict[str, object] = {}
    for selector in selectors:
        match selector:
            case Gender() | Quantity():
                dimensions.append(variant_suffixes(selector))
            case str():
                try:
                    gender = Gender(selector)
                except ValueError:
                    choices = ", ".join(g.value for g in Gender)
                    msg = f"Unknown contextual selector {selector!r}; expected one of: {choices}"
                    raise ValueError(msg) from None
                dimensions.append(variant_suffixes(gender))
            case bool():
                msg = "bool is not a valid selector; pass a count or a Quantity"
                raise TypeError(msg)
            case int() | float() | Decimal():
                dimensions.append(variant_suffixes(classify_quantity(selector)))
            case Mapping():
                params.update(selector)
            case _:
                msg = f"Unsupported selector type: {type(selector).__name__}"
                raise TypeError(msg)
    return dimensions, params


def _candidate_keys(key: MessageKey, dimensions: list[tuple[str, ...]]) -> tuple[str, ...]:
    return tuple(
        key + "".join(f"{VARIANT_SEPARATOR}{suffix}" for suffix in combination)
        for combination in itertools.product(*dimensions)
    )


class MessageResolver:
    """Public query surface: message keys to display strings.

    Stateless across calls apart from the graph's chain cache and the
    store's current mappings; nothing here mutates either.

    Example:
        >>> resolver = MessageResolver(graph, store, locale="pt-BR")
        >>> resolver.get("_.greeting")
        'Olá, $name'
        >>> resolver.get_formatted("_.greeting", [{"name": "Ana"}])
        'Olá, Ana'
        >>> resolver.get_formatted("_.cart", [0])
        'Seu carrinho está vazio'
    """

    __slots__ = (
        "_graph",
        "_locale",
        "_missing_message_format",
        "_on_fallback",
        "_store",
    )

    def __init__(
        self,
        graph: FallbackGraph,
        store: MessageStore,
        *,
        locale: LocaleTag | LocaleCode | None = None,
        missing_message_format: str = FALLBACK_MISSING_MESSAGE,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            graph: Fallback graph giving lookup order
            store: Store holding loaded messages
            locale: Requested locale; None uses the graph's default locale
            missing_message_format: Sentinel template with a {key} field
            on_fallback: Called when a message comes from a fallback locale

        Raises:
            ValueError: If missing_message_format has fields other than {key}
        """
        try:
            missing_message_format.format(key="")
        except (KeyError, IndexError, ValueError) as e:
            msg = f"missing_message_format must only use the {{key}} field: {e}"
            raise ValueError(msg) from e

        self._graph = graph
        self._store = store
        self._locale = locale
        self._missing_message_format = missing_message_format
        self._on_fallback = on_fallback

    @property
    def locale(self) -> LocaleCode:
        """Head of the chain this resolver searches by default."""
        return self.chain()[0]

    def chain(self, locale: LocaleTag | LocaleCode | None = None) -> FallbackChain:
        """Lookup order for locale (default: this resolver's locale)."""
        return self._graph.resolve(locale if locale is not None else self._locale)

    def with_locale(self, locale: LocaleTag | LocaleCode | None) -> MessageResolver:
        """Resolver sharing graph and store, bound to another locale."""
        return MessageResolver(
            self._graph,
            self._store,
            locale=locale,
            missing_message_format=self._missing_message_format,
            on_fallback=self._on_fallback,
        )

    def missing(self, key: MessageKey) -> str:
        """Sentinel rendered for a key no locale has."""
        return self._missing_message_format.format(key=key)

    def _find(
        self,
        candidates: tuple[str, ...],
        locale: LocaleTag | LocaleCode | None,
    ) -> str | None:
        """First template among candidates, walking the chain."""
        chain = self.chain(locale)
        for resolved_locale in chain:
            for candidate in candidates:
                template = self._store.lookup(resolved_locale, candidate)
                if template is None:
                    continue
                if self._on_fallback is not None and resolved_locale != chain[0]:
                    self._on_fallback(
                        FallbackInfo(
                            requested_locale=chain[0],
                            resolved_locale=resolved_locale,
                            message_key=candidate,
                        )
                    )
                return template
        return None

    def _resolve_template(
        self,
        key: MessageKey,
        dimensions: list[tuple[str, ...]],
        locale: LocaleTag | LocaleCode | None,
    ) -> str | None:
        if self._store.split_key(key) is None:
            logger.debug("Key %r does not start with a configured base file name", key)
            return None
        return self._find(_candidate_keys(key, dimensions), locale)

    def get(self, key: MessageKey, *, locale: LocaleTag | LocaleCode | None = None) -> str:
        """Raw template for key, placeholders untouched.

        Args:
            key: Dotted key, base file name first (e.g., '_.message_id')
            locale: Override this resolver's locale for one call

        Returns:
            The template from the first locale in the chain that has key,
            otherwise the missing-message sentinel
        """
        template = self._resolve_template(key, [], locale)
        if template is None:
            logger.debug("Message %r not found in chain %s", key, self.chain(locale))
            return self.missing(key)
        return template

    def get_formatted(
        self,
        key: MessageKey,
        selectors: Iterable[FormatSelector] | FormatSelector = (),
        *,
        locale: LocaleTag | LocaleCode | None = None,
    ) -> str:
        """Resolve a variant of key and substitute parameters.

        Args:
            key: Dotted message key (without variant suffix)
            selectors: Genders ('male', 'female', 'other' or Gender),
                counts (int, float, Decimal) or Quantity members, and
                parameter mappings, applied in order. A single selector may
                be passed without wrapping it in a list.
            locale: Override this resolver's locale for one call

        Returns:
            Formatted message, or the sentinel of the most specific candidate
            key when nothing matched

        Raises:
            ValueError: If a string selector is not a gender
            TypeError: If a selector has an unsupported type
        """
        dimensions, params = _parse_selectors(selectors)
        template = self._resolve_template(key, dimensions, locale)
        if template is None:
            wanted = _candidate_keys(key, dimensions)[0]
            logger.debug("Message %r not found in chain %s", wanted, self.chain(locale))
            return self.missing(wanted)
        return substitute(template, params)

    def has_message(
        self,
        key: MessageKey,
        *,
        locale: LocaleTag | LocaleCode | None = None,
    ) -> bool:
        """Check whether any locale of the chain has key (exact, no variants)."""
        return self._resolve_template(key, [], locale) is not None

    def __repr__(self) -> str:
        return f"MessageResolver(locale={self.locale!s})"
