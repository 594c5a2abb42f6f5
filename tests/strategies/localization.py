"""Hypothesis strategies for msglocator property-based testing.

Provides reusable strategies for generating localization test data:
- Locale identifiers in any case and with either separator
- Fallback configurations over a fixed supported set
- Message names and asset mappings
- Parameter names and values for $name substitution

Event-Emitting Strategies (HypoFuzz-Optimized):
- locale_strings: Emits locale_form=language|region, locale_separator=-|_
- fallback_configs: Emits fallback_edges=N, fallback_self_ref=yes|no
- message_assets: Emits asset_size=empty|small|large

Python 3.13+.
"""

from __future__ import annotations

import string
from typing import TYPE_CHECKING

from hypothesis import event
from hypothesis import strategies as st

if TYPE_CHECKING:
    from hypothesis.strategies import DrawFn

# Locales used when a test needs a fixed, valid supported set.
LOCALE_POOL = [
    "en", "en-US", "en-GB",
    "de", "de-DE", "de-AT",
    "fr", "fr-FR", "fr-CA",
    "es", "es-MX",
    "pt", "pt-BR",
    "ja", "lv",
]

# Message names as they appear in assets: letters, digits, '_' and '-'.
_NAME_FIRST_CHARS = string.ascii_letters
_NAME_REST_CHARS = string.ascii_letters + string.digits + "-"

# Placeholder names accepted by $name substitution.
_PARAM_CHARS = string.ascii_letters + string.digits + "_-"


@st.composite
def locale_strings(draw: DrawFn) -> str:
    """Generate valid locale identifiers in arbitrary case.

    Events emitted:
    - locale_form=language|region
    - locale_separator=-|_
    """
    language = draw(st.text(alphabet=string.ascii_letters, min_size=1, max_size=8))
    if not draw(st.booleans()):
        event("locale_form=language")
        return language
    region = draw(st.text(alphabet=string.ascii_letters, min_size=1, max_size=3))
    separator = draw(st.sampled_from(["-", "_"]))
    event("locale_form=region")
    event(f"locale_separator={separator}")
    return f"{language}{separator}{region}"


@st.composite
def message_names(draw: DrawFn) -> str:
    """Generate message names without variant separators.

    Names exclude '_' so a generated name never collides with a variant key.
    """
    first = draw(st.sampled_from(list(_NAME_FIRST_CHARS)))
    rest = draw(st.text(alphabet=_NAME_REST_CHARS, max_size=15))
    return first + rest


@st.composite
def fallback_configs(
    draw: DrawFn,
    min_size: int = 1,
    max_size: int = 6,
) -> tuple[list[str], str, dict[str, list[str]]]:
    """Generate (supported_locales, default_locale, fallbacks).

    Fallback lists may contain cycles and self-references.

    Events emitted:
    - fallback_edges=N
    - fallback_self_ref=yes|no
    """
    supported = draw(
        st.lists(
            st.sampled_from(LOCALE_POOL),
            min_size=min_size,
            max_size=max_size,
            unique=True,
        )
    )
    default = draw(st.sampled_from(supported))
    fallbacks = draw(
        st.dictionaries(
            st.sampled_from(supported),
            st.lists(st.sampled_from(supported), max_size=3),
            max_size=len(supported),
        )
    )
    edges = sum(len(targets) for targets in fallbacks.values())
    self_ref = any(source in targets for source, targets in fallbacks.items())
    event(f"fallback_edges={edges}")
    event(f"fallback_self_ref={'yes' if self_ref else 'no'}")
    return supported, default, fallbacks


@st.composite
def message_assets(draw: DrawFn, max_size: int = 10) -> dict[str, str]:
    """Generate flat message-name -> template mappings.

    Events emitted:
    - asset_size=empty|small|large
    """
    asset = draw(
        st.dictionaries(message_names(), st.text(max_size=40), max_size=max_size)
    )
    size_class = "empty" if not asset else "small" if len(asset) <= 3 else "large"
    event(f"asset_size={size_class}")
    return asset


def param_names() -> st.SearchStrategy[str]:
    """Placeholder names: [A-Za-z0-9_-]+."""
    return st.text(alphabet=_PARAM_CHARS, min_size=1, max_size=12)


def param_values() -> st.SearchStrategy[str]:
    """Substitution values; may themselves contain '$'."""
    return st.text(max_size=20)
