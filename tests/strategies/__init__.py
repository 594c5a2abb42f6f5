"""Hypothesis strategies for msglocator property-based testing.

Strategies are organized by domain:

- localization: locale identifiers, fallback configurations, message assets,
  substitution parameters

Usage:
    from tests.strategies import locale_strings, fallback_configs
    from tests.strategies.localization import message_assets

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - locale_strings, fallback_configs, message_assets
"""

from .localization import (
    LOCALE_POOL,
    fallback_configs,
    locale_strings,
    message_assets,
    message_names,
    param_names,
    param_values,
)

__all__ = [
    "LOCALE_POOL",
    "fallback_configs",
    "locale_strings",
    "message_assets",
    "message_names",
    "param_names",
    "param_values",
]
