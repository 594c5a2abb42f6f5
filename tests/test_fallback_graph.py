"""Tests for FallbackGraph: validation, chain resolution, cycles.

Python 3.13+.
"""

import logging

import pytest
from hypothesis import event, given

from msglocator.diagnostics import (
    ConfigurationError,
    DiagnosticCode,
    MalformedLocaleError,
    UnknownDefaultLocaleError,
    UnknownLocaleInFallbackError,
)
from msglocator.locale_utils import LocaleCode, parse_locale
from msglocator.localization.fallback import FallbackGraph
from tests.strategies.localization import fallback_configs


def _names(chain: tuple[LocaleCode, ...]) -> list[str]:
    return [str(code) for code in chain]


@pytest.fixture
def graph() -> FallbackGraph:
    """en, en-US, pt-BR with pt-BR -> en-US -> en."""
    return FallbackGraph(
        ["en", "en-US", "pt-BR"],
        "en-US",
        {"en-US": ["en"], "pt-BR": ["en-US"]},
    )


class TestResolve:
    """Test chain resolution order."""

    def test_supported_locale_chain(self, graph: FallbackGraph) -> None:
        """pt-BR resolves to pt-BR, en-US, en."""
        assert _names(graph.resolve("pt-BR")) == ["pt-BR", "en-US", "en"]

    def test_unsupported_locale_starts_from_default(self, graph: FallbackGraph) -> None:
        """fr is unsupported: chain starts at the default."""
        assert _names(graph.resolve("fr")) == ["en-US", "en"]

    def test_malformed_locale_starts_from_default(self, graph: FallbackGraph) -> None:
        """Malformed requests behave like unsupported ones."""
        assert _names(graph.resolve("not a locale")) == ["en-US", "en"]

    def test_none_starts_from_default(self, graph: FallbackGraph) -> None:
        """No request means the default chain."""
        assert graph.resolve() == graph.resolve("en-US")

    def test_default_appended_when_absent(self, graph: FallbackGraph) -> None:
        """en has no fallbacks; the default is appended."""
        assert _names(graph.resolve("en")) == ["en", "en-US"]

    def test_request_spelling_is_irrelevant(self, graph: FallbackGraph) -> None:
        """pt_br and pt-BR give the same chain."""
        assert graph.resolve("pt_br") == graph.resolve("pt-BR")
        assert graph.resolve(parse_locale("pt-BR")) == graph.resolve("pt-BR")

    def test_depth_first_expansion(self) -> None:
        """Each fallback is expanded fully before the next listed one."""
        graph = FallbackGraph(
            ["a", "b", "c", "d", "e"],
            "e",
            {"a": ["b", "c"], "b": ["d"]},
        )
        assert _names(graph.resolve("a")) == ["a", "b", "d", "c", "e"]

    def test_chain_is_cached(self, graph: FallbackGraph) -> None:
        """Repeated requests return the same tuple."""
        assert graph.resolve("pt-BR") is graph.resolve("pt-BR")
        assert graph.resolve("pt_br") is graph.resolve("pt-BR")

    def test_cache_bounded_by_supported_locales(self, graph: FallbackGraph) -> None:
        """Distinct unsupported or malformed requests share the default entry."""
        for i in range(10_000):
            graph.resolve(f"x{i}")
            graph.resolve(f"not a locale {i}")
        graph.resolve("pt-BR")

        assert len(graph._chain_cache) <= len(graph.supported_locales)
        assert graph.resolve("zz") is graph.resolve("en-US")

    def test_no_fallbacks_configured(self) -> None:
        """Without a mapping every chain is [requested, default]."""
        graph = FallbackGraph(["en", "fr"], "en")
        assert _names(graph.resolve("fr")) == ["fr", "en"]
        assert _names(graph.resolve("en")) == ["en"]


class TestCycles:
    """Test cyclic and self-referencing fallback lists."""

    def test_two_locale_cycle_terminates(self) -> None:
        """a -> b -> a resolves without repetition."""
        graph = FallbackGraph(["a", "b", "c"], "c", {"a": ["b"], "b": ["a"]})
        assert _names(graph.resolve("a")) == ["a", "b", "c"]
        assert _names(graph.resolve("b")) == ["b", "a", "c"]

    def test_self_reference_terminates(self) -> None:
        """A locale listing itself is skipped."""
        graph = FallbackGraph(["en", "fr"], "en", {"fr": ["fr", "en"]})
        assert _names(graph.resolve("fr")) == ["fr", "en"]

    def test_cycles_reported(self) -> None:
        """Cycles are exposed with the first node repeated at the end."""
        graph = FallbackGraph(["a", "b"], "a", {"a": ["b"], "b": ["a"]})
        assert [_names(cycle) for cycle in graph.cycles] == [["a", "b", "a"]]

    def test_acyclic_graph_reports_nothing(self, graph: FallbackGraph) -> None:
        """Plain chains have no cycles."""
        assert graph.cycles == ()

    def test_cycles_logged_as_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Each cycle produces one WARNING at construction."""
        with caplog.at_level(logging.WARNING, logger="msglocator.localization.fallback"):
            FallbackGraph(["en"], "en", {"en": ["en"]})
        assert "Fallback cycle detected: en -> en" in caplog.text


class TestValidation:
    """Test eager validation at construction."""

    def test_unknown_default_locale(self) -> None:
        """Default must be supported."""
        with pytest.raises(UnknownDefaultLocaleError) as exc_info:
            FallbackGraph(["en"], "fr")
        assert exc_info.value.locale_code == "fr"
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.UNKNOWN_DEFAULT_LOCALE

    def test_unknown_fallback_target(self) -> None:
        """Fallback targets must be supported."""
        with pytest.raises(UnknownLocaleInFallbackError) as exc_info:
            FallbackGraph(["en", "pt-BR"], "en", {"pt-BR": ["pt"]})
        assert exc_info.value.source == "pt-BR"
        assert exc_info.value.target == "pt"
        assert "references unsupported locale 'pt'" in str(exc_info.value)

    def test_unknown_fallback_source(self) -> None:
        """Fallback keys must be supported."""
        with pytest.raises(UnknownLocaleInFallbackError) as exc_info:
            FallbackGraph(["en"], "en", {"fr": ["en"]})
        assert exc_info.value.source == exc_info.value.target == "fr"

    def test_configuration_errors_share_a_base(self) -> None:
        """Both validation errors are ConfigurationErrors."""
        with pytest.raises(ConfigurationError):
            FallbackGraph(["en"], "de")

    def test_malformed_names_rejected(self) -> None:
        """Malformed configured names raise MalformedLocaleError."""
        with pytest.raises(MalformedLocaleError):
            FallbackGraph(["en", "e-n-x"], "en")
        with pytest.raises(MalformedLocaleError):
            FallbackGraph(["en"], "en", {"en": ["??"]})


class TestQueries:
    """Test the remaining query operations."""

    def test_supports(self, graph: FallbackGraph) -> None:
        """supports() is spelling-insensitive and False for malformed names."""
        assert graph.supports("en_us")
        assert not graph.supports("fr")
        assert not graph.supports("")

    def test_fallbacks_of(self, graph: FallbackGraph) -> None:
        """Direct fallbacks in configured order."""
        assert _names(graph.fallbacks_of("pt-BR")) == ["en-US"]
        assert graph.fallbacks_of("en") == ()

    def test_path_component_keeps_configured_spelling(self) -> None:
        """Asset paths use the spelling given in supported_locales."""
        graph = FallbackGraph(["en_US", "pt-br"], "en_US")
        assert graph.path_component("en-US") == "en_US"
        assert graph.path_component("pt-BR") == "pt-br"

    def test_path_component_unsupported(self, graph: FallbackGraph) -> None:
        """Unsupported locales have no path component."""
        with pytest.raises(KeyError):
            graph.path_component("fr")

    def test_supported_and_default(self, graph: FallbackGraph) -> None:
        """Configured sets are exposed as LocaleCodes."""
        assert graph.default_locale == LocaleCode("en", "US")
        assert graph.supported_locales == frozenset(
            {LocaleCode("en"), LocaleCode("en", "US"), LocaleCode("pt", "BR")}
        )


class TestResolveProperties:
    """Property-based tests for chain invariants."""

    @given(config=fallback_configs())
    def test_chain_invariants(
        self, config: tuple[list[str], str, dict[str, list[str]]]
    ) -> None:
        """Chains are duplicate-free, bounded, and end with the default when absent."""
        supported, default, fallbacks = config
        graph = FallbackGraph(supported, default, fallbacks)
        for requested in [*supported, "xx"]:
            chain = graph.resolve(requested)
            event(f"chain_len={len(chain)}")
            assert len(chain) == len(set(chain))
            assert len(chain) <= len(supported)
            assert graph.default_locale in chain
            assert set(chain) <= graph.supported_locales
            expected_head = (
                parse_locale(requested) if graph.supports(requested) else graph.default_locale
            )
            assert chain[0] == expected_head

    @given(config=fallback_configs())
    def test_resolution_is_deterministic(
        self, config: tuple[list[str], str, dict[str, list[str]]]
    ) -> None:
        """Two graphs from the same configuration agree."""
        supported, default, fallbacks = config
        first = FallbackGraph(supported, default, fallbacks)
        second = FallbackGraph(supported, default, fallbacks)
        for requested in supported:
            assert first.resolve(requested) == second.resolve(requested)
