"""MessageLocator Example - Multi-Locale Fallback Chains.

Demonstrates real-world usage of MessageLocator for handling incomplete
translations and locale fallback chains.

Scenarios covered:
1. Regional locale falling back to its language, then to the default
2. Reporting which messages came from a fallback locale
3. Custom in-memory asset fetcher
4. Reloading with clean and merge semantics

Note on Error Handling:
    Examples print report summaries for brevity. In production code, check
    the LoadReport and log asset failures:

    report = locator.update_locale("pt-BR")
    if not report.succeeded:
        logger.warning("Assets failed: %s", report.get_errors())

Python 3.13+.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

from msglocator import AssetOptions, FetchError, LocatorOptions, MessageLocator
from msglocator.localization import FallbackInfo

OPTIONS = LocatorOptions(
    supported_locales=["en", "en-US", "pt", "pt-BR"],
    default_locale="en",
    fallbacks={"en-US": ["en"], "pt-BR": ["pt"], "pt": ["en"]},
)


def _write_assets(root: Path, assets: dict[str, dict[str, str]]) -> None:
    for locale, messages in assets.items():
        (root / locale).mkdir(parents=True, exist_ok=True)
        (root / locale / "_.json").write_text(
            json.dumps(messages, ensure_ascii=False), encoding="utf-8"
        )


def example_1_regional_fallback(tmp_path: Path) -> None:
    """Example 1: pt-BR -> pt -> en."""
    print("=" * 60)
    print("Example 1: Regional Fallback (pt-BR -> pt -> en)")
    print("=" * 60)

    _write_assets(
        tmp_path,
        {
            "pt-BR": {"cart": "Carrinho"},
            "pt": {"cart": "Cesto", "checkout": "Finalizar compra"},
            "en": {"cart": "Cart", "checkout": "Checkout", "privacy": "Privacy Policy"},
            "en-US": {},
        },
    )
    options = LocatorOptions(
        supported_locales=OPTIONS.supported_locales,
        default_locale=OPTIONS.default_locale,
        fallbacks=OPTIONS.fallbacks,
        assets=AssetOptions(src=str(tmp_path), base_file_names=["_"], load_via="file_system"),
    )
    locator = MessageLocator(options)

    report = locator.update_locale("pt-BR")
    print(f"\n{report}")
    print(f"Chain: {[str(code) for code in locator.current_locale_seq()]}")

    print("\nFallback resolution:")
    for key in ["_.cart", "_.checkout", "_.privacy", "_.terms"]:
        print(f"  {key}: {locator.get(key)}")


class InMemoryFetcher:
    """Custom fetcher that serves assets from memory (e.g., database, cache)."""

    def __init__(self, assets: dict[tuple[str, str], dict[str, object]]) -> None:
        self.assets = assets

    def fetch(self, locale: str, base_file_name: str) -> bytes:
        try:
            messages = self.assets[(locale, base_file_name)]
        except KeyError:
            msg = f"No asset for {locale}/{base_file_name}"
            raise FetchError(
                msg, locale_code=locale, base_file_name=base_file_name, not_found=True
            ) from None
        return json.dumps(messages).encode("utf-8")


def example_2_fallback_reporting() -> None:
    """Example 2: Observe messages served by a fallback locale."""
    print("\n" + "=" * 60)
    print("Example 2: Fallback Reporting")
    print("=" * 60)

    fallbacks: list[FallbackInfo] = []
    locator = MessageLocator(
        LocatorOptions(
            supported_locales=["en", "pt-BR"],
            default_locale="en",
            assets=AssetOptions(base_file_names=["_"]),
        ),
        fetcher=InMemoryFetcher(
            {
                ("pt-BR", "_"): {"title": "Loja"},
                ("en", "_"): {"title": "Shop", "footer": "All rights reserved"},
            }
        ),
        on_fallback=fallbacks.append,
    )
    locator.update_locale("pt-BR")

    locator.get("_.title")
    locator.get("_.footer")

    print("\nServed from a fallback locale:")
    for info in fallbacks:
        print(f"  {info.message_key}: {info.requested_locale} -> {info.resolved_locale}")


def example_3_custom_fetcher() -> None:
    """Example 3: Custom in-memory fetcher with nested assets."""
    print("\n" + "=" * 60)
    print("Example 3: Custom In-Memory Fetcher")
    print("=" * 60)

    fetcher = InMemoryFetcher(
        {
            ("en", "_"): {"hello": "Hello!"},
            ("en", "menus/main"): {"file": {"open": "Open", "close": "Close"}},
        }
    )
    locator = MessageLocator(
        LocatorOptions(assets=AssetOptions(base_file_names=["_", "menus/main"])),
        fetcher=fetcher,
    )
    locator.update_locale("en")

    print("\nNested base file and nested JSON:")
    for key in ["_.hello", "menus.main.file.open", "menus.main.file.close"]:
        print(f"  {key}: {locator.get(key)}")


def example_4_reload_semantics() -> None:
    """Example 4: clean_unused=True replaces, False merges."""
    print("\n" + "=" * 60)
    print("Example 4: Clean vs. Merge Reloads")
    print("=" * 60)

    for clean_unused in (True, False):
        fetcher = InMemoryFetcher({("en", "_"): {"k1": "one"}})
        locator = MessageLocator(
            LocatorOptions(
                assets=AssetOptions(base_file_names=["_"], clean_unused=clean_unused)
            ),
            fetcher=fetcher,
        )
        locator.update_locale("en")

        fetcher.assets[("en", "_")] = {"k2": "two"}
        locator.load()

        print(f"\nclean_unused={clean_unused}")
        print(f"  _.k1: {locator.get('_.k1')}")
        print(f"  _.k2: {locator.get('_.k2')}")


# Main execution
if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp_dir_main:
        example_1_regional_fallback(Path(tmp_dir_main))

    example_2_fallback_reporting()
    example_3_custom_fetcher()
    example_4_reload_semantics()

    print("\n" + "=" * 60)
    print("[SUCCESS] All examples complete!")
    print("=" * 60)
