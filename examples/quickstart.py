"""Quickstart example for msglocator.

This example demonstrates basic usage of msglocator: writing JSON assets,
switching locale, and resolving plain, parameterized and variant messages.

Note: Examples print LoadReport summaries only. In production, inspect
report.get_errors() and log asset failures.
"""

import json
import tempfile
from pathlib import Path

from msglocator import AssetOptions, LocatorOptions, MessageLocator

ASSETS = {
    "en-US": {
        "message_id": "Some message",
        "greeting": "Hello, $name!",
        "arrived_female": "She has arrived",
        "arrived_other": "They have arrived",
        "inbox_empty": "No new messages",
        "inbox_one": "One new message",
        "inbox_multiple": "$count new messages",
        "price": "Total: $$$amount",
    },
}

with tempfile.TemporaryDirectory() as tmp_dir:
    root = Path(tmp_dir) / "lang"
    for locale, messages in ASSETS.items():
        (root / locale).mkdir(parents=True)
        (root / locale / "_.json").write_text(json.dumps(messages), encoding="utf-8")

    locator = MessageLocator(
        LocatorOptions(
            supported_locales=["en-US"],
            default_locale="en-US",
            assets=AssetOptions(src=str(root), base_file_names=["_"], load_via="file_system"),
        )
    )

    # Example 1: Load and switch locale
    print("=" * 50)
    print("Example 1: Load a Locale")
    print("=" * 50)

    report = locator.update_locale("en-US")
    print(report)
    # Output: LoadReport(loaded=1, partial=0, failed=0)
    print(locator.get("_.message_id"))
    # Output: Some message

    # Example 2: Parameters
    print("\n" + "=" * 50)
    print("Example 2: Parameter Substitution")
    print("=" * 50)

    print(locator.get_formatted("_.greeting", [{"name": "Alice"}]))
    # Output: Hello, Alice!
    print(locator.get_formatted("_.price", {"amount": "9.99"}))
    # Output: Total: $9.99
    print(locator.get("_.greeting"))
    # Output: Hello, $name!

    # Example 3: Contextual variants
    print("\n" + "=" * 50)
    print("Example 3: Contextual Variants")
    print("=" * 50)

    print(locator.get_formatted("_.arrived", ["female"]))
    # Output: She has arrived
    print(locator.get_formatted("_.arrived", ["male"]))
    # Output: They have arrived (no _male variant, falls back to _other)

    # Example 4: Quantity variants
    print("\n" + "=" * 50)
    print("Example 4: Quantity Variants")
    print("=" * 50)

    for count in (0, 1, 5):
        print(locator.get_formatted("_.inbox", [count, {"count": count}]))
    # Output:
    # No new messages
    # One new message
    # 5 new messages

    # Example 5: Missing messages
    print("\n" + "=" * 50)
    print("Example 5: Missing Messages")
    print("=" * 50)

    print(locator.get("_.does_not_exist"))
    # Output: {_.does_not_exist}
    print(locator.has_message("_.does_not_exist"))
    # Output: False

print("\n" + "=" * 50)
print("[SUCCESS] All examples completed successfully!")
print("=" * 50)
