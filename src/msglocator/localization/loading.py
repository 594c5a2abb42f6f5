"""Asset loading infrastructure for the message store.

Provides the protocols for fetching and parsing message assets, filesystem
and HTTP fetchers, a JSON parser, and result/report data structures for
tracking load attempts.

Components:
    AssetFetcher - Protocol: (locale, base file name) -> bytes
    AssetParser - Protocol: bytes -> flat message mapping
    PathAssetFetcher - Disk-based fetcher with path-traversal prevention
    HttpAssetFetcher - requests-based fetcher
    JsonAssetParser - JSON object parser that flattens nesting with "."
    AssetLoadResult - Immutable result of one fetch+parse attempt
    LocaleLoadOutcome - Immutable per-locale classification of a load
    LoadReport - Immutable aggregate of one load operation

Asset layout (both fetchers):
    <src>/<locale>/<base_file_name><extension>
    e.g. res/lang/en-US/_.json

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol
from urllib.parse import quote

import requests

from msglocator.constants import (
    DEFAULT_ASSET_EXTENSION,
    DEFAULT_HTTP_TIMEOUT,
    KEY_SEPARATOR,
)
from msglocator.diagnostics import Diagnostic, DiagnosticCode, FetchError, ParseError
from msglocator.enums import LoadStatus, LocaleLoadStatus
from msglocator.localization.types import BaseFileName, LocaleTag, MessageAsset

if TYPE_CHECKING:
    from msglocator.locale_utils import LocaleCode

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocols
    "AssetFetcher",
    "AssetParser",
    # Concrete collaborators
    "PathAssetFetcher",
    "HttpAssetFetcher",
    "JsonAssetParser",
    # Load result types
    "AssetLoadResult",
    "LocaleLoadOutcome",
    "LoadReport",
]

logger = logging.getLogger(__name__)


class AssetFetcher(Protocol):
    """Protocol for fetching raw asset bytes.

    This is a Protocol (structural typing) rather than ABC so that any object
    with a matching fetch() method can be used, including test doubles.

    Example:
        >>> class DictFetcher:
        ...     def __init__(self, assets: dict[tuple[str, str], bytes]) -> None:
        ...         self.assets = assets
        ...     def fetch(self, locale: str, base_file_name: str) -> bytes:
        ...         try:
        ...             return self.assets[(locale, base_file_name)]
        ...         except KeyError:
        ...             raise FetchError("missing", not_found=True) from None
    """

    def fetch(self, locale: LocaleTag, base_file_name: BaseFileName) -> bytes:
        """Fetch the raw bytes of one asset.

        Args:
            locale: Locale path component as configured (e.g., 'en-US')
            base_file_name: Asset stem (e.g., '_', 'menus/main')

        Returns:
            Raw asset bytes

        Raises:
            FetchError: If the asset is missing or cannot be read
        """

    def describe_path(self, locale: LocaleTag, base_file_name: BaseFileName) -> str:
        """Return human-readable path for diagnostics.

        Default implementation returns a generic "{locale}/{base_file_name}".
        Override in fetchers that know the physical location.
        """
        return f"{locale}/{base_file_name}"


class AssetParser(Protocol):
    """Protocol for converting raw asset bytes into a flat message mapping."""

    def parse(self, data: bytes) -> MessageAsset:
        """Parse asset bytes.

        Args:
            data: Raw bytes returned by an AssetFetcher

        Returns:
            Mapping of message name (dotted for nested entries) to raw template

        Raises:
            ParseError: If data is not a well-formed asset
        """


def _asset_relative_path(base_file_name: BaseFileName, extension: str) -> str:
    return f"{base_file_name}{extension}"


@dataclass(frozen=True, slots=True)
class PathAssetFetcher:
    """File system asset fetcher.

    Implements AssetFetcher by reading <src>/<locale>/<base><extension>.

    Security:
        Locale path components containing separators or ".." are rejected.
        Base file names may contain "/" (nested assets) but not "..", a
        leading separator, or an absolute path. Every resolved path is
        verified to stay inside the resolved src directory.

    Example:
        >>> fetcher = PathAssetFetcher("res/lang")
        >>> data = fetcher.fetch("en-US", "_")
        # Reads: res/lang/en-US/_.json

    Attributes:
        src: Directory containing one sub-directory per locale
        extension: File extension appended to base file names
    """

    src: str
    extension: str = DEFAULT_ASSET_EXTENSION
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_resolved_root", Path(self.src).resolve())

    def _unsafe(self, locale: str, base_file_name: str, reason: str) -> FetchError:
        diagnostic = Diagnostic(
            code=DiagnosticCode.ASSET_PATH_UNSAFE,
            message=f"Unsafe asset path: {reason}",
            locale_code=locale,
        )
        return FetchError(diagnostic, locale_code=locale, base_file_name=base_file_name)

    def _validate(self, locale: LocaleTag, base_file_name: BaseFileName) -> None:
        if not locale:
            raise self._unsafe(locale, base_file_name, "empty locale")
        if ".." in locale or "/" in locale or "\\" in locale:
            raise self._unsafe(locale, base_file_name, f"locale {locale!r}")
        if not base_file_name or base_file_name.strip() != base_file_name:
            raise self._unsafe(locale, base_file_name, f"base file name {base_file_name!r}")
        if (
            ".." in base_file_name
            or base_file_name.startswith(("/", "\\"))
            or Path(base_file_name).is_absolute()
        ):
            raise self._unsafe(locale, base_file_name, f"base file name {base_file_name!r}")

    def _path_for(self, locale: LocaleTag, base_file_name: BaseFileName) -> Path:
        return Path(self.src) / locale / _asset_relative_path(base_file_name, self.extension)

    def describe_path(self, locale: LocaleTag, base_file_name: BaseFileName) -> str:
        """Return the on-disk path an asset would be read from."""
        return self._path_for(locale, base_file_name).as_posix()

    def fetch(self, locale: LocaleTag, base_file_name: BaseFileName) -> bytes:
        """Read one asset from disk.

        Raises:
            FetchError: If the path is unsafe, the file does not exist
                (not_found=True), or it cannot be read
        """
        self._validate(locale, base_file_name)
        path = self._path_for(locale, base_file_name)
        source_path = path.as_posix()

        resolved = path.resolve()
        if not resolved.is_relative_to(self._resolved_root):
            raise self._unsafe(locale, base_file_name, "resolved path escapes src")

        try:
            return resolved.read_bytes()
        except FileNotFoundError as e:
            diagnostic = Diagnostic(
                code=DiagnosticCode.ASSET_NOT_FOUND,
                message=f"Asset not found: {source_path}",
                locale_code=locale,
                source_path=source_path,
            )
            raise FetchError(
                diagnostic,
                locale_code=locale,
                base_file_name=base_file_name,
                source_path=source_path,
                not_found=True,
            ) from e
        except OSError as e:
            diagnostic = Diagnostic(
                code=DiagnosticCode.ASSET_FETCH_FAILED,
                message=f"Failed to read asset {source_path}: {e}",
                locale_code=locale,
                source_path=source_path,
            )
            raise FetchError(
                diagnostic,
                locale_code=locale,
                base_file_name=base_file_name,
                source_path=source_path,
            ) from e


class HttpAssetFetcher:
    """HTTP asset fetcher.

    Implements AssetFetcher with GET <src>/<locale>/<base><extension>.
    Each thread reuses its own requests.Session for connection pooling,
    since requests does not guarantee Session is thread-safe and
    MessageStore.load_async fetches from several worker threads at once.
    An injected session is shared by every thread; callers passing one are
    responsible for its thread safety.

    Example:
        >>> fetcher = HttpAssetFetcher("https://cdn.example.com/lang")
        >>> data = fetcher.fetch("en-US", "_")
        # GET https://cdn.example.com/lang/en-US/_.json

    Attributes:
        src: URL prefix containing one path segment per locale
        extension: File extension appended to base file names
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        src: str,
        extension: str = DEFAULT_ASSET_EXTENSION,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.src = src.rstrip("/")
        self.extension = extension
        self.timeout = timeout
        self._shared_session = session
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """Session used by the calling thread."""
        if self._shared_session is not None:
            return self._shared_session
        session: requests.Session | None = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session

    def describe_path(self, locale: LocaleTag, base_file_name: BaseFileName) -> str:
        """Return the URL an asset would be requested from."""
        relative = _asset_relative_path(base_file_name, self.extension)
        return f"{self.src}/{quote(locale)}/{quote(relative)}"

    def fetch(self, locale: LocaleTag, base_file_name: BaseFileName) -> bytes:
        """GET one asset.

        Raises:
            FetchError: On HTTP 404 (not_found=True), other HTTP errors,
                connection failures and timeouts
        """
        url = self.describe_path(locale, base_file_name)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            diagnostic = Diagnostic(
                code=DiagnosticCode.ASSET_FETCH_FAILED,
                message=f"Request for {url} failed: {e}",
                locale_code=locale,
                source_path=url,
            )
            raise FetchError(
                diagnostic, locale_code=locale, base_file_name=base_file_name, source_path=url
            ) from e

        if response.status_code == requests.codes.not_found:
            diagnostic = Diagnostic(
                code=DiagnosticCode.ASSET_NOT_FOUND,
                message=f"Asset not found: {url}",
                locale_code=locale,
                source_path=url,
            )
            raise FetchError(
                diagnostic,
                locale_code=locale,
                base_file_name=base_file_name,
                source_path=url,
                not_found=True,
            )

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            diagnostic = Diagnostic(
                code=DiagnosticCode.ASSET_FETCH_FAILED,
                message=f"Request for {url} returned HTTP {response.status_code}",
                locale_code=locale,
                source_path=url,
            )
            raise FetchError(
                diagnostic, locale_code=locale, base_file_name=base_file_name, source_path=url
            ) from e

        logger.debug("Fetched %s (%d bytes)", url, len(response.content))
        return response.content

    def __repr__(self) -> str:
        return f"HttpAssetFetcher(src={self.src!r}, extension={self.extension!r})"


class JsonAssetParser:
    """Parse UTF-8 JSON objects into flat message mappings.

    Nested objects are flattened with ".": {"menu": {"open": "Open"}}
    becomes {"menu.open": "Open"}. Leaves that are not strings (numbers,
    booleans, null, arrays) are skipped, since they cannot be messages.

    Example:
        >>> JsonAssetParser().parse(b'{"a": "x", "b": {"c": "y"}}')
        {'a': 'x', 'b.c': 'y'}
    """

    __slots__ = ()

    def parse(self, data: bytes) -> MessageAsset:
        """Parse asset bytes.

        Raises:
            ParseError: If data is not UTF-8, not JSON, nested beyond the
                interpreter's recursion limit, or not a JSON object
        """
        try:
            document = json.loads(data.decode("utf-8"))
        except UnicodeDecodeError as e:
            msg = f"Asset is not valid UTF-8: {e}"
            raise ParseError(self._diagnostic(msg)) from e
        except json.JSONDecodeError as e:
            msg = f"Asset is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})"
            raise ParseError(self._diagnostic(msg)) from e
        except RecursionError as e:
            msg = "Asset nests too deeply to parse"
            raise ParseError(self._diagnostic(msg)) from e

        if not isinstance(document, dict):
            msg = f"Asset root must be a JSON object, got {type(document).__name__}"
            raise ParseError(self._diagnostic(msg))

        messages: MessageAsset = {}
        stack: list[tuple[str, dict[str, object]]] = [("", document)]
        while stack:
            prefix, node = stack.pop()
            for name, value in node.items():
                key = f"{prefix}{KEY_SEPARATOR}{name}" if prefix else name
                match value:
                    case str():
                        messages[key] = value
                    case dict():
                        stack.append((key, value))
                    case _:
                        logger.debug("Skipping non-string asset entry %r", key)
        return messages

    @staticmethod
    def _diagnostic(message: str) -> Diagnostic:
        return Diagnostic(code=DiagnosticCode.ASSET_PARSE_FAILED, message=message)


@dataclass(frozen=True, slots=True)
class AssetLoadResult:
    """Result of loading one asset.

    Attributes:
        locale: Locale the asset belongs to
        base_file_name: Asset stem (e.g., '_')
        status: Load status (success, not_found, error)
        error: FetchError or ParseError if status is not SUCCESS
        source_path: Human-readable path or URL of the asset
        key_count: Number of messages parsed from the asset
    """

    locale: LocaleCode
    base_file_name: BaseFileName
    status: LoadStatus
    error: Exception | None = None
    source_path: str | None = None
    key_count: int = 0

    @property
    def is_success(self) -> bool:
        """Check if the asset loaded successfully."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if the asset was missing."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        """Check if the asset failed to fetch or parse."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LocaleLoadOutcome:
    """How one locale fared in a load.

    Attributes:
        locale: The locale
        status: loaded, partial or failed
        results: Per-asset results for this locale, in base file order
    """

    locale: LocaleCode
    status: LocaleLoadStatus
    results: tuple[AssetLoadResult, ...]

    @property
    def committed(self) -> bool:
        """True if any entries of this locale were written to the store."""
        return self.status != LocaleLoadStatus.FAILED


@dataclass(frozen=True, slots=True)
class LoadReport:
    """Immutable aggregate of one load operation.

    All statistics are computed from ``outcomes``. A failed asset never
    raises out of a load; inspect the report instead.

    Attributes:
        outcomes: One entry per targeted locale, in load order

    Example:
        >>> report = store.load(via=fetcher)
        >>> if not report.succeeded:
        ...     for result in report.get_errors():
        ...         print(f"{result.source_path}: {result.error}")
    """

    outcomes: tuple[LocaleLoadOutcome, ...] = ()

    def __repr__(self) -> str:
        return (
            f"LoadReport(loaded={len(self.loaded_locales)}, "
            f"partial={len(self.partial_locales)}, "
            f"failed={len(self.failed_locales)})"
        )

    @property
    def results(self) -> tuple[AssetLoadResult, ...]:
        """Every asset result, flattened in load order."""
        return tuple(r for outcome in self.outcomes for r in outcome.results)

    @property
    def total_attempted(self) -> int:
        """Total number of asset load attempts."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of assets loaded."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        """Number of assets that did not exist."""
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        """Number of assets that failed to fetch or parse."""
        return sum(1 for r in self.results if r.is_error)

    def _locales_with(self, status: LocaleLoadStatus) -> tuple[LocaleCode, ...]:
        return tuple(o.locale for o in self.outcomes if o.status == status)

    @property
    def loaded_locales(self) -> tuple[LocaleCode, ...]:
        """Locales whose every asset loaded."""
        return self._locales_with(LocaleLoadStatus.LOADED)

    @property
    def partial_locales(self) -> tuple[LocaleCode, ...]:
        """Locales with some assets committed and some failed (merge mode)."""
        return self._locales_with(LocaleLoadStatus.PARTIAL)

    @property
    def failed_locales(self) -> tuple[LocaleCode, ...]:
        """Locales left untouched by this load."""
        return self._locales_with(LocaleLoadStatus.FAILED)

    @property
    def succeeded(self) -> bool:
        """True if every targeted locale fully loaded."""
        return all(o.status == LocaleLoadStatus.LOADED for o in self.outcomes)

    def outcome_for(self, locale: LocaleCode) -> LocaleLoadOutcome | None:
        """Outcome for one locale, or None if it was not targeted."""
        for outcome in self.outcomes:
            if outcome.locale == locale:
                return outcome
        return None

    def get_errors(self) -> tuple[AssetLoadResult, ...]:
        """All results that did not succeed (missing or failed)."""
        return tuple(r for r in self.results if not r.is_success)

    def get_by_locale(self, locale: LocaleCode) -> tuple[AssetLoadResult, ...]:
        """All results for a specific locale."""
        return tuple(r for r in self.results if r.locale == locale)
