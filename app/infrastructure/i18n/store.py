"""Process-wide translation dictionary with atomic whole-store replacement.

Readers never lock. Each replacement builds a complete immutable snapshot
and publishes it with a single reference assignment, so a lookup always
sees either the old dictionary or the new one.
"""

from dataclasses import dataclass, field
from threading import Lock
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from core.logging import get_module_logger
from infrastructure.i18n.exceptions import MalformedEntryError
from infrastructure.i18n.models import Namespace, TranslationEntry

logger = get_module_logger()


def split_key(key: str) -> Optional[list]:
    """Split a dotted key path, or return None if any segment is empty."""
    if not isinstance(key, str) or not key:
        return None
    segments = key.split(".")
    if any(not segment for segment in segments):
        return None
    return segments


def _index_entries(root: Namespace) -> Dict[str, TranslationEntry]:
    """Flatten a namespace tree into a full-path index.

    Child segments may themselves contain dots (flat keys such as
    ``"foo.bar.named"``); they are addressable by the joined path.
    """
    index: Dict[str, TranslationEntry] = {}

    def _walk(node: Namespace, prefix: str) -> None:
        for segment, child in node.children.items():
            path = f"{prefix}.{segment}" if prefix else segment
            if path in index and index[path] != child:
                logger.warning("duplicate_translation_path", path=path)
            index[path] = child
            if isinstance(child, Namespace):
                _walk(child, path)

    _walk(root, "")
    return index


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of the dictionary at one point in time.

    Attributes:
        root: Top-level namespace.
        locale: Active locale used for plural rules.
        index: Full dotted path -> entry.
        errors: Full dotted path -> configuration error recorded at load time.
        version: Monotonic replacement counter.
    """

    root: Namespace
    locale: str
    index: Mapping[str, TranslationEntry] = field(default_factory=dict)
    errors: Mapping[str, MalformedEntryError] = field(default_factory=dict)
    version: int = 0

    def lookup(self, key: str) -> Optional[TranslationEntry]:
        """Find the entry for a dotted key path.

        Args:
            key: Dot-separated path (e.g. "foo.bar").

        Returns:
            The entry (possibly a Namespace), or None when not found.

        Raises:
            MalformedEntryError: If the key's raw data was malformed.
        """
        if split_key(key) is None:
            return None
        error = self.errors.get(key)
        if error is not None:
            # Stored errors are shared across readers; raise a fresh copy each time.
            raise MalformedEntryError(str(error), key=key) from None
        return self.index.get(key)


class TranslationStore:
    """Holder for the current dictionary snapshot.

    Usage:
        store = TranslationStore(locale="en")
        store.replace(build_namespace({"foo": {"bar": "A Foobar"}}), locale="en")
        store.lookup("foo.bar")  # Literal(text="A Foobar")
    """

    def __init__(
        self,
        root: Optional[Namespace] = None,
        locale: str = "en",
        errors: Optional[Mapping[str, MalformedEntryError]] = None,
    ):
        self._write_lock = Lock()
        self._snapshot = self._build(root or Namespace(), locale, errors or {}, 0)

    @staticmethod
    def _build(
        root: Namespace,
        locale: str,
        errors: Mapping[str, MalformedEntryError],
        version: int,
    ) -> StoreSnapshot:
        return StoreSnapshot(
            root=root,
            locale=locale,
            index=MappingProxyType(_index_entries(root)),
            errors=MappingProxyType(dict(errors)),
            version=version,
        )

    def snapshot(self) -> StoreSnapshot:
        """Return the current snapshot. Callers should read it once per operation."""
        return self._snapshot

    @property
    def locale(self) -> str:
        return self._snapshot.locale

    def lookup(self, key: str) -> Optional[TranslationEntry]:
        return self._snapshot.lookup(key)

    def replace(
        self,
        root: Namespace,
        locale: Optional[str] = None,
        errors: Optional[Mapping[str, MalformedEntryError]] = None,
    ) -> StoreSnapshot:
        """Atomically swap the whole dictionary.

        Args:
            root: New top-level namespace.
            locale: New active locale; keeps the current one when omitted.
            errors: Per-key configuration errors found while building root.

        Returns:
            The newly published snapshot.
        """
        if not isinstance(root, Namespace):
            raise TypeError(f"Store root must be a Namespace, got {type(root).__name__}")

        with self._write_lock:
            current = self._snapshot
            new_snapshot = self._build(
                root,
                locale if locale is not None else current.locale,
                errors or {},
                current.version + 1,
            )
            self._snapshot = new_snapshot

        logger.info(
            "translations_replaced",
            locale=new_snapshot.locale,
            key_count=len(new_snapshot.index),
            error_count=len(new_snapshot.errors),
            version=new_snapshot.version,
        )
        return new_snapshot

    def set_locale(self, locale: str) -> StoreSnapshot:
        """Switch the active locale while keeping the current dictionary."""
        with self._write_lock:
            current = self._snapshot
            new_snapshot = StoreSnapshot(
                root=current.root,
                locale=locale,
                index=current.index,
                errors=current.errors,
                version=current.version + 1,
            )
            self._snapshot = new_snapshot
        logger.info("active_locale_changed", locale=locale)
        return new_snapshot
