"""Tests for infrastructure.i18n.store module."""

import threading

import pytest

from infrastructure.i18n import Literal, Namespace, PluralGroup, TranslationStore
from infrastructure.i18n.exceptions import MalformedEntryError
from infrastructure.i18n.store import split_key
from tests.factories.i18n import make_catalog, make_namespace


class TestSplitKey:
    """Tests for split_key()."""

    def test_splits_on_dots(self):
        """split_key() splits a dotted path into segments."""
        assert split_key("baz.qux") == ["baz", "qux"]

    @pytest.mark.parametrize("key", ["", ".", "baz.", ".baz", "baz..qux"])
    def test_empty_segments(self, key):
        """split_key() rejects keys with empty segments."""
        assert split_key(key) is None


class TestTranslationStoreLookup:
    """Tests for TranslationStore.lookup()."""

    @pytest.fixture
    def store(self):
        return TranslationStore(make_namespace(), locale="ksh")

    def test_nested_literal(self, store):
        """lookup() walks nested namespaces."""
        assert store.lookup("baz.qux") == Literal("A qux appears")

    def test_flat_dotted_literal(self, store):
        """lookup() finds keys written flat with dots."""
        assert store.lookup("foo.bar") == Literal("A Foobar")
        assert store.lookup("foo.bar.named") == Literal("A Foobar named {{name}}")

    def test_plural_group(self, store):
        """lookup() returns plural groups as terminal entries."""
        entry = store.lookup("fum")
        assert isinstance(entry, PluralGroup)
        assert entry.get("one") == "A fum"

    def test_flat_plural_suffixes_grouped(self, store):
        """Flat foos.zero/foos.one/foos.other keys form one plural group."""
        entry = store.lookup("foos")
        assert isinstance(entry, PluralGroup)
        assert dict(entry.variants) == {
            "zero": "No Foos",
            "one": "One Foo",
            "other": "All {{count}} Foos",
        }

    def test_namespace_is_returned(self, store):
        """lookup() returns a Namespace for a non-terminal path."""
        assert isinstance(store.lookup("baz"), Namespace)

    def test_segment_miss(self, store):
        """lookup() returns None as soon as a segment is missing."""
        assert store.lookup("nothing.here") is None
        assert store.lookup("baz.qux.deeper") is None

    def test_no_partial_match(self, store):
        """lookup() does not fall back to a shorter prefix."""
        assert store.lookup("baz.quux") is None

    @pytest.mark.parametrize("key", ["", "baz.", ".qux", "baz..qux"])
    def test_empty_segment_not_found(self, store, key):
        """lookup() treats empty segments as not found."""
        assert store.lookup(key) is None

    def test_malformed_key_raises(self):
        """lookup() raises the recorded error for a malformed key only."""
        catalog = make_catalog(data={"ok": "fine", "broken": {"one": "just one"}})
        store = TranslationStore(catalog.root, locale="en", errors=catalog.errors)

        with pytest.raises(MalformedEntryError):
            store.lookup("broken")
        assert store.lookup("ok") == Literal("fine")


class TestTranslationStoreReplace:
    """Tests for TranslationStore.replace()."""

    def test_replace_swaps_dictionary(self):
        """replace() makes the new dictionary visible to later lookups."""
        store = TranslationStore(make_namespace({"greeting": "Hello"}), locale="en")
        store.replace(make_namespace({"greeting": "Bonjour"}), locale="fr")

        assert store.lookup("greeting") == Literal("Bonjour")
        assert store.locale == "fr"

    def test_replace_keeps_locale_when_omitted(self):
        """replace() keeps the active locale when none is given."""
        store = TranslationStore(locale="ar")
        store.replace(make_namespace({"greeting": "Hello"}))
        assert store.locale == "ar"

    def test_replace_bumps_version(self):
        """Each replace() publishes a new snapshot version."""
        store = TranslationStore()
        first = store.snapshot()
        second = store.replace(make_namespace({"a": "b"}))
        assert second.version == first.version + 1
        assert store.snapshot() is second

    def test_old_snapshot_unchanged(self):
        """A snapshot taken before replace() still reads the old data."""
        store = TranslationStore(make_namespace({"greeting": "Hello"}))
        before = store.snapshot()
        store.replace(make_namespace({"greeting": "Bonjour"}))
        assert before.lookup("greeting") == Literal("Hello")

    def test_replace_rejects_non_namespace(self):
        """replace() requires a Namespace root."""
        store = TranslationStore()
        with pytest.raises(TypeError):
            store.replace({"greeting": "Hello"})

    def test_set_locale(self):
        """set_locale() keeps entries and changes the locale."""
        store = TranslationStore(make_namespace({"greeting": "Hello"}), locale="en")
        store.set_locale("fr")
        assert store.locale == "fr"
        assert store.lookup("greeting") == Literal("Hello")

    def test_no_torn_reads_during_swaps(self):
        """Concurrent readers only ever see one complete dictionary."""
        old = make_namespace({"a": "old", "b": "old", "c": "old"})
        new = make_namespace({"a": "new", "b": "new", "c": "new"})
        store = TranslationStore(old)
        torn = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                snapshot = store.snapshot()
                texts = {snapshot.lookup(key).text for key in ("a", "b", "c")}
                if len(texts) != 1:
                    torn.append(texts)

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for thread in readers:
            thread.start()
        for i in range(500):
            store.replace(new if i % 2 == 0 else old)
        stop.set()
        for thread in readers:
            thread.join()

        assert torn == []
