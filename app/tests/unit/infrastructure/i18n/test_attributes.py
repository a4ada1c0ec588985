"""Tests for infrastructure.i18n.attributes module."""

from infrastructure.i18n import translatable_attributes, translate_attributes
from tests.factories.i18n import make_translator


class TestTranslateAttributes:
    """Tests for translate_attributes()."""

    def test_translates_each_attribute(self, translator):
        """Every attribute key is resolved."""
        result = translate_attributes(
            translator, {"title": "foo.bar", "alt": "baz.qux"}
        )
        assert result == {"title": "A Foobar", "alt": "A qux appears"}

    def test_params_shared(self, translator):
        """Params apply to every attribute."""
        result = translate_attributes(
            translator, {"title": "foo.bar.named"}, {"name": "Sue"}
        )
        assert result == {"title": "A Foobar named Sue"}

    def test_missing_key(self, translator):
        """Missing keys use the fallback text."""
        result = translate_attributes(translator, {"title": "nothing.here"})
        assert result == {"title": "Missing translation: nothing.here"}


class TestTranslatableAttributes:
    """Tests for translatable_attributes()."""

    def test_picks_translation_suffix(self, translator):
        """Only *Translation attributes are translated, with the suffix removed."""
        result = translatable_attributes(
            translator, {"titleTranslation": "foo.bar", "id": "x"}
        )
        assert result == {"title": "A Foobar"}

    def test_markup_returned_verbatim(self):
        """Markup in translations is not escaped."""
        translator = make_translator({"hint": "<b>Bold</b> & more"})
        result = translatable_attributes(translator, {"titleTranslation": "hint"})
        assert result == {"title": "<b>Bold</b> & more"}

    def test_none_values_skipped(self, translator):
        """Attributes with no key are ignored."""
        result = translatable_attributes(
            translator, {"titleTranslation": None, "altTranslation": "foo.bar"}
        )
        assert result == {"alt": "A Foobar"}

    def test_custom_suffix(self, translator):
        """The attribute suffix is configurable."""
        result = translatable_attributes(translator, {"titleKey": "foo.bar"}, "Key")
        assert result == {"title": "A Foobar"}
