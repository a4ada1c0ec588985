"""Tests for infrastructure.i18n.plurals module."""

from decimal import Decimal

import pytest

from infrastructure.i18n import PluralGroup, PluralResolver, cldr_plural_category
from infrastructure.i18n.exceptions import MalformedEntryError
from tests.factories.i18n import zero_one_other_rules


class TestCldrPluralCategory:
    """Tests for the Babel-backed rule provider."""

    @pytest.mark.parametrize(
        "locale,count,expected",
        [
            ("en", 1, "one"),
            ("en", 0, "other"),
            ("en", 2, "other"),
            ("en-US", 1, "one"),
            ("ar", 0, "zero"),
            ("ar", 2, "two"),
            ("ar", 5, "few"),
            ("ar", 11, "many"),
            ("ja", 1, "other"),
        ],
    )
    def test_categories(self, locale, count, expected):
        """cldr_plural_category() follows CLDR data for each locale."""
        assert cldr_plural_category(locale, count) == expected

    def test_unknown_locale_is_other(self):
        """Unknown locales never fail and yield other."""
        assert cldr_plural_category("xx-not-a-locale", 1) == "other"

    def test_decimal_count(self):
        """Decimal counts are accepted."""
        assert cldr_plural_category("en", Decimal("1")) == "one"


class TestPluralResolver:
    """Tests for PluralResolver.select_variant()."""

    @pytest.fixture
    def group(self):
        return PluralGroup(
            {"zero": "No Xs", "one": "One X", "other": "{{count}} Xs"}
        )

    @pytest.fixture
    def resolver(self):
        return PluralResolver(zero_one_other_rules)

    def test_zero(self, resolver, group):
        """select_variant() uses the zero form when the rule says so."""
        assert resolver.select_variant(group, 0, "ksh") == "No Xs"

    def test_one(self, resolver, group):
        """select_variant() uses the one form when the rule says so."""
        assert resolver.select_variant(group, 1, "ksh") == "One X"

    def test_other(self, resolver, group):
        """select_variant() uses other for remaining counts."""
        assert resolver.select_variant(group, 21, "ksh") == "{{count}} Xs"

    def test_falls_back_to_other(self, resolver):
        """A category without a variant falls back to other."""
        group = PluralGroup({"other": "{{count}} Xs"})
        assert resolver.select_variant(group, 0, "ksh") == "{{count}} Xs"
        assert resolver.select_variant(group, 1, "ksh") == "{{count}} Xs"

    def test_unknown_provider_answer_is_other(self, group):
        """A provider answer outside the closed set is treated as other."""
        resolver = PluralResolver(lambda locale, count: "plenty")
        assert resolver.select_variant(group, 0, "ksh") == "{{count}} Xs"

    def test_counts_passed_through_unchanged(self, group):
        """Negative and fractional counts reach the provider as given."""
        seen = []

        def provider(locale, count):
            seen.append((locale, count))
            return "other"

        resolver = PluralResolver(provider)
        resolver.select_variant(group, -1, "fr")
        resolver.select_variant(group, 1.5, "fr")
        assert seen == [("fr", -1), ("fr", 1.5)]

    def test_missing_other_raises(self, resolver):
        """A group that lost its other variant is a configuration error."""
        group = PluralGroup({"one": "One X", "other": "Xs"})
        object.__setattr__(group, "variants", {"one": "One X"})
        with pytest.raises(MalformedEntryError):
            resolver.select_variant(group, 5, "ksh")

    def test_default_provider_is_cldr(self, group):
        """PluralResolver defaults to the CLDR provider."""
        resolver = PluralResolver()
        assert resolver.select_variant(group, 1, "en") == "One X"
        assert resolver.select_variant(group, 0, "en") == "{{count}} Xs"
