"""Plural variant selection.

The resolver only picks a variant from a PluralGroup. Which category a
count falls into is decided by an external locale-rule provider; the
default provider reads CLDR rules from Babel.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Callable, Union

from babel.core import Locale as BabelLocale
from babel.core import UnknownLocaleError

from core.logging import get_module_logger
from infrastructure.i18n.exceptions import MalformedEntryError
from infrastructure.i18n.models import PluralCategory, PluralGroup

logger = get_module_logger()

Number = Union[int, float, Decimal]

PluralRuleProvider = Callable[[str, Number], str]
"""Signature of a locale-rule provider: (locale, count) -> category tag."""


@lru_cache(maxsize=128)
def _babel_locale(locale: str) -> BabelLocale:
    return BabelLocale.parse(locale.replace("-", "_"))


def cldr_plural_category(locale: str, count: Number) -> str:
    """Select the CLDR plural category for a count using Babel's data.

    Args:
        locale: Locale identifier (e.g. "en", "fr-FR", "ksh").
        count: Number to categorize.

    Returns:
        One of "zero", "one", "two", "few", "many", "other". Unknown or
        unparsable locales yield "other".

    Examples:
        >>> cldr_plural_category("en", 1)
        'one'
        >>> cldr_plural_category("ar", 2)
        'two'
        >>> cldr_plural_category("ja", 42)
        'other'
    """
    try:
        locale_obj = _babel_locale(locale)
    except (UnknownLocaleError, ValueError, TypeError, AttributeError):
        logger.warning("unknown_plural_locale", locale=locale)
        return PluralCategory.OTHER.value
    return locale_obj.plural_form(count)


class PluralResolver:
    """Selects the variant of a plural group for a count and locale.

    Attributes:
        provider: Locale-rule provider returning a category tag.
    """

    def __init__(self, provider: PluralRuleProvider = cldr_plural_category):
        self.provider = provider

    def category(self, count: Number, locale: str) -> PluralCategory:
        return PluralCategory.coerce(self.provider(locale, count))

    def select_variant(self, entry: PluralGroup, count: Number, locale: str) -> str:
        """Pick the template for ``count`` from ``entry``.

        Falls back to the "other" variant when the provider's category has no
        variant in the group.

        Raises:
            MalformedEntryError: If the group has no "other" variant.
        """
        category = self.category(count, locale)
        variant = entry.get(category)
        if variant is not None:
            return variant

        fallback = entry.get(PluralCategory.OTHER)
        if fallback is None:
            raise MalformedEntryError("Plural group is missing the 'other' variant")

        logger.debug(
            "plural_variant_fallback",
            category=category.value,
            locale=locale,
        )
        return fallback
