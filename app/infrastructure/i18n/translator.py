"""Translation service for resolving keys into display strings.

Core component of the i18n system: looks a key up in the store, picks the
plural variant when the entry is a plural group, and interpolates params.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Union

from core.logging import get_module_logger
from infrastructure.i18n.exceptions import (
    InvalidCountError,
    MalformedEntryError,
    MissingCountError,
)
from infrastructure.i18n.interpolation import ValueFormatter, render
from infrastructure.i18n.loader import TranslationLoader, build_namespace
from infrastructure.i18n.models import (
    Literal,
    Namespace,
    PluralGroup,
    ResolvedOutput,
    TranslationCatalog,
)
from infrastructure.i18n.observable import (
    AttributeObserver,
    BindingDescriptor,
    PropertyObserver,
)
from infrastructure.i18n.plurals import Number, PluralResolver
from infrastructure.i18n.store import StoreSnapshot, TranslationStore

logger = get_module_logger()

DEFAULT_MISSING_PREFIX = "Missing translation: "

TranslationsSource = Union[TranslationCatalog, Namespace, Mapping[str, Any]]


def _parse_count(key: str, raw: Any) -> Number:
    """Read the ``count`` param as a number.

    Numeric strings (e.g. "597") are accepted.

    Raises:
        InvalidCountError: If the value is not a finite number.
    """
    if isinstance(raw, bool):
        raise InvalidCountError(f"count for '{key}' must be numeric, got bool", key=key)

    if isinstance(raw, str):
        text = raw.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            raw = Decimal(text)
        except InvalidOperation:
            raise InvalidCountError(
                f"count for '{key}' must be numeric, got {raw!r}", key=key
            ) from None

    if isinstance(raw, (int, float, Decimal)):
        if isinstance(raw, float) and not math.isfinite(raw):
            raise InvalidCountError(f"count for '{key}' must be finite", key=key)
        if isinstance(raw, Decimal) and not raw.is_finite():
            raise InvalidCountError(f"count for '{key}' must be finite", key=key)
        return raw

    raise InvalidCountError(
        f"count for '{key}' must be numeric, got {type(raw).__name__}", key=key
    )


class Translator:
    """Resolves translation keys against a swappable store.

    Attributes:
        store: Process-wide TranslationStore read by every resolution.
        plural_resolver: Selects plural variants via the locale-rule provider.
        loader: Optional TranslationLoader used by use_locale().
        observer: PropertyObserver used to read bound params in one-shot resolves.
        missing_prefix: Text placed before a key that has no translation.
        formatter: Optional value formatter handed to the interpolator.
    """

    def __init__(
        self,
        store: Optional[TranslationStore] = None,
        plural_resolver: Optional[PluralResolver] = None,
        loader: Optional[TranslationLoader] = None,
        observer: Optional[PropertyObserver] = None,
        missing_prefix: str = DEFAULT_MISSING_PREFIX,
        formatter: Optional[ValueFormatter] = None,
    ):
        self.store = store or TranslationStore()
        self.plural_resolver = plural_resolver or PluralResolver()
        self.loader = loader
        self.observer = observer or AttributeObserver()
        self.missing_prefix = missing_prefix
        self.formatter = formatter
        logger.info("initialized_translator", locale=self.store.locale)

    @property
    def locale(self) -> str:
        return self.store.locale

    def set_translations(
        self,
        translations: TranslationsSource,
        locale: Optional[str] = None,
    ) -> StoreSnapshot:
        """Atomically replace the whole dictionary.

        Args:
            translations: A TranslationCatalog, a Namespace root, or a raw
                nested mapping.
            locale: Active locale for the new dictionary. Defaults to the
                catalog's locale, or the current locale.

        Returns:
            The published store snapshot.
        """
        if isinstance(translations, TranslationCatalog):
            return self.store.replace(
                translations.root,
                locale=locale or translations.locale,
                errors=translations.errors,
            )
        if isinstance(translations, Namespace):
            return self.store.replace(translations, locale=locale)

        root, errors = build_namespace(translations)
        return self.store.replace(root, locale=locale, errors=errors)

    def set_locale(self, locale: str) -> StoreSnapshot:
        """Change the active locale without touching the dictionary."""
        return self.store.set_locale(locale)

    def use_locale(self, locale: str) -> StoreSnapshot:
        """Load ``locale`` from the loader and swap it in with its locale.

        Raises:
            ValueError: If the translator has no loader.
            FileNotFoundError: If the loader has no translations for the locale.
        """
        if self.loader is None:
            raise ValueError("Translator has no loader configured")
        catalog = self.loader.load(locale)
        return self.set_translations(catalog)

    def available_locales(self) -> List[str]:
        if self.loader is None:
            return [self.locale]
        return self.loader.available_locales()

    def has_message(self, key: str) -> bool:
        """Check whether ``key`` resolves to a terminal entry."""
        try:
            entry = self.store.lookup(key)
        except MalformedEntryError:
            return False
        return isinstance(entry, (Literal, PluralGroup))

    def current_values(self, params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Replace binding descriptors with their current values."""
        values: Dict[str, Any] = {}
        for name, value in (params or {}).items():
            if isinstance(value, BindingDescriptor):
                value = value.current_value(self.observer)
            values[name] = value
        return values

    def resolve_output(
        self,
        key: str,
        params: Optional[Mapping[str, Any]] = None,
        locale: Optional[str] = None,
    ) -> ResolvedOutput:
        """Resolve a key and report which params were used.

        Args:
            key: Dot-separated key path.
            params: Param name -> value or BindingDescriptor.
            locale: Locale for plural rules; defaults to the store's locale.

        Returns:
            ResolvedOutput. A missing key yields the fallback text with
            missing=True instead of raising.

        Raises:
            MalformedEntryError: If the key's entry is malformed.
            MissingCountError: If the key is plural and no count was given.
            InvalidCountError: If count is not numeric.
        """
        snapshot = self.store.snapshot()
        values = self.current_values(params)

        try:
            entry = snapshot.lookup(key)
        except MalformedEntryError as e:
            logger.error("malformed_translation_entry", key=key, error=str(e))
            raise

        if entry is None or isinstance(entry, Namespace):
            logger.warning(
                "translation_not_found",
                key=key,
                locale=snapshot.locale,
                is_namespace=entry is not None,
            )
            return ResolvedOutput(text=f"{self.missing_prefix}{key}", missing=True)

        if isinstance(entry, PluralGroup):
            if values.get("count") is None:
                logger.error("missing_plural_count", key=key)
                raise MissingCountError(
                    f"Translation '{key}' is plural and requires a count", key=key
                )
            count = _parse_count(key, values["count"])
            template = self.plural_resolver.select_variant(
                entry, count, locale or snapshot.locale
            )
        else:
            template = entry.text

        return render(template, values, self.formatter)

    def resolve(
        self,
        key: str,
        params: Optional[Mapping[str, Any]] = None,
        locale: Optional[str] = None,
    ) -> str:
        """Resolve a key into its display string.

        Example:
            >>> translator.resolve("foos", {"count": 21})
            'All 21 Foos'
        """
        return self.resolve_output(key, params, locale).text

    def t(self, key: str, **params: Any) -> str:
        """Shorthand for resolve() with keyword params."""
        return self.resolve(key, params)

    def reload(self) -> StoreSnapshot:
        """Reload the active locale from the loader, bypassing its cache."""
        if self.loader is None:
            raise ValueError("Translator has no loader configured")
        clear_cache = getattr(self.loader, "clear_cache", None)
        if clear_cache is not None:
            clear_cache()
        snapshot = self.use_locale(self.locale)
        logger.info("reloaded_translations", locale=self.locale)
        return snapshot
