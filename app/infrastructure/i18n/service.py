"""Translation service for dependency injection.

Provides a class-based interface to the i18n system for easier DI and testing.
"""

from functools import lru_cache
from typing import Any, Mapping, Optional

from infrastructure.i18n.bindings import (
    BindingAdapter,
    LiveResolution,
    OnChange,
    parse_binding_params,
)
from infrastructure.i18n.factory import create_translator
from infrastructure.i18n.store import StoreSnapshot
from infrastructure.i18n.translator import TranslationsSource, Translator


class TranslationService:
    """Class-based translation service.

    Thin facade over a Translator and its BindingAdapter.

    Usage:
        service = TranslationService()
        service.set_translations({"bars": {"all": "All {{count}} Bars"}})
        service.t("bars.all", count=532)  # "All 532 Bars"

        handle = service.establish(
            "bars.all", {"count": bind(counter, "count")}, on_change=print
        )
        service.teardown(handle)
    """

    def __init__(
        self,
        translator: Optional[Translator] = None,
        adapter: Optional[BindingAdapter] = None,
    ):
        """Initialize translation service.

        Args:
            translator: Optional pre-configured Translator. If not provided,
                creates the default via factory.
            adapter: Optional BindingAdapter for live resolutions.
        """
        self._translator = translator or create_translator()
        self._adapter = adapter or BindingAdapter(self._translator)

    def resolve(
        self,
        key: str,
        params: Optional[Mapping[str, Any]] = None,
        locale: Optional[str] = None,
    ) -> str:
        """Resolve a key into its display string (one-shot)."""
        return self._translator.resolve(key, params, locale)

    def t(self, key: str, **params: Any) -> str:
        return self._translator.resolve(key, params)

    def establish(
        self,
        key: str,
        params: Optional[Mapping[str, Any]],
        on_change: OnChange,
        roots: Optional[Mapping[str, Any]] = None,
    ) -> LiveResolution:
        """Start a live resolution.

        Args:
            key: Translation key.
            params: Params; values may be BindingDescriptors, and names ending
                in "Binding" are read as "root.property" paths against roots.
            on_change: Called with the initial text and every changed text.
            roots: Objects addressable by path bindings.
        """
        if roots is not None and params:
            params = parse_binding_params(params, roots)
        return self._adapter.establish(key, params, on_change)

    def teardown(self, handle: LiveResolution) -> None:
        self._adapter.teardown(handle)

    def set_translations(
        self,
        translations: TranslationsSource,
        locale: Optional[str] = None,
    ) -> StoreSnapshot:
        """Atomically swap the whole dictionary."""
        return self._translator.set_translations(translations, locale)

    def use_locale(self, locale: str) -> StoreSnapshot:
        return self._translator.use_locale(locale)

    def has_message(self, key: str) -> bool:
        return self._translator.has_message(key)

    @property
    def translator(self) -> Translator:
        """Access underlying Translator instance."""
        return self._translator


@lru_cache
def get_translation_service() -> TranslationService:
    """Get the process-wide TranslationService singleton."""
    return TranslationService()
