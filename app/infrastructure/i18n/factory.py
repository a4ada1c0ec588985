"""Factory functions for creating i18n components.

Provides convenience functions for initializing translators with default
configurations suitable for the application.
"""

from pathlib import Path
from typing import Optional

from core.config import settings
from core.logging import get_module_logger
from infrastructure.i18n.loader import YAMLTranslationLoader
from infrastructure.i18n.plurals import PluralResolver, PluralRuleProvider
from infrastructure.i18n.store import TranslationStore
from infrastructure.i18n.translator import Translator

logger = get_module_logger()


def _default_translations_dir() -> Path:
    # This file is at .../app/infrastructure/i18n/factory.py
    app_root = Path(__file__).resolve().parents[2]
    return app_root / "locales"


def create_translator(
    translations_dir: Optional[Path] = None,
    locale: Optional[str] = None,
    use_cache: Optional[bool] = None,
    preload: Optional[bool] = None,
    plural_rules: Optional[PluralRuleProvider] = None,
) -> Translator:
    """Create and configure a Translator instance.

    Unset arguments fall back to ``settings.i18n``. When no translations
    directory is configured, ``app/locales`` is used if it exists;
    otherwise the translator starts with an empty dictionary and no loader.

    Args:
        translations_dir: Path to YAML translation files.
        locale: Initial active locale.
        use_cache: Whether the loader caches parsed YAML.
        preload: Whether to load the initial locale immediately.
        plural_rules: Locale-rule provider; defaults to Babel CLDR rules.

    Returns:
        Translator: Configured translator instance.

    Usage:
        translator = create_translator()
        translator = create_translator(translations_dir=Path("/srv/locales"), locale="fr")
    """
    i18n_settings = settings.i18n
    locale = locale or i18n_settings.DEFAULT_LOCALE
    use_cache = i18n_settings.USE_CACHE if use_cache is None else use_cache
    preload = i18n_settings.PRELOAD if preload is None else preload

    if translations_dir is None and i18n_settings.TRANSLATIONS_DIR:
        translations_dir = Path(i18n_settings.TRANSLATIONS_DIR)

    loader = None
    if translations_dir is not None:
        loader = YAMLTranslationLoader(translations_dir, use_cache=use_cache)
    elif _default_translations_dir().exists():
        translations_dir = _default_translations_dir()
        loader = YAMLTranslationLoader(translations_dir, use_cache=use_cache)

    plural_resolver = (
        PluralResolver(plural_rules) if plural_rules is not None else PluralResolver()
    )
    translator = Translator(
        store=TranslationStore(locale=locale),
        plural_resolver=plural_resolver,
        loader=loader,
        missing_prefix=i18n_settings.MISSING_PREFIX,
    )

    if loader is not None and preload and locale in loader.available_locales():
        translator.use_locale(locale)
        logger.info(
            "translator_created_with_preload",
            translations_dir=str(translations_dir),
            locale=locale,
        )
    else:
        logger.info(
            "translator_created_lazy",
            translations_dir=str(translations_dir) if translations_dir else None,
            locale=locale,
        )

    return translator
