"""Translation loading interface and implementations.

Turns raw nested mappings into namespace trees and provides a YAML-based
loader for per-locale dictionary files.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

import yaml

from core.logging import get_module_logger
from infrastructure.i18n.exceptions import MalformedEntryError
from infrastructure.i18n.models import (
    PLURAL_TAGS,
    Literal,
    Namespace,
    PluralGroup,
    TranslationCatalog,
    TranslationEntry,
)

logger = get_module_logger()


def _group_plural_suffixes(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Fold flat ``base.<tag>`` keys into a nested ``base`` mapping.

    ``{"foos.one": "One Foo", "foos.other": "..."}`` becomes
    ``{"foos": {"one": "One Foo", "other": "..."}}``. A base that already
    holds a string keeps its string and the suffixed keys stay flat.
    """
    result: Dict[str, Any] = {}
    grouped: Dict[str, Dict[str, Any]] = {}

    for key, value in data.items():
        if isinstance(key, str) and "." in key and isinstance(value, str):
            base, _, tag = key.rpartition(".")
            if tag in PLURAL_TAGS and base:
                grouped.setdefault(base, {})[tag] = value
                continue
        result[key] = value

    for base, variants in grouped.items():
        existing = result.get(base)
        if existing is None:
            result[base] = variants
        elif isinstance(existing, Mapping):
            result[base] = {**existing, **variants}
        else:
            logger.warning("plural_suffix_conflict", key=base)
            for tag, text in variants.items():
                result[f"{base}.{tag}"] = text

    return result


def _is_plural_shaped(value: Mapping) -> bool:
    return bool(value) and all(key in PLURAL_TAGS for key in value)


def _build_children(
    data: Mapping[str, Any],
    prefix: str,
    errors: Dict[str, MalformedEntryError],
) -> Dict[str, TranslationEntry]:
    children: Dict[str, TranslationEntry] = {}

    for segment, value in _group_plural_suffixes(data).items():
        path = f"{prefix}.{segment}" if prefix else str(segment)

        if not isinstance(segment, str) or not segment or "" in segment.split("."):
            errors[path] = MalformedEntryError(
                f"Invalid key segment at '{path}'", key=path
            )
            logger.error("invalid_translation_key", key=path)
            continue

        if isinstance(value, str):
            children[segment] = Literal(value)
        elif isinstance(value, bool) or value is None:
            errors[path] = MalformedEntryError(
                f"Unsupported value for '{path}': {value!r}", key=path
            )
            logger.error("invalid_translation_value", key=path, value=repr(value))
        elif isinstance(value, (int, float)):
            children[segment] = Literal(str(value))
        elif isinstance(value, Mapping):
            if _is_plural_shaped(value):
                try:
                    children[segment] = PluralGroup(dict(value))
                except MalformedEntryError as e:
                    errors[path] = MalformedEntryError(
                        f"Malformed plural group at '{path}': {e}", key=path
                    )
                    logger.error("malformed_plural_group", key=path, error=str(e))
            else:
                children[segment] = Namespace(_build_children(value, path, errors))
        else:
            errors[path] = MalformedEntryError(
                f"Unsupported value for '{path}': {type(value).__name__}", key=path
            )
            logger.error(
                "invalid_translation_value",
                key=path,
                value_type=type(value).__name__,
            )

    return children


def build_namespace(
    data: Mapping[str, Any],
) -> Tuple[Namespace, Dict[str, MalformedEntryError]]:
    """Build a namespace tree from a raw nested mapping.

    Nested mappings and flat dotted keys may be mixed. A mapping whose keys
    are all plural tags becomes a PluralGroup. Entries that cannot be built
    are left out of the tree and reported per key.

    Args:
        data: Raw dictionary, e.g. parsed from YAML.

    Returns:
        Tuple of (root namespace, path -> MalformedEntryError).

    Example:
        root, errors = build_namespace({
            "foo.bar": "A Foobar",
            "fum": {"one": "A fum", "other": "{{count}} fums"},
        })
    """
    if not isinstance(data, Mapping):
        raise MalformedEntryError(
            f"Translation data must be a mapping, got {type(data).__name__}"
        )
    errors: Dict[str, MalformedEntryError] = {}
    root = Namespace(_build_children(data, "", errors))
    return root, errors


def build_catalog(locale: str, data: Mapping[str, Any]) -> TranslationCatalog:
    """Build a TranslationCatalog for ``locale`` from raw data."""
    root, errors = build_namespace(data)
    return TranslationCatalog(
        locale=locale,
        root=root,
        errors=errors,
        loaded_at=datetime.now(timezone.utc).isoformat(),
    )


def _deep_merge(target: Dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, Mapping):
            _deep_merge(existing, value)
        elif isinstance(value, Mapping):
            target[key] = {}
            _deep_merge(target[key], value)
        else:
            target[key] = value


class TranslationLoader(ABC):
    """Abstract base for translation loaders."""

    @abstractmethod
    def load(self, locale: str) -> TranslationCatalog:
        """Load translations for a specific locale.

        Raises:
            FileNotFoundError: If no translations exist for the locale.
            ValueError: If the translation source cannot be parsed.
        """
        pass

    @abstractmethod
    def available_locales(self) -> List[str]:
        """List locales this loader can provide."""
        pass

    def load_all(self) -> Dict[str, TranslationCatalog]:
        """Load translations for every available locale."""
        result = {}
        for locale in self.available_locales():
            try:
                result[locale] = self.load(locale)
            except FileNotFoundError:
                logger.warning("could_not_load_locale", locale=locale)
        return result


class YAMLTranslationLoader(TranslationLoader):
    """Loader for YAML-based translation files.

    Expects files named ``<locale>.yml`` or ``<domain>.<locale>.yml`` in the
    translations directory. All files for a locale are deep-merged in
    filename order.

    Attributes:
        translations_dir: Path to directory containing YAML files.
        cache: Loaded catalogs by locale (when use_cache is True).
    """

    SUFFIXES = (".yml", ".yaml")

    def __init__(self, translations_dir: Path, use_cache: bool = True):
        self.translations_dir = Path(translations_dir)
        self.use_cache = use_cache
        self.cache: Dict[str, TranslationCatalog] = {}

        if not self.translations_dir.exists():
            raise ValueError(
                f"Translations directory not found: {self.translations_dir}"
            )

        logger.info(
            "initialized_yaml_loader",
            translations_dir=str(self.translations_dir),
            use_cache=use_cache,
        )

    def _yaml_files(self) -> List[Path]:
        return sorted(
            path
            for path in self.translations_dir.iterdir()
            if path.is_file() and path.suffix in self.SUFFIXES
        )

    @staticmethod
    def _locale_of(path: Path) -> str:
        # "incident.en-US.yml" -> "en-US", "ksh.yml" -> "ksh"
        return path.stem.split(".")[-1]

    def available_locales(self) -> List[str]:
        return sorted({self._locale_of(path) for path in self._yaml_files()})

    def load(self, locale: str) -> TranslationCatalog:
        """Load and build the catalog for a locale.

        Raises:
            FileNotFoundError: If no YAML files exist for the locale.
            ValueError: If a file is not valid YAML or not a mapping.
        """
        if self.use_cache and locale in self.cache:
            logger.debug("loaded_from_cache", locale=locale)
            return self.cache[locale]

        yaml_files = [
            path for path in self._yaml_files() if self._locale_of(path) == locale
        ]
        if not yaml_files:
            raise FileNotFoundError(
                f"No translation files found for locale {locale} in {self.translations_dir}"
            )

        merged: Dict[str, Any] = {}
        for yaml_file in yaml_files:
            try:
                with open(yaml_file, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                logger.error("yaml_parse_error", file=str(yaml_file), error=str(e))
                raise ValueError(f"Failed to parse {yaml_file}: {e}") from e

            if data is None:
                continue
            if not isinstance(data, Mapping):
                logger.error(
                    "invalid_yaml_format", file=str(yaml_file), expected="mapping"
                )
                raise ValueError(f"Translation file {yaml_file} must contain a mapping")
            _deep_merge(merged, data)

        catalog = build_catalog(locale, merged)

        logger.info(
            "loaded_translations",
            locale=locale,
            file_count=len(yaml_files),
            error_count=len(catalog.errors),
        )

        if self.use_cache:
            self.cache[locale] = catalog

        return catalog

    def clear_cache(self) -> None:
        """Clear all cached catalogs."""
        self.cache.clear()
        logger.info("cleared_translation_cache")
