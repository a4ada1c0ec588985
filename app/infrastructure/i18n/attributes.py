"""Helpers for translating attribute values.

Rendering is left to the caller: these functions only map attribute names
to translated strings. Translations are returned as-is, without escaping.
"""

from typing import Any, Dict, Mapping, Optional

from infrastructure.i18n.translator import Translator

TRANSLATION_SUFFIX = "Translation"


def translate_attributes(
    translator: Translator,
    attributes: Mapping[str, str],
    params: Optional[Mapping[str, Any]] = None,
) -> Dict[str, str]:
    """Translate a mapping of attribute name -> translation key.

    Example:
        >>> translate_attributes(translator, {"title": "foo.bar"})
        {'title': 'A Foobar'}
    """
    return {
        name: translator.resolve(key, params) for name, key in attributes.items()
    }


def translatable_attributes(
    translator: Translator,
    attributes: Mapping[str, Any],
    suffix: str = TRANSLATION_SUFFIX,
) -> Dict[str, str]:
    """Translate the attributes whose name ends with ``suffix``.

    ``{"titleTranslation": "foo.bar", "id": "x"}`` gives ``{"title": "A Foobar"}``.
    Other attributes are ignored.
    """
    keys = {
        name[: -len(suffix)]: str(value)
        for name, value in attributes.items()
        if name.endswith(suffix) and len(name) > len(suffix) and value is not None
    }
    return translate_attributes(translator, keys)
