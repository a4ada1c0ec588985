"""i18n system - translation resolution with plurals and live bindings.

Main components:
- models: Literal, PluralGroup, Namespace, ResolvedOutput, TranslationCatalog
- store: TranslationStore with atomic whole-store replacement
- plurals: PluralResolver and the Babel-backed CLDR rule provider
- interpolation: {{placeholder}} substitution
- translator: Translator, the resolution pipeline
- observable: PropertyObserver contract, ObservableObject, UpdateCycle, bind()
- bindings: BindingAdapter and LiveResolution for live re-resolution
- loader: build_namespace and YAMLTranslationLoader
"""

from infrastructure.i18n.attributes import translatable_attributes, translate_attributes
from infrastructure.i18n.bindings import (
    BindingAdapter,
    LiveResolution,
    parse_binding_params,
)
from infrastructure.i18n.exceptions import (
    InvalidCountError,
    MalformedEntryError,
    MissingCountError,
    TranslationConfigError,
    TranslationError,
)
from infrastructure.i18n.interpolation import interpolate, render
from infrastructure.i18n.loader import (
    TranslationLoader,
    YAMLTranslationLoader,
    build_catalog,
    build_namespace,
)
from infrastructure.i18n.models import (
    Literal,
    Namespace,
    PluralCategory,
    PluralGroup,
    ResolvedOutput,
    TranslationCatalog,
)
from infrastructure.i18n.observable import (
    AttributeObserver,
    BindingDescriptor,
    ObservableObject,
    PropertyObserver,
    UpdateCycle,
    bind,
    update_cycle,
)
from infrastructure.i18n.plurals import PluralResolver, cldr_plural_category
from infrastructure.i18n.store import StoreSnapshot, TranslationStore
from infrastructure.i18n.translator import Translator

__all__ = [
    "Literal",
    "PluralGroup",
    "Namespace",
    "PluralCategory",
    "ResolvedOutput",
    "TranslationCatalog",
    "TranslationStore",
    "StoreSnapshot",
    "PluralResolver",
    "cldr_plural_category",
    "interpolate",
    "render",
    "Translator",
    "PropertyObserver",
    "AttributeObserver",
    "ObservableObject",
    "UpdateCycle",
    "update_cycle",
    "BindingDescriptor",
    "bind",
    "BindingAdapter",
    "LiveResolution",
    "parse_binding_params",
    "translate_attributes",
    "translatable_attributes",
    "TranslationLoader",
    "YAMLTranslationLoader",
    "build_namespace",
    "build_catalog",
    "TranslationError",
    "TranslationConfigError",
    "MalformedEntryError",
    "MissingCountError",
    "InvalidCountError",
]
