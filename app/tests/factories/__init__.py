"""Test data factories for deterministic test data generation."""

from tests.factories.i18n import (
    make_catalog,
    make_namespace,
    make_translation_data,
    make_translator,
    zero_one_other_rules,
)

__all__ = [
    "make_catalog",
    "make_namespace",
    "make_translation_data",
    "make_translator",
    "zero_one_other_rules",
]
