"""Feature-level fixtures for i18n system tests.

Provides translators, YAML fixtures and observable hosts for resolution and
live-binding scenarios.
"""

import pytest
import yaml

from infrastructure.i18n import (
    BindingAdapter,
    ObservableObject,
    UpdateCycle,
    YAMLTranslationLoader,
)
from tests.factories.i18n import (
    make_translation_data,
    make_translator,
)


@pytest.fixture
def translation_data():
    """Reference dictionary mixing flat and nested keys."""
    return make_translation_data()


@pytest.fixture
def translator():
    """Translator using the zero/one/other rule under locale 'ksh'."""
    return make_translator()


@pytest.fixture
def cycle():
    """Fresh update cycle so batches never leak between tests."""
    return UpdateCycle()


@pytest.fixture
def adapter(translator, cycle):
    """BindingAdapter over the reference translator."""
    return BindingAdapter(translator, cycle=cycle)


@pytest.fixture
def test_namespace():
    """Observable host standing in for a global namespace object."""
    return ObservableObject(count=3)


@pytest.fixture
def deliveries():
    """List collecting every on_change delivery."""
    return []


@pytest.fixture
def temp_translations_dir(tmp_path):
    """Create temporary directory with sample YAML translation files.

    Returns a directory structure like:
    - common.en.yml
    - cart.en.yml
    - fr.yml
    """
    en_common = {
        "common": {
            "welcome": "Welcome {{name}}",
            "loading": '<span class="loading">Loading…</span>',
        }
    }
    with open(tmp_path / "common.en.yml", "w", encoding="utf-8") as f:
        yaml.dump(en_common, f, allow_unicode=True)

    en_cart = {
        "cart": {
            "items": {"one": "One item", "other": "{{count}} items"},
        }
    }
    with open(tmp_path / "cart.en.yml", "w", encoding="utf-8") as f:
        yaml.dump(en_cart, f)

    fr = {
        "common": {"welcome": "Bienvenue {{name}}"},
        "cart": {"items": {"one": "{{count}} article", "other": "{{count}} articles"}},
    }
    with open(tmp_path / "fr.yml", "w", encoding="utf-8") as f:
        yaml.dump(fr, f, allow_unicode=True)

    return tmp_path


@pytest.fixture
def yaml_loader(temp_translations_dir):
    """Create YAMLTranslationLoader for temporary translations directory."""
    return YAMLTranslationLoader(temp_translations_dir, use_cache=False)
