import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `core.config`) works during pytest collection.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest  # noqa: E402

from core.config import I18nSettings, Settings  # noqa: E402


@pytest.fixture
def i18n_env(monkeypatch):
    """Clear I18N_* environment variables so settings use their defaults."""
    for name in (
        "I18N_DEFAULT_LOCALE",
        "I18N_TRANSLATIONS_DIR",
        "I18N_MISSING_PREFIX",
        "I18N_USE_CACHE",
        "I18N_PRELOAD",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def make_settings(i18n_env):
    """Build Settings without reading a local .env file."""

    def _make(**kwargs):
        i18n = I18nSettings(_env_file=None)
        return Settings(_env_file=None, i18n=i18n, **kwargs)

    return _make
