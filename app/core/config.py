"""Translation runtime configuration settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class I18nSettings(BaseSettings):
    """Translation dictionary and resolution settings.

    Environment Variables:
        I18N_DEFAULT_LOCALE: Locale used for plural rules until another is selected
        I18N_TRANSLATIONS_DIR: Directory holding YAML translation files
        I18N_MISSING_PREFIX: Text prepended to a key that has no translation
        I18N_USE_CACHE: Whether the YAML loader caches parsed locales
        I18N_PRELOAD: Whether the factory loads the default locale immediately
    """

    DEFAULT_LOCALE: str = Field(default="en", alias="I18N_DEFAULT_LOCALE")
    TRANSLATIONS_DIR: str = Field(default="", alias="I18N_TRANSLATIONS_DIR")
    MISSING_PREFIX: str = Field(
        default="Missing translation: ", alias="I18N_MISSING_PREFIX"
    )
    USE_CACHE: bool = Field(default=True, alias="I18N_USE_CACHE")
    PRELOAD: bool = Field(default=True, alias="I18N_PRELOAD")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings aggregator.

    Environment Variables:
        PREFIX: Environment prefix; empty means production
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    i18n: I18nSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        if "i18n" not in kwargs:
            kwargs["i18n"] = I18nSettings()
        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
