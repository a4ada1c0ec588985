"""Custom exceptions for the translation system.

Only misconfiguration surfaces as an exception. A missing key or an
unresolved placeholder degrades to display text instead of raising.
"""

from typing import Optional


class TranslationError(Exception):
    """Base exception for all translation errors.

    Example:
        try:
            translator.resolve("cart.items", {})
        except TranslationError as e:
            logger.error("translation_error", error=str(e))
    """

    pass


class TranslationConfigError(TranslationError):
    """Raised when the dictionary or the caller is misconfigured."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class MalformedEntryError(TranslationConfigError):
    """Raised when a dictionary entry has an invalid shape.

    Example:
        >>> PluralGroup({"one": "A fum"})
        Traceback (most recent call last):
        ...
        MalformedEntryError: Plural group is missing the 'other' variant
    """

    pass


class MissingCountError(TranslationConfigError):
    """Raised when a plural key is resolved without a ``count`` param."""

    pass


class InvalidCountError(TranslationConfigError):
    """Raised when ``count`` cannot be read as a number."""

    pass
