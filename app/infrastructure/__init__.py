"""Infrastructure modules for the translation runtime.

Components:
- i18n: Translation store, resolution pipeline and live bindings
"""
