"""
Exceptions raised by the translation lifecycle
"""


class LocaleSyncError(Exception):
    """Base class for all LocaleSync errors"""


class InvalidScopeError(LocaleSyncError, ValueError):
    """Unknown scope passed to a staleness predicate"""


class TranslationConfigError(LocaleSyncError):
    """Invalid `translates` registration or locale specification"""


class TranslationValidationError(LocaleSyncError):
    """Translation record failed validation at the store boundary"""


class TranslatorError(LocaleSyncError):
    """External translator failed or timed out"""


class TranslationDispatchError(LocaleSyncError):
    """A per-locale submission was aborted; nothing was merged"""
    
    def __init__(self, message: str, locale: str | None = None, attribute: str | None = None):
        super().__init__(message)
        self.locale = locale
        self.attribute = attribute


class RecordLockTimeout(LocaleSyncError):
    """Per-record lock could not be acquired in time"""
