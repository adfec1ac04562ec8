"""
Resolve a config's locale specification for one entity
"""
from typing import List, Optional

from localesync.core.config import settings
from localesync.core.exceptions import TranslationConfigError
from localesync.services.translation_config import ALL_LOCALES, TranslationConfig


def all_locales_except_default(
    available: Optional[List[str]] = None,
    default: Optional[str] = None,
) -> List[str]:
    """Configured locales minus the default, in configured order"""
    available = settings.AVAILABLE_LOCALES if available is None else available
    default = settings.DEFAULT_LOCALE if default is None else default
    return [str(locale) for locale in available if str(locale) != str(default)]


def resolve_locales(entity, config: TranslationConfig) -> List[str]:
    """
    Target locales for an entity.
    
    Fixed lists come back verbatim (order and duplicates kept). A method name
    is looked up on the entity and called; a callable receives the entity.
    
    Raises:
        TranslationConfigError: resolver returned something that isn't a list of locales
    """
    spec = config.locales
    
    if isinstance(spec, str) and spec == ALL_LOCALES:
        return all_locales_except_default()
    
    if isinstance(spec, (list, tuple)):
        return [str(locale) for locale in spec]
    
    if isinstance(spec, str):
        result = getattr(entity, spec)
        if callable(result):
            result = result()
    elif callable(spec):
        result = spec(entity)
    else:
        raise TranslationConfigError(f"{config.translatable_type}: unsupported locale specification {spec!r}")
    
    if result is None:
        return []
    if isinstance(result, str) and result == ALL_LOCALES:
        return all_locales_except_default()
    if isinstance(result, (str, bytes)) or not hasattr(result, "__iter__"):
        raise TranslationConfigError(
            f"{config.translatable_type}: locale resolver must return a list of locales, got {result!r}"
        )
    return [str(locale) for locale in result]
