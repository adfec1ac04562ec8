"""
Staleness Evaluator - are an entity's translations outdated, missing, complete?
"""
from enum import Enum
from typing import List, Optional, Tuple, Union
import logging

from localesync.core.exceptions import InvalidScopeError
from localesync.services.checksum import translation_checksum
from localesync.services.locale_resolver import resolve_locales
from localesync.services.translation_config import TranslationConfig, TranslationRegistry, as_entity, registry
from localesync.services.translation_store import TranslationStore

logger = logging.getLogger(__name__)


class TranslationScope(str, Enum):
    """Which attributes a completeness check covers"""
    AUTOMATIC = "automatic"
    MANUAL = "manual"
    ALL = "all"
    
    @classmethod
    def parse(cls, value: Union[str, "TranslationScope", None]) -> "TranslationScope":
        """
        Resolve a scope or one of its synonyms.
        
        Raises:
            InvalidScopeError: unknown scope
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            scope = SCOPE_SYNONYMS.get(value.strip().lower())
            if scope is not None:
                return scope
        raise InvalidScopeError(
            f"Unknown translation scope {value!r}; expected one of {sorted(SCOPE_SYNONYMS)}"
        )


SCOPE_SYNONYMS = {
    "automatic": TranslationScope.AUTOMATIC,
    "auto": TranslationScope.AUTOMATIC,
    "automatic_only": TranslationScope.AUTOMATIC,
    "machine": TranslationScope.AUTOMATIC,
    "manual": TranslationScope.MANUAL,
    "manual_only": TranslationScope.MANUAL,
    "human": TranslationScope.MANUAL,
    "all": TranslationScope.ALL,
    "both": TranslationScope.ALL,
    "any": TranslationScope.ALL,
    "everything": TranslationScope.ALL,
}


def is_blank(value) -> bool:
    """None, empty and whitespace-only strings are blank"""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class StalenessEvaluator:
    """Outdated / missing / fully-translated predicates for one entity"""
    
    def __init__(self, store: TranslationStore, translation_registry: Optional[TranslationRegistry] = None):
        self.store = store
        self.registry = translation_registry or registry
    
    def _config(self, entity) -> TranslationConfig:
        return self.registry.config_for(entity)
    
    def current_checksum(self, entity) -> str:
        entity = as_entity(entity)
        return translation_checksum(entity, self._config(entity).automatic_attributes)
    
    def translations_outdated(self, entity) -> bool:
        """
        True if any stored translation was generated from different content.
        Locales without a record are not outdated.
        """
        entity = as_entity(entity)
        return bool(self.outdated_locales(entity))
    
    def outdated_locales(self, entity) -> List[str]:
        """
        Locales whose record was generated from different content.
        Types with manual attributes only have no generated content, so their
        records never go out of date.
        """
        entity = as_entity(entity)
        if not self._config(entity).automatic_attributes:
            return []
        checksum = self.current_checksum(entity)
        return [t.locale for t in self.store.for_entity(entity) if t.outdated(checksum)]
    
    def _attributes_for(self, config: TranslationConfig, scope: TranslationScope) -> Tuple[str, ...]:
        if scope is TranslationScope.AUTOMATIC:
            return config.automatic_attributes
        if scope is TranslationScope.MANUAL:
            return config.manual_attributes
        return config.all_attributes()
    
    def missing_translations(self, entity, scope="automatic") -> List[Tuple[str, str]]:
        """
        (locale, attribute) pairs that have a non-blank source value but no
        stored translation. Empty while the gate is closed.
        """
        scope = TranslationScope.parse(scope)
        entity = as_entity(entity)
        config = self._config(entity)
        
        if not config.conditions_met(entity):
            return []
        
        attributes = [
            name for name in self._attributes_for(config, scope)
            if not is_blank(entity.read_attribute(name))
        ]
        if not attributes:
            return []
        
        stored = {t.locale: (t.translated_attributes or {}) for t in self.store.for_entity(entity)}
        missing = []
        for locale in resolve_locales(entity, config):
            translated = stored.get(locale)
            for name in attributes:
                if translated is None or name not in translated:
                    missing.append((locale, name))
        return missing
    
    def translations_missing(self, entity, scope="automatic") -> bool:
        """
        True if a target locale lacks a record or an entry for a non-blank
        attribute in scope. False while the gate is closed (nothing required).
        """
        return bool(self.missing_translations(entity, scope))
    
    def fully_translated(self, entity, scope="automatic") -> bool:
        """
        Negation of translations_missing for the same scope.
        True while the gate is closed (nothing required).
        """
        scope = TranslationScope.parse(scope)
        entity = as_entity(entity)
        if not self._config(entity).conditions_met(entity):
            return True
        return not self.translations_missing(entity, scope)
