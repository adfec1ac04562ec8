"""
Translation Merger - writes generated and manual values into translation
records without dropping each other's entries.
"""
from typing import Any, Dict, Optional
import logging

from localesync.core.exceptions import TranslationConfigError
from localesync.core.locks import record_lock
from localesync.models.translation import Translation
from localesync.services.staleness import is_blank
from localesync.services.translation_config import TranslationRegistry, as_entity, registry
from localesync.services.translation_store import TranslationStore

logger = logging.getLogger(__name__)


class TranslationMerger:
    """
    Read-modify-write of one translation record, serialized per
    (entity, locale) by record_lock.
    """
    
    def __init__(self, store: TranslationStore, translation_registry: Optional[TranslationRegistry] = None):
        self.store = store
        self.registry = translation_registry or registry
    
    def merge(
        self,
        entity,
        locale: str,
        fresh_attributes: Dict[str, Any],
        checksum: str
    ) -> Translation:
        """
        Overlay freshly generated values onto the stored ones and record the
        checksum they were generated from. The checksum is only recorded when
        an automatic attribute is among the fresh values.
        
        Args:
            entity: Translatable entity
            locale: Target locale
            fresh_attributes: attribute -> translated value
            checksum: Source checksum at submission time
        
        Returns:
            Saved Translation
        """
        entity = as_entity(entity)
        config = self.registry.config_for(entity)
        locale = str(locale)
        
        with record_lock(entity.translatable_type, entity.translatable_id, locale):
            translation, created = self.store.find_or_create(entity, locale, for_update=True)
            existing = dict(translation.translated_attributes or {})
            translation.translated_attributes = {**existing, **fresh_attributes}
            if set(fresh_attributes) & set(config.automatic_attributes):
                translation.source_checksum = checksum
            self.store.save(translation, config.automatic_attributes)
        
        logger.info(
            f"{'Created' if created else 'Updated'} {locale} translation of "
            f"{entity.translatable_type}#{entity.translatable_id}: {sorted(fresh_attributes)}"
        )
        return translation
    
    def set_manual_attribute(self, entity, attribute: str, locale: str, value: Any) -> Translation:
        """
        Store a manually translated value for one locale.
        
        Only that entry changes. The source checksum is left as it was, so
        an unset checksum stays unset until automatic content is written.
        
        Raises:
            TranslationConfigError: attribute is not a manual attribute
        """
        entity = as_entity(entity)
        config = self.registry.config_for(entity)
        if attribute not in config.manual_attributes:
            raise TranslationConfigError(
                f"{attribute} is not a manually translated attribute of {entity.translatable_type}"
            )
        locale = str(locale)
        
        with record_lock(entity.translatable_type, entity.translatable_id, locale):
            translation, _ = self.store.find_or_create(entity, locale, for_update=True)
            translated = dict(translation.translated_attributes or {})
            translated[attribute] = value
            translation.translated_attributes = translated
            self.store.save(translation, config.automatic_attributes)
        
        logger.info(f"Set manual {attribute} [{locale}] for {entity.translatable_type}#{entity.translatable_id}")
        return translation
    
    def read_attribute(self, entity, attribute: str, locale: Optional[str] = None) -> Any:
        """
        Value of an attribute for a locale.
        Falls back to the source value when there is no record for the
        locale or its stored value is blank. No locale means source value.
        """
        entity = as_entity(entity)
        config = self.registry.config_for(entity)
        if attribute not in config.all_attributes():
            raise TranslationConfigError(f"{attribute} is not a translated attribute of {entity.translatable_type}")
        
        source = entity.read_attribute(attribute)
        if locale is None:
            return source
        
        translation = self.store.find(entity, str(locale))
        if translation is None:
            return source
        
        value = (translation.translated_attributes or {}).get(attribute)
        return source if is_blank(value) else value
    
    def translation_for(self, entity, locale: str) -> Optional[Translation]:
        return self.store.find(as_entity(entity), str(locale))
