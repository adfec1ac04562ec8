"""
Translation Service - entry point tying together store, staleness,
lifecycle, merger and dispatcher for one database session.
"""
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from localesync.core.tasks import BaseTaskQueue, InMemoryTaskQueue, TranslationTask
from localesync.models.translation import Translation
from localesync.services.dispatcher import TranslationDispatcher
from localesync.services.entity_store import EntityStore
from localesync.services.lifecycle import TranslationLifecycle
from localesync.services.locale_resolver import resolve_locales
from localesync.services.merger import TranslationMerger
from localesync.services.staleness import StalenessEvaluator
from localesync.services.translation_config import TranslationRegistry, as_entity, registry
from localesync.services.translation_store import TranslationStore
from localesync.services.translator import BaseTranslator, get_translator

logger = logging.getLogger(__name__)


class TranslationService:
    """
    Translation lifecycle for the entities of one session.
    
    Without an explicit queue an InMemoryTaskQueue is used, whose
    handler is this service's dispatcher.
    """
    
    def __init__(
        self,
        db: Session,
        queue: Optional[BaseTaskQueue] = None,
        translator: Optional[BaseTranslator] = None,
        translation_registry: Optional[TranslationRegistry] = None
    ):
        self.db = db
        self.registry = translation_registry or registry
        self.translator = translator or get_translator()
        
        self.store = TranslationStore(db)
        self.staleness = StalenessEvaluator(self.store, self.registry)
        self.merger = TranslationMerger(self.store, self.registry)
        self.dispatcher = TranslationDispatcher(db, self.translator, self.merger, self.registry)
        
        self.queue = queue if queue is not None else InMemoryTaskQueue()
        if self.queue.handler is None:
            self.queue.handler = self.dispatcher.perform_task
        
        self.lifecycle = TranslationLifecycle(self.store, self.staleness, self.queue, self.registry)
        self.entities = EntityStore(db, self.lifecycle, self.registry)
    
    # Lifecycle
    
    def translate_if_needed(self, entity, changed=()) -> List[TranslationTask]:
        return self.lifecycle.translate_if_needed(entity, changed)
    
    def translate(self, entity, locale: Optional[str] = None) -> List[TranslationTask]:
        return self.lifecycle.translate(entity, locale)
    
    def translate_now(self, entity, locale: Optional[str] = None) -> List[TranslationTask]:
        return self.lifecycle.translate_now(entity, locale)
    
    # Staleness
    
    def translation_checksum(self, entity) -> str:
        return self.staleness.current_checksum(entity)
    
    def translations_outdated(self, entity) -> bool:
        return self.staleness.translations_outdated(entity)
    
    def translations_missing(self, entity, scope="automatic") -> bool:
        return self.staleness.translations_missing(entity, scope)
    
    def fully_translated(self, entity, scope="automatic") -> bool:
        return self.staleness.fully_translated(entity, scope)
    
    # Attributes
    
    def translatable_locales(self, entity) -> List[str]:
        entity = as_entity(entity)
        return resolve_locales(entity, self.registry.config_for(entity))
    
    def read_attribute(self, entity, attribute: str, locale: Optional[str] = None) -> Any:
        return self.merger.read_attribute(entity, attribute, locale)
    
    def set_manual_attribute(self, entity, attribute: str, locale: str, value: Any) -> Translation:
        return self.merger.set_manual_attribute(entity, attribute, locale, value)
    
    def translation_for(self, entity, locale: str) -> Optional[Translation]:
        return self.merger.translation_for(entity, locale)
    
    def translations(self, entity) -> List[Translation]:
        return self.store.for_entity(as_entity(entity))
    
    def status(self, entity) -> Dict[str, Any]:
        """
        Summary used by the admin API.
        
        Returns:
            Dict with checksum, target locales, outdated/missing details
        """
        entity = as_entity(entity)
        config = self.registry.config_for(entity)
        return {
            "translatable_type": entity.translatable_type,
            "translatable_id": entity.translatable_id,
            "checksum": self.staleness.current_checksum(entity),
            "conditions_met": config.conditions_met(entity),
            "locales": resolve_locales(entity, config),
            "outdated_locales": self.staleness.outdated_locales(entity),
            "missing": [
                {"locale": locale, "attribute": attribute}
                for locale, attribute in self.staleness.missing_translations(entity, "all")
            ],
            "fully_translated": self.staleness.fully_translated(entity, "all"),
        }
