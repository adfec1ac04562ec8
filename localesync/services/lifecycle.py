"""
Lifecycle Engine - decides after every change whether an entity's
translations are purged, left alone, or (re)generated per locale.
"""
from typing import Iterable, List, Optional
import logging

from localesync.core.monitoring import monitor_performance
from localesync.core.tasks import BaseTaskQueue, TranslationTask
from localesync.services.locale_resolver import resolve_locales
from localesync.services.staleness import StalenessEvaluator
from localesync.services.translation_config import TranslationConfig, TranslationRegistry, as_entity, registry
from localesync.services.translation_store import TranslationStore

logger = logging.getLogger(__name__)


class TranslationLifecycle:
    """
    Per-entity translation state machine.
    Entities are independent; no cross-entity locking happens here.
    """
    
    def __init__(
        self,
        store: TranslationStore,
        staleness: StalenessEvaluator,
        queue: BaseTaskQueue,
        translation_registry: Optional[TranslationRegistry] = None
    ):
        self.store = store
        self.staleness = staleness
        self.queue = queue
        self.registry = translation_registry or registry
    
    def _task(self, entity, locale: str, checksum: str) -> TranslationTask:
        return TranslationTask(
            translatable_type=entity.translatable_type,
            translatable_id=entity.translatable_id,
            locale=str(locale),
            checksum=checksum,
        )
    
    def _conditions_changed(self, config: TranslationConfig, entity, changed: set) -> bool:
        """Gate inputs changed and the gate is open, so a newly opened gate triggers work"""
        if not changed or not config.conditions_exist:
            return False
        if config.condition_attributes is not None and not changed & set(config.condition_attributes):
            return False
        return config.conditions_met(entity)
    
    def needs_translation(self, entity, changed: Iterable[str] = ()) -> bool:
        """
        Any of: an automatic attribute changed, the gate inputs changed
        while open, a record is outdated, or an automatic translation is missing.
        """
        entity = as_entity(entity)
        config = self.registry.config_for(entity)
        changed = set(changed or ())
        
        if changed & set(config.automatic_attributes):
            return True
        if self._conditions_changed(config, entity, changed):
            return True
        if self.staleness.translations_outdated(entity):
            return True
        return self.staleness.translations_missing(entity, "automatic")
    
    def translate_if_needed(self, entity, changed: Iterable[str] = ()) -> List[TranslationTask]:
        """
        Run after a committed create/update, or on demand.
        
        Args:
            entity: Translatable entity
            changed: Attribute names changed by the last save
        
        Returns:
            Tasks enqueued (empty when nothing needed doing)
        """
        entity = as_entity(entity)
        config = self.registry.config_for(entity)
        
        if not config.conditions_met(entity):
            deleted = self.store.delete_all(entity)
            if deleted:
                logger.info(f"Translation conditions no longer met for {entity.translatable_type}#{entity.translatable_id}")
            return []
        
        if not config.automatic_attributes:
            # Manual attributes only: nothing is ever generated
            return []
        
        if not self.needs_translation(entity, changed):
            return []
        
        checksum = self.staleness.current_checksum(entity)
        tasks = []
        for locale in resolve_locales(entity, config):
            translation = self.store.find(entity, locale)
            if translation is None or translation.outdated(checksum):
                task = self._task(entity, locale, checksum)
                self.queue.enqueue(task)
                tasks.append(task)
        
        if tasks:
            logger.info(
                f"Enqueued {len(tasks)} translation(s) for {entity.translatable_type}#{entity.translatable_id}: "
                f"{[t.locale for t in tasks]}"
            )
        return tasks
    
    def _forced_tasks(self, entity, locale: Optional[str]) -> List[TranslationTask]:
        config = self.registry.config_for(entity)
        if not config.automatic_attributes:
            return []
        locales = [str(locale)] if locale is not None else resolve_locales(entity, config)
        checksum = self.staleness.current_checksum(entity)
        return [self._task(entity, target, checksum) for target in locales]
    
    def translate(self, entity, locale: Optional[str] = None) -> List[TranslationTask]:
        """Enqueue every target locale (or one locale) regardless of staleness"""
        entity = as_entity(entity)
        tasks = self._forced_tasks(entity, locale)
        for task in tasks:
            self.queue.enqueue(task)
        return tasks
    
    @monitor_performance
    def translate_now(self, entity, locale: Optional[str] = None) -> List[TranslationTask]:
        """
        Like translate, but runs each task synchronously.
        Translator failures and timeouts propagate to the caller.
        """
        entity = as_entity(entity)
        tasks = self._forced_tasks(entity, locale)
        for task in tasks:
            self.queue.run_now(task)
        return tasks
