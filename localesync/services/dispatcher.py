"""
Dispatcher - runs one per-locale translation submission:
translate every automatic attribute, then merge all of them at once.
"""
from typing import Any, Dict, Optional
import logging
import time

from sqlalchemy.orm import Session

from localesync.core.exceptions import TranslationDispatchError
from localesync.core.monitoring import track_error, track_metric
from localesync.core.tasks import TranslationTask
from localesync.models.translation import Translation
from localesync.services.merger import TranslationMerger
from localesync.services.staleness import is_blank
from localesync.services.translation_config import ModelEntity, TranslationRegistry, as_entity, registry
from localesync.services.translator import BaseTranslator

logger = logging.getLogger(__name__)


class TranslationDispatcher:
    """
    Calls the translator for each automatic attribute of an entity.
    If any attribute fails nothing is merged, so the stored checksum
    always covers every automatic attribute.
    """
    
    def __init__(
        self,
        db: Session,
        translator: BaseTranslator,
        merger: TranslationMerger,
        translation_registry: Optional[TranslationRegistry] = None
    ):
        self.db = db
        self.translator = translator
        self.merger = merger
        self.registry = translation_registry or registry
    
    def translate_attributes(self, entity, locale: str) -> Dict[str, Any]:
        """
        Translate all automatic attributes.
        Blank source values have nothing to translate and are stored as is.
        
        Raises:
            TranslationDispatchError: translator failed for an attribute
        """
        config = self.registry.config_for(entity)
        fresh: Dict[str, Any] = {}
        
        for attribute in config.automatic_attributes:
            source_text = entity.read_attribute(attribute)
            if is_blank(source_text):
                # Overwrites any translation of earlier content
                fresh[attribute] = source_text
                continue
            try:
                fresh[attribute] = self.translator.translate(str(source_text), locale)
            except Exception as e:
                track_error(
                    "translation.translator_failed",
                    translatable_type=entity.translatable_type,
                    translatable_id=entity.translatable_id,
                    locale=locale,
                    metadata={"attribute": attribute, "error": str(e)},
                )
                raise TranslationDispatchError(
                    f"Translating {entity.translatable_type}#{entity.translatable_id}.{attribute} "
                    f"into {locale} failed: {e}",
                    locale=locale,
                    attribute=attribute,
                ) from e
        return fresh
    
    def perform(self, entity, locale: str, checksum: str) -> Translation:
        """
        Translate and merge one locale.
        
        Args:
            entity: Translatable entity
            locale: Target locale
            checksum: Source checksum when the work was submitted
        
        Returns:
            Saved Translation
        """
        entity = as_entity(entity)
        locale = str(locale)
        start_time = time.time()
        
        fresh = self.translate_attributes(entity, locale)
        translation = self.merger.merge(entity, locale, fresh, checksum)
        
        track_metric(
            "translation.dispatch.duration",
            time.time() - start_time,
            locale=locale,
            tags={"type": entity.translatable_type, "attributes": str(len(fresh))}
        )
        return translation
    
    def load_entity(self, task: TranslationTask):
        """Load the task's entity, or None if it no longer exists"""
        model = self.registry.model_for(task.translatable_type)
        instance = self.db.get(model, ModelEntity.identity_from_id(model, task.translatable_id))
        return ModelEntity(instance) if instance is not None else None
    
    def perform_task(self, task: TranslationTask) -> Optional[Translation]:
        """Task queue handler"""
        entity = self.load_entity(task)
        if entity is None:
            logger.warning(f"{task.translatable_type}#{task.translatable_id} no longer exists, skipping {task.locale} translation")
            return None
        return self.perform(entity, task.locale, task.checksum)
