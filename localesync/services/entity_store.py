"""
Entity Store - saves translatable entities and notifies the lifecycle
with the attribute names that changed.
"""
from typing import List, Optional, Set
import logging

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session

from localesync.core.tasks import TranslationTask
from localesync.services.lifecycle import TranslationLifecycle
from localesync.services.translation_config import ModelEntity, TranslationRegistry, registry
from localesync.services.translation_store import TranslationStore

logger = logging.getLogger(__name__)


def changed_attribute_names(instance) -> Set[str]:
    """
    Column attributes changed since the instance was loaded.
    For new instances, every attribute that was given a value.
    Must be called before flush; flushing resets attribute history.
    """
    state = sa_inspect(instance)
    is_new = state.transient or state.pending
    changed = set()
    for attr in state.mapper.column_attrs:
        history = state.attrs[attr.key].history
        if is_new:
            if any(value is not None for value in history.added):
                changed.add(attr.key)
        elif history.has_changes():
            changed.add(attr.key)
    return changed


class EntityStore:
    """
    Create / update / touch / delete for translatable models.
    Every committed save runs the lifecycle for the entity.
    """
    
    def __init__(
        self,
        db: Session,
        lifecycle: TranslationLifecycle,
        translation_registry: Optional[TranslationRegistry] = None
    ):
        self.db = db
        self.lifecycle = lifecycle
        self.registry = translation_registry or registry
        self.last_changes: Set[str] = set()
    
    def save(self, instance) -> List[TranslationTask]:
        """
        Commit the instance, then run translate_if_needed with its changes.
        
        Returns:
            Tasks the lifecycle enqueued
        """
        changed = changed_attribute_names(instance)
        try:
            self.db.add(instance)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error saving {type(instance).__name__}: {e}", exc_info=True)
            raise
        self.db.refresh(instance)
        self.last_changes = changed
        
        if not self.registry.is_translatable(instance):
            return []
        return self.lifecycle.translate_if_needed(ModelEntity(instance), changed)
    
    def update(self, instance, **values) -> List[TranslationTask]:
        """Assign attributes and save"""
        for name, value in values.items():
            setattr(instance, name, value)
        return self.save(instance)
    
    def touch(self, instance) -> List[TranslationTask]:
        """Run a change notification without changing any attribute"""
        self.last_changes = set()
        if not self.registry.is_translatable(instance):
            return []
        return self.lifecycle.translate_if_needed(ModelEntity(instance), ())
    
    def delete(self, instance) -> int:
        """
        Delete the instance and all of its translations.
        
        Returns:
            Number of translations deleted
        """
        deleted = 0
        try:
            if self.registry.is_translatable(instance):
                # Same transaction as the instance: both go or neither does
                deleted = self.lifecycle.store.delete_all(ModelEntity(instance), commit=False)
            self.db.delete(instance)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error deleting {type(instance).__name__}: {e}", exc_info=True)
            raise
        return deleted
