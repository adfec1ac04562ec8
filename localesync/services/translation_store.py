"""
Translation Store - persistence of per-locale translation records
"""
from typing import Iterable, List, Optional, Tuple
import logging

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from localesync.core.exceptions import TranslationValidationError
from localesync.models.translation import Translation

logger = logging.getLogger(__name__)


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class TranslationStore:
    """
    Lookup / insert / update / delete of Translation records.
    Uniqueness per (entity, locale) is enforced by the table constraint;
    violations surface as TranslationValidationError.
    """
    
    def __init__(self, db: Session):
        self.db = db
    
    def _query(self, entity):
        return self.db.query(Translation).filter(
            and_(
                Translation.translatable_type == entity.translatable_type,
                Translation.translatable_id == entity.translatable_id,
            )
        )
    
    def find(self, entity, locale: str, for_update: bool = False) -> Optional[Translation]:
        """Get the record for one locale, optionally row-locked"""
        query = self._query(entity).filter(Translation.locale == str(locale))
        if for_update:
            query = query.with_for_update()
        return query.first()
    
    def for_entity(self, entity) -> List[Translation]:
        """All records of an entity, ordered by id"""
        return self._query(entity).order_by(Translation.id).all()
    
    def locales_for(self, entity) -> List[str]:
        return [t.locale for t in self.for_entity(entity)]
    
    def find_or_create(self, entity, locale: str, for_update: bool = False) -> Tuple[Translation, bool]:
        """
        Get existing record or create an empty one.
        
        A concurrent insert of the same (entity, locale) loses to the
        unique constraint; the session is rolled back and the winner's
        row is returned. Call before making other changes in the session.
        
        Returns:
            (translation, created)
        """
        translation = self.find(entity, locale, for_update=for_update)
        if translation:
            return translation, False
        
        translation = Translation(
            translatable_type=entity.translatable_type,
            translatable_id=entity.translatable_id,
            locale=str(locale),
            translated_attributes={},
        )
        self.db.add(translation)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Translation {entity.translatable_type}#{entity.translatable_id} [{locale}] created concurrently, reusing it")
            existing = self.find(entity, locale, for_update=for_update)
            if existing is None:
                raise
            return existing, False
        
        return translation, True
    
    def validate(self, translation: Translation, automatic_attributes: Iterable[str] = ()) -> None:
        """
        Raises:
            TranslationValidationError: blank locale, duplicate locale, or
                automatic content without a source checksum
        """
        if _is_blank(translation.locale):
            raise TranslationValidationError("Translation locale can't be blank")
        
        if translation.has_automatic_content(automatic_attributes) and _is_blank(translation.source_checksum):
            raise TranslationValidationError(
                f"Translation {translation.translatable_type}#{translation.translatable_id} "
                f"[{translation.locale}] has automatic content but no source checksum"
            )
        
        duplicate = self.db.query(Translation.id).filter(
            and_(
                Translation.translatable_type == translation.translatable_type,
                Translation.translatable_id == translation.translatable_id,
                Translation.locale == translation.locale,
            )
        )
        if translation.id is not None:
            duplicate = duplicate.filter(Translation.id != translation.id)
        if duplicate.first() is not None:
            raise TranslationValidationError(
                f"Locale {translation.locale} already translated for "
                f"{translation.translatable_type}#{translation.translatable_id}"
            )
    
    def save(self, translation: Translation, automatic_attributes: Iterable[str] = ()) -> Translation:
        """
        Validate and commit one record.
        A rejected record is rolled back, along with anything flushed for it.
        """
        try:
            with self.db.no_autoflush:
                self.validate(translation, automatic_attributes)
            self.db.add(translation)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise TranslationValidationError(f"Translation violates uniqueness: {e.orig}") from e
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(translation)
        return translation
    
    def delete_all(self, entity, commit: bool = True) -> int:
        """
        Delete every record of an entity.
        
        Args:
            entity: Translatable entity
            commit: False leaves the deletion in the caller's transaction
        
        Returns:
            Number of records deleted
        """
        try:
            deleted = self._query(entity).delete(synchronize_session=False)
            if commit:
                self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error deleting translations of {entity.translatable_type}#{entity.translatable_id}: {e}", exc_info=True)
            raise
        if deleted:
            logger.info(f"Deleted {deleted} translation(s) of {entity.translatable_type}#{entity.translatable_id}")
        return deleted
