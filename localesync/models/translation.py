"""
Translation model - one record per (entity, locale)
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON, UniqueConstraint, Index
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import validates
from sqlalchemy.sql import func

from localesync.core.database import Base
from localesync.core.exceptions import TranslationValidationError


class Translation(Base):
    """Translated attributes of one entity for one locale"""
    
    __tablename__ = "translatable_translations"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    translatable_type = Column(String(100), nullable=False)  # Entity class name
    translatable_id = Column(String(100), nullable=False)
    locale = Column(String(20), nullable=False)  # es, fr, pt-BR
    translated_attributes = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)
    source_checksum = Column(String(64), nullable=True)  # Unset until automatic content is written
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    # Unique constraint: one translation per entity per locale
    __table_args__ = (
        UniqueConstraint("translatable_type", "translatable_id", "locale", name="uq_translation_translatable_locale"),
        Index("idx_translation_translatable", "translatable_type", "translatable_id"),
    )
    
    @validates("locale")
    def validate_locale(self, key, value):
        if value is None or not str(value).strip():
            raise TranslationValidationError("Translation locale can't be blank")
        return str(value)
    
    def outdated(self, current_checksum: str) -> bool:
        """True if this record was generated from different source content"""
        return self.source_checksum != current_checksum
    
    def has_automatic_content(self, automatic_attributes) -> bool:
        attrs = self.translated_attributes or {}
        return any(name in attrs for name in automatic_attributes)
    
    def __repr__(self):
        return f"<Translation(type={self.translatable_type}, id={self.translatable_id}, locale={self.locale})>"
