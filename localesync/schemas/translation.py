"""
Pydantic schemas for Translation API
"""
from pydantic import BaseModel
from typing import Optional, Dict, Any, List
from datetime import datetime


class TranslationResponse(BaseModel):
    """Schema for one translation record"""
    locale: str
    translated_attributes: Dict[str, Any]
    source_checksum: Optional[str] = None
    outdated: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MissingTranslation(BaseModel):
    locale: str
    attribute: str


class TranslationStatusResponse(BaseModel):
    """Schema for an entity's translation status"""
    translatable_type: str
    translatable_id: str
    checksum: str
    conditions_met: bool
    locales: List[str]
    outdated_locales: List[str]
    missing: List[MissingTranslation]
    fully_translated: bool
    translations: List[TranslationResponse]


class ManualAttributeUpdate(BaseModel):
    """Schema for setting a manually translated attribute"""
    value: Optional[str] = None


class TranslateResponse(BaseModel):
    """Schema for translate requests"""
    translatable_type: str
    translatable_id: str
    locales: List[str]
    mode: str  # queued, sync
