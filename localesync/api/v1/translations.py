"""
Translations endpoints - inspect status, set manual attributes, trigger translation.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Query

from localesync.core.database import SessionLocal
from localesync.core.dependencies import get_entity, get_translation_service
from localesync.core.exceptions import TranslationConfigError, TranslationDispatchError, TranslationValidationError
from localesync.core.tasks import InMemoryTaskQueue, TranslationTask
from localesync.schemas.translation import (
    ManualAttributeUpdate,
    TranslateResponse,
    TranslationResponse,
    TranslationStatusResponse,
)
from localesync.services.translation_config import ModelEntity
from localesync.services.translation_service import TranslationService

logger = logging.getLogger(__name__)

router = APIRouter()


def perform_in_background(tasks: List[TranslationTask]):
    """Run in-memory tasks after the response with a session of their own"""
    db = SessionLocal()
    try:
        service = TranslationService(db)
        for task in tasks:
            service.queue.enqueue(task)
        completed = service.queue.perform_pending()
        logger.info(f"Background translation finished: {completed}/{len(tasks)} task(s)")
    finally:
        db.close()


def _translation_responses(service: TranslationService, entity: ModelEntity) -> List[TranslationResponse]:
    checksum = service.translation_checksum(entity)
    return [
        TranslationResponse(
            locale=t.locale,
            translated_attributes=dict(t.translated_attributes or {}),
            source_checksum=t.source_checksum,
            outdated=t.outdated(checksum),
            created_at=t.created_at,
            updated_at=t.updated_at,
        )
        for t in service.translations(entity)
    ]


@router.get("/{translatable_type}/{translatable_id}", response_model=TranslationStatusResponse)
def get_translations(
    entity: ModelEntity = Depends(get_entity),
    service: TranslationService = Depends(get_translation_service)
):
    """
    Translation status of one entity.
    
    Returns:
        Checksum, target locales, outdated/missing details and stored records
    """
    status = service.status(entity)
    return TranslationStatusResponse(**status, translations=_translation_responses(service, entity))


@router.put("/{translatable_type}/{translatable_id}/{locale}/{attribute}", response_model=TranslationResponse)
def set_manual_attribute(
    locale: str,
    attribute: str,
    payload: ManualAttributeUpdate = Body(...),
    entity: ModelEntity = Depends(get_entity),
    service: TranslationService = Depends(get_translation_service)
):
    """
    Set a manually translated attribute for one locale.
    Does not trigger automatic translation.
    """
    try:
        translation = service.set_manual_attribute(entity, attribute, locale, payload.value)
    except TranslationConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TranslationValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    
    return TranslationResponse(
        locale=translation.locale,
        translated_attributes=dict(translation.translated_attributes or {}),
        source_checksum=translation.source_checksum,
        outdated=translation.outdated(service.translation_checksum(entity)),
        created_at=translation.created_at,
        updated_at=translation.updated_at,
    )


@router.post("/{translatable_type}/{translatable_id}/translate", response_model=TranslateResponse)
def translate(
    background_tasks: BackgroundTasks,
    locale: Optional[str] = Query(None, description="Only this locale"),
    sync: bool = Query(False, description="Translate before responding"),
    entity: ModelEntity = Depends(get_entity),
    service: TranslationService = Depends(get_translation_service)
):
    """
    Force (re)translation of every target locale, or one locale.
    With sync=true the translator is called inline; FastAPI runs this
    plain def in its threadpool, off the event loop.

    Returns:
        Locales submitted and whether they ran synchronously
    """
    if sync:
        try:
            tasks = service.translate_now(entity, locale)
        except TranslationDispatchError as e:
            logger.error(f"Sync translation failed for {entity.translatable_type}#{entity.translatable_id}: {e}")
            raise HTTPException(status_code=502, detail=str(e))
        mode = "sync"
    else:
        tasks = service.translate(entity, locale)
        if isinstance(service.queue, InMemoryTaskQueue):
            # Nothing else drains an in-memory queue
            service.queue.pending.clear()
            background_tasks.add_task(perform_in_background, tasks)
        mode = "queued"
    
    return TranslateResponse(
        translatable_type=entity.translatable_type,
        translatable_id=entity.translatable_id,
        locales=[task.locale for task in tasks],
        mode=mode,
    )
