"""
FastAPI dependencies
"""
from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from localesync.core.config import settings
from localesync.core.database import get_db
from localesync.core.exceptions import TranslationConfigError
from localesync.core.tasks import RedisTaskQueue
from localesync.services.translation_config import ModelEntity, registry
from localesync.services.translation_service import TranslationService


def get_translation_service(db: Session = Depends(get_db)) -> TranslationService:
    """
    Translation service bound to the request's session.
    Uses the Redis queue when TASK_QUEUE_BACKEND=redis.
    """
    queue = RedisTaskQueue() if settings.TASK_QUEUE_BACKEND == "redis" else None
    return TranslationService(db, queue=queue)


def get_entity(
    translatable_type: str,
    translatable_id: str,
    db: Session = Depends(get_db)
) -> ModelEntity:
    """
    Load a translatable entity from path parameters.
    
    Raises:
        HTTPException: 404 for unknown type or id, 400 for a malformed id
    """
    try:
        model = registry.model_for(translatable_type)
    except TranslationConfigError:
        raise HTTPException(status_code=404, detail=f"{translatable_type} is not translatable")
    
    try:
        key = ModelEntity.identity_from_id(model, translatable_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid id format")
    
    instance = db.get(model, key)
    if instance is None:
        raise HTTPException(status_code=404, detail=f"{translatable_type} {translatable_id} not found")
    return ModelEntity(instance)
