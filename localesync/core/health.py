"""
Health checks for the pieces translation work depends on:
database, Redis (locks and queue), translator backend.
"""
from typing import Any, Dict, Optional
import logging

import redis
from sqlalchemy import text

from localesync import __version__
from localesync.core.config import settings
from localesync.core.database import SessionLocal
from localesync.core.redis import RedisConnection, redis_connection

logger = logging.getLogger(__name__)

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"
DEGRADED = "degraded"


def check_database() -> Dict[str, Any]:
    """Run SELECT 1 on a fresh session"""
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return {"status": HEALTHY}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": UNHEALTHY, "message": str(e)}
    finally:
        db.close()


def check_redis(connection: Optional[RedisConnection] = None) -> Dict[str, Any]:
    """
    Ping through the connection the locks and task queue share.

    Without Redis the locks fall back to process-local ones, which is only
    safe with a single worker process, so it is reported as degraded. With
    the Redis queue backend there is no queue at all, so it is unhealthy.
    """
    connection = connection or redis_connection
    client = connection.client
    lock_mode = "redis" if client is not None else "process-local"

    if client is not None:
        try:
            client.ping()
            return {"status": HEALTHY, "lock_mode": lock_mode}
        except redis.RedisError as e:
            logger.warning(f"Redis health check failed: {e}")
            lock_mode = "redis (unreachable)"

    required = settings.TASK_QUEUE_BACKEND == "redis"
    return {
        "status": UNHEALTHY if required else DEGRADED,
        "lock_mode": lock_mode,
        "message": "Redis unavailable" + ("; the redis task queue cannot run" if required else ""),
    }


def check_translator(backend: Optional[str] = None) -> Dict[str, Any]:
    """The configured backend exists and has what it needs to call out"""
    # Imported here: services import core, not the other way round at module load
    from localesync.services.translator import TRANSLATORS

    backend = (backend or settings.TRANSLATOR_BACKEND).lower()
    if backend not in TRANSLATORS:
        return {"status": UNHEALTHY, "backend": backend, "message": f"Unknown backend; available: {sorted(TRANSLATORS)}"}
    if backend == "google" and not settings.GOOGLE_TRANSLATE_API_KEY:
        return {"status": UNHEALTHY, "backend": backend, "message": "GOOGLE_TRANSLATE_API_KEY is not set"}
    return {"status": HEALTHY, "backend": backend}


def get_health_status() -> Dict[str, Any]:
    """
    Overall status: unhealthy if any component is, degraded if any is.

    Returns:
        Dictionary with health status of all components
    """
    components = {
        "database": check_database(),
        "redis": check_redis(),
        "translator": check_translator(),
    }
    statuses = {component["status"] for component in components.values()}

    overall_status = HEALTHY
    if UNHEALTHY in statuses:
        overall_status = UNHEALTHY
    elif DEGRADED in statuses:
        overall_status = DEGRADED

    return {
        "status": overall_status,
        "version": __version__,
        "environment": settings.ENVIRONMENT,
        "queue_backend": settings.TASK_QUEUE_BACKEND,
        "components": components,
    }
