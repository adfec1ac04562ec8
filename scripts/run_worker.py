#!/usr/bin/env python3
"""
Redis task queue worker.

Usage:
    python scripts/run_worker.py --models myapp.translatable
    python scripts/run_worker.py --models myapp.translatable --burst

--models names the module(s) that call translates(), so the worker can
load entities by type name.
"""
import argparse
import importlib
import logging
import sys
from pathlib import Path

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from localesync.core.database import SessionLocal
from localesync.core.logging_config import setup_logging
from localesync.core.tasks import RedisTaskQueue, TranslationTask
from localesync.services.translation_config import registry
from localesync.services.translation_service import TranslationService

logger = logging.getLogger("localesync.worker")


def handle(task: TranslationTask):
    """Run one task with a fresh session"""
    db = SessionLocal()
    try:
        service = TranslationService(db)
        service.dispatcher.perform_task(task)
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="LocaleSync translation worker")
    parser.add_argument("--models", action="append", default=[], help="Module registering translatable models")
    parser.add_argument("--burst", action="store_true", help="Exit when the queue is empty")
    parser.add_argument("--timeout", type=int, default=5, help="Seconds to wait for a task")
    args = parser.parse_args()
    
    setup_logging()
    
    for module in args.models:
        importlib.import_module(module)
    if not registry.types():
        logger.warning("No translatable models registered; every task will fail")
    else:
        logger.info(f"Translatable types: {', '.join(registry.types())}")
    
    queue = RedisTaskQueue(handler=handle)
    try:
        queue.work(burst=args.burst, timeout=args.timeout)
    except KeyboardInterrupt:
        logger.info("Worker stopped")


if __name__ == "__main__":
    main()
