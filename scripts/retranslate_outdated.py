#!/usr/bin/env python3
"""
Check every registered translatable record and enqueue missing or
outdated translations (e.g. after adding a locale).

Usage:
    python scripts/retranslate_outdated.py --models myapp.translatable
    python scripts/retranslate_outdated.py --models myapp.translatable --dry-run
"""
import argparse
import importlib
import sys
from pathlib import Path

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from localesync.core.config import settings
from localesync.core.database import SessionLocal
from localesync.core.logging_config import setup_logging
from localesync.core.tasks import RedisTaskQueue
from localesync.services.translation_config import registry
from localesync.services.translation_service import TranslationService


def main():
    parser = argparse.ArgumentParser(description="Enqueue missing/outdated translations")
    parser.add_argument("--models", action="append", default=[], help="Module registering translatable models")
    parser.add_argument("--dry-run", action="store_true", help="Only report what would be translated")
    args = parser.parse_args()
    
    setup_logging()
    for module in args.models:
        importlib.import_module(module)
    
    db = SessionLocal()
    try:
        queue = RedisTaskQueue() if settings.TASK_QUEUE_BACKEND == "redis" else None
        service = TranslationService(db, queue=queue)
        
        total = 0
        for type_name in registry.types():
            model = registry.model_for(type_name)
            print(f"\n📝 {type_name}")
            for instance in db.query(model).all():
                if args.dry_run:
                    status = service.status(instance)
                    if status["outdated_locales"] or status["missing"]:
                        print(f"  {status['translatable_id']}: outdated={status['outdated_locales']} missing={len(status['missing'])}")
                        total += 1
                    continue
                tasks = service.entities.touch(instance)
                if tasks:
                    print(f"  {tasks[0].translatable_id}: {[t.locale for t in tasks]}")
                total += len(tasks)
        
        if not args.dry_run and queue is None:
            completed = service.queue.perform_pending()
            print(f"\n✅ Translated {completed} locale(s)")
        else:
            print(f"\n✅ {total} {'record(s) need work' if args.dry_run else 'task(s) enqueued'}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
