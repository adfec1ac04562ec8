"""
Task queue for translation submissions.

A task carries (entity reference, locale, checksum). Queues expose
`enqueue` (eventually executed) and `run_now` (executed immediately,
failures propagate to the caller).
"""
from abc import ABC, abstractmethod
from typing import Callable, List, Optional
import logging

from pydantic import BaseModel, ValidationError

from localesync.core.config import settings
from localesync.core.monitoring import track_error
from localesync.core.redis import RedisConnection, redis_connection

logger = logging.getLogger(__name__)


class TranslationTask(BaseModel):
    """One per-locale translation submission"""
    translatable_type: str
    translatable_id: str
    locale: str
    checksum: str
    attempts: int = 0


TaskHandler = Callable[[TranslationTask], None]


class BaseTaskQueue(ABC):
    """
    Base task queue interface.
    Handler is the callable that executes a task (the dispatcher).
    """
    
    def __init__(self, handler: Optional[TaskHandler] = None, max_attempts: Optional[int] = None):
        self.handler = handler
        self.max_attempts = max_attempts or settings.TASK_MAX_ATTEMPTS
    
    @abstractmethod
    def enqueue(self, task: TranslationTask) -> None:
        """Submit task for asynchronous execution"""
        pass
    
    def run_now(self, task: TranslationTask) -> None:
        """Execute task synchronously. Exceptions propagate."""
        self._handle(task)
    
    def _handle(self, task: TranslationTask) -> None:
        if self.handler is None:
            raise RuntimeError("Task queue has no handler configured")
        self.handler(task)


class InMemoryTaskQueue(BaseTaskQueue):
    """
    Process-local queue.
    Tasks wait in `pending` until `perform_pending()` is called.
    """
    
    def __init__(self, handler: Optional[TaskHandler] = None, max_attempts: Optional[int] = None):
        super().__init__(handler, max_attempts)
        self.pending: List[TranslationTask] = []
        self.failed: List[TranslationTask] = []
    
    def enqueue(self, task: TranslationTask) -> None:
        logger.debug(f"Enqueued {task.translatable_type}#{task.translatable_id} [{task.locale}]")
        self.pending.append(task)
    
    def perform_pending(self) -> int:
        """
        Run pending tasks, including ones enqueued while running.
        Failed tasks are retried until max_attempts, then moved to `failed`.
        
        Returns:
            Number of tasks that completed successfully
        """
        completed = 0
        while self.pending:
            task = self.pending.pop(0)
            try:
                self._handle(task)
                completed += 1
            except Exception as e:
                task.attempts += 1
                if task.attempts < self.max_attempts:
                    logger.warning(f"Task for {task.translatable_type}#{task.translatable_id} [{task.locale}] failed (attempt {task.attempts}), retrying: {e}")
                    self.pending.append(task)
                else:
                    track_error(
                        "translation_task.exhausted",
                        translatable_type=task.translatable_type,
                        translatable_id=task.translatable_id,
                        locale=task.locale,
                        metadata={"error": str(e), "attempts": task.attempts},
                    )
                    self.failed.append(task)
        return completed
    
    def clear(self):
        self.pending.clear()
        self.failed.clear()


class RedisTaskQueue(BaseTaskQueue):
    """
    Redis list backed queue.
    Producers RPUSH JSON tasks; `work()` BLPOPs and runs them.
    """
    
    def __init__(
        self,
        handler: Optional[TaskHandler] = None,
        max_attempts: Optional[int] = None,
        queue_name: Optional[str] = None,
        connection: Optional[RedisConnection] = None,
    ):
        super().__init__(handler, max_attempts)
        self.queue_name = queue_name or settings.TASK_QUEUE_NAME
        self.dead_letter_name = f"{self.queue_name}:dead"
        self.connection = connection or redis_connection
    
    def _client(self):
        client = self.connection.client
        if client is None:
            raise RuntimeError(f"Redis is not available for queue '{self.queue_name}'")
        return client
    
    def enqueue(self, task: TranslationTask) -> None:
        self._client().rpush(self.queue_name, task.model_dump_json())
        logger.debug(f"Enqueued {task.translatable_type}#{task.translatable_id} [{task.locale}] to {self.queue_name}")
    
    def size(self) -> int:
        return self._client().llen(self.queue_name)
    
    def work_one(self, timeout: int = 5) -> bool:
        """
        Pop and run one task.
        
        Returns:
            False if the queue was empty within timeout
        """
        item = self._client().blpop(self.queue_name, timeout=timeout)
        if item is None:
            return False
        
        _, payload = item
        try:
            task = TranslationTask.model_validate_json(payload)
        except ValidationError as e:
            logger.error(f"Dropping malformed task payload: {e}")
            self._client().rpush(self.dead_letter_name, payload)
            return True
        
        try:
            self._handle(task)
        except Exception as e:
            task.attempts += 1
            if task.attempts < self.max_attempts:
                logger.warning(f"Task for {task.translatable_type}#{task.translatable_id} [{task.locale}] failed (attempt {task.attempts}), re-enqueueing: {e}")
                self.enqueue(task)
            else:
                track_error(
                    "translation_task.exhausted",
                    translatable_type=task.translatable_type,
                    translatable_id=task.translatable_id,
                    locale=task.locale,
                    metadata={"error": str(e), "attempts": task.attempts},
                )
                self._client().rpush(self.dead_letter_name, task.model_dump_json())
        return True
    
    def work(self, burst: bool = False, timeout: int = 5) -> None:
        """
        Worker loop.
        
        Args:
            burst: Stop once the queue is empty
            timeout: BLPOP timeout in seconds
        """
        logger.info(f"Worker listening on {self.queue_name}")
        while True:
            got_task = self.work_one(timeout=timeout)
            if burst and not got_task:
                logger.info("Queue empty, worker stopping")
                return
