"""
Redis connection for LocaleSync.
Backs the per-record translation locks and the Redis task queue.
"""
import redis
import logging
from typing import Optional

from localesync.core.config import settings

logger = logging.getLogger(__name__)


class RedisConnection:
    """Redis connection manager with connection pooling."""
    
    def __init__(self, url: Optional[str] = None):
        """Initialize Redis connection pool lazily."""
        self.url = url or settings.REDIS_URL
        self._pool: Optional[redis.ConnectionPool] = None
        self._client: Optional[redis.Redis] = None
        self._connected = False
        self._attempted = False
    
    def connect(self):
        """
        Connect to Redis server.
        Safe to call multiple times - will reuse existing connection.
        """
        if self._connected and self._client:
            return
        
        self._attempted = True
        try:
            self._pool = redis.ConnectionPool.from_url(
                self.url,
                max_connections=20,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
            )
            self._client = redis.Redis(connection_pool=self._pool)
            
            # Test connection
            self._client.ping()
            self._connected = True
            logger.info("✅ Redis connected successfully")
        except redis.RedisError as e:
            logger.warning(f"⚠️  Redis connection failed: {e}. Using process-local locks.")
            self._connected = False
            self._client = None
    
    def disconnect(self):
        """Disconnect from Redis."""
        if self._pool:
            self._pool.disconnect()
        self._connected = False
        self._client = None
        self._attempted = False
        logger.info("Redis disconnected")
    
    @property
    def is_connected(self) -> bool:
        """Check if Redis is connected."""
        return self._connected and self._client is not None
    
    @property
    def client(self) -> Optional[redis.Redis]:
        """
        Redis client, connecting on first use.
        Returns None when Redis is unreachable.
        """
        if not self._attempted:
            self.connect()
        return self._client if self.is_connected else None


# Global connection instance
redis_connection = RedisConnection()
