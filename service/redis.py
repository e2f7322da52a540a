import redis
import json
from typing import Any, Optional
from config.setting import settings
from util.error import handle_redis_error


class Redis:
    """Pooled Redis client; every call degrades to a cache miss on failure."""
    _instance = None
    redis_client = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Redis, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Initialize Redis client with connection pooling"""
        if not settings.REDIS_ENABLED:
            self.redis_client = None
            return
        if not self.redis_client:
            self.redis_client = redis.Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                db=settings.REDIS_DB,
                password=settings.REDIS_PASSWORD or None,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                max_connections=20,  # Connection pool size
            )

    @property
    def enabled(self) -> bool:
        return self.redis_client is not None

    def set(self, key, value, expiry=None):
        """Set key-value pair in Redis with optional expiry"""
        if not self.enabled:
            return None
        with handle_redis_error(f"setting key {key}"):
            return self.redis_client.set(key, value, ex=expiry)

    def get(self, key):
        """Get value for given key from Redis"""
        if not self.enabled:
            return None
        with handle_redis_error(f"getting key {key}"):
            return self.redis_client.get(key)

    def delete(self, key):
        """Delete key from Redis"""
        if not self.enabled:
            return None
        with handle_redis_error(f"deleting key {key}"):
            return self.redis_client.delete(key)

    def set_json(self, key: str, data: Any, expiry: Optional[int] = None) -> bool:
        """Set JSON data in Redis with optional expiry"""
        if not self.enabled:
            return False
        with handle_redis_error(f"setting JSON key {key}"):
            return self.redis_client.set(key, json.dumps(data), ex=expiry)

    def get_json(self, key: str) -> Optional[Any]:
        """Get JSON data from Redis"""
        if not self.enabled:
            return None
        with handle_redis_error(f"getting JSON key {key}"):
            data = self.redis_client.get(key)
            return json.loads(data) if data else None

    def close(self):
        """Close Redis connection"""
        if not self.enabled:
            return
        with handle_redis_error("closing Redis connection"):
            self.redis_client.close()
