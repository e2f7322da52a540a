import logging
import redis
from contextlib import contextmanager

logger = logging.getLogger(__name__)


@contextmanager
def handle_redis_error(operation):
    """Context manager to handle Redis errors"""
    try:
        yield
    except redis.RedisError as e:
        logger.warning(f"Error during {operation}: {str(e)}")
