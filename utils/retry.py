"""Retry decorator with exponential backoff for text-generator calls."""
import functools
import logging
import time

from utils.errors import RetryableNetworkError

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (RetryableNetworkError,)


def retry_with_backoff(max_retries=0, initial_delay=1.0, backoff_factor=2.0, retryable_exceptions=RETRYABLE_ERRORS):
    """Decorator for exponential backoff retries. max_retries=0 means a single attempt."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    last_exception = e
                    if attempt == max_retries:
                        break
                    wait_time = initial_delay * (backoff_factor ** attempt)
                    logger.warning("%s failed (attempt %d): %s. Retrying in %.1fs...",
                                   func.__name__, attempt + 1, e, wait_time)
                    time.sleep(wait_time)

            if max_retries:
                logger.error("Permanently failed %s after %d retries.", func.__name__, max_retries)
            raise last_exception
        return wrapper
    return decorator
