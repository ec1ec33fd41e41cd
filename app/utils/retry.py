# app/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests
import redis

from app.utils.settings import RETRY_ATTEMPTS


def _retry_on(exc_type, multiplier: float, max_wait: float):
    # reraise=True -> po ostatniej probie leci oryginalny wyjatek, nie RetryError
    return retry(
        reraise=True,
        stop=stop_after_attempt(RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=multiplier, min=multiplier, max=max_wait),
        retry=retry_if_exception_type(exc_type),
    )


def http_retry():
    """Retry dla wywolan katalogu produktow po HTTP."""
    return _retry_on(requests.RequestException, multiplier=0.3, max_wait=3)


def redis_retry():
    """Retry dla locka koszyka w Redis."""
    return _retry_on(redis.RedisError, multiplier=0.2, max_wait=2)
