"""Retry logic with exponential backoff for Confluence API rate limits.

Only HTTP 429 responses are retried. The wait honours the server's
``Retry-After`` header when it carries a number of seconds, otherwise it
backs off exponentially (1s, 2s, 4s). Every other error fails fast.
"""

import logging
import time
from functools import wraps
from typing import Callable, Optional, TypeVar

from .errors import APIAccessError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3
MAX_RETRY_AFTER_SECONDS = 60


def retry_on_rate_limit(func: Callable[..., T], *args, **kwargs) -> T:
    """Retry function on 429 rate limit with backoff.

    Args:
        func: The function to execute with retry logic
        *args: Positional arguments to pass to the function
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        APIAccessError: If rate limit persists after 3 retries
        Other exceptions: Passed through immediately without retry

    Example:
        >>> result = retry_on_rate_limit(api.find_pages, "SPACE", "Tech")
    """
    for retry_num in range(MAX_RETRIES + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not is_rate_limit_error(e):
                raise

            if retry_num >= MAX_RETRIES:
                logger.error(
                    f"Rate limit persisted after {MAX_RETRIES} retries, giving up"
                )
                raise APIAccessError(
                    f"Confluence API failure (after {MAX_RETRIES} retries)"
                ) from e

            wait_time = _retry_after(e)
            if wait_time is None:
                wait_time = 2 ** retry_num
            logger.info(
                f"Rate limit hit, retrying in {wait_time}s "
                f"(retry {retry_num + 1}/{MAX_RETRIES})"
            )
            time.sleep(wait_time)

    raise APIAccessError(f"Confluence API failure (after {MAX_RETRIES} retries)")


def as_decorator(func: Callable[..., T]) -> Callable[..., T]:
    """Decorator version of retry_on_rate_limit.

    Example:
        >>> @as_decorator
        ... def render(source: str) -> bytes:
        ...     return session.post(url, data=source).content
    """
    @wraps(func)
    def wrapper(*args, **kwargs) -> T:
        return retry_on_rate_limit(func, *args, **kwargs)

    return wrapper


def status_code_of(exception: Exception) -> Optional[int]:
    """Pull an HTTP status code off an exception, if it carries one."""
    status = getattr(exception, 'status_code', None)
    if isinstance(status, int):
        return status
    response = getattr(exception, 'response', None)
    status = getattr(response, 'status_code', None)
    if isinstance(status, int):
        return status
    return None


def is_rate_limit_error(exception: Exception) -> bool:
    """Check if an exception represents a rate limit (429) error.

    Args:
        exception: The exception to check

    Returns:
        True if this appears to be a rate limit error, False otherwise
    """
    if status_code_of(exception) == 429:
        return True

    # Specific phrases only; "rate limit" alone shows up in unrelated messages
    error_msg = str(exception).lower()
    rate_limit_patterns = [
        '429',
        'too many requests',
        'rate limit exceeded',
        'rate limited',
    ]
    return any(pattern in error_msg for pattern in rate_limit_patterns)


def _retry_after(exception: Exception) -> Optional[int]:
    """Seconds requested by a ``Retry-After`` header, capped, or None."""
    response = getattr(exception, 'response', None)
    headers = getattr(response, 'headers', None)
    if not headers:
        return None
    try:
        value = headers.get('Retry-After')
    except AttributeError:
        return None
    if value is None:
        return None
    try:
        seconds = int(str(value).strip())
    except ValueError:
        # HTTP-date form is not worth parsing here
        return None
    return max(0, min(seconds, MAX_RETRY_AFTER_SECONDS))
