"""
In-memory query cache for civic-compass

Keeps query results for a stale time (TTL) under a query key, so repeated
lookups within the window do not hit the hosted backend again. Keys are
tuples whose first element names the query, e.g. ("candidate-answers", "c1").
Mutations invalidate by key prefix.
"""

import functools
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from tenacity import Retrying, stop_after_attempt, wait_fixed

logger = logging.getLogger(__name__)

QueryKey = Tuple[Any, ...]

DEFAULT_STALE_TIME = 0
DEFAULT_RETRY = 1
DEFAULT_RETRY_WAIT = 1.0

# Process-wide cache
_CACHE: Dict[QueryKey, Dict[str, Any]] = {}


def _freeze(value: Any) -> Any:
    """Make a query argument hashable and order-independent where it should be."""
    if isinstance(value, dict):
        return tuple(sorted((k, _freeze(v)) for k, v in value.items()))
    if isinstance(value, (set, frozenset)):
        return tuple(sorted(_freeze(v) for v in value))
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def make_query_key(name: str, *args: Any, **kwargs: Any) -> QueryKey:
    key = (name,) + tuple(_freeze(a) for a in args)
    if kwargs:
        key += (_freeze(kwargs),)
    return key


def cache_response(key: QueryKey, value: Any, ttl: float = 300) -> None:
    """
    Cache a query result with TTL.

    Args:
        key: Query key
        value: Result to cache
        ttl: Time to live in seconds (default 300 = 5 minutes)
    """
    _CACHE[key] = {"value": value, "expiry": time.time() + ttl}
    logger.debug(f"Cached {key} (TTL: {ttl}s)")


def _lookup(key: QueryKey) -> Tuple[bool, Any]:
    entry = _CACHE.get(key)
    if entry is None:
        logger.debug(f"Cache miss: {key}")
        return False, None

    if time.time() > entry["expiry"]:
        logger.debug(f"Cache expired: {key}")
        del _CACHE[key]
        return False, None

    logger.debug(f"Cache hit: {key}")
    return True, entry["value"]


def get_cached(key: QueryKey) -> Optional[Any]:
    """
    Get value from cache if not expired.

    Returns:
        Cached value or None if not found/expired
    """
    _, value = _lookup(key)
    return value


def invalidate_cache(prefix: Optional[QueryKey] = None) -> int:
    """
    Invalidate cache entries.

    Args:
        prefix: Key prefix to match, e.g. ("candidate-answers",) or
                ("candidate-answers", "c1"). If None, clears all cache.

    Returns:
        Number of entries invalidated
    """
    if prefix is None:
        count = len(_CACHE)
        _CACHE.clear()
        logger.info(f"Cleared entire cache ({count} entries)")
        return count

    prefix = tuple(prefix)
    keys_to_delete = [k for k in _CACHE if k[: len(prefix)] == prefix]
    for key in keys_to_delete:
        del _CACHE[key]
    logger.info(f"Invalidated {len(keys_to_delete)} cache entries matching {prefix}")
    return len(keys_to_delete)


def cleanup_expired() -> int:
    """Remove expired entries from cache; returns number removed."""
    current_time = time.time()
    keys_to_delete = [k for k, v in _CACHE.items() if current_time > v["expiry"]]

    for key in keys_to_delete:
        del _CACHE[key]

    if keys_to_delete:
        logger.debug(f"Cleaned up {len(keys_to_delete)} expired cache entries")

    return len(keys_to_delete)


def run_query(
    key: QueryKey,
    fetch: Callable[[], Any],
    stale_time: float = DEFAULT_STALE_TIME,
    retry: int = DEFAULT_RETRY,
    retry_wait: Optional[float] = None,
) -> Any:
    """
    Return the cached result for key, or fetch, cache and return it.

    A failing fetch is retried `retry` times; the last error propagates and
    nothing is cached.

    Args:
        key: Query key
        fetch: Zero-argument callable performing the remote query
        stale_time: Seconds a result stays fresh (0 = never cached)
        retry: Number of retries after the first failed attempt
        retry_wait: Seconds to wait between attempts (default DEFAULT_RETRY_WAIT)
    """
    if retry_wait is None:
        retry_wait = DEFAULT_RETRY_WAIT

    hit, value = _lookup(key)
    if hit:
        return value
    cleanup_expired()

    for attempt in Retrying(
        stop=stop_after_attempt(retry + 1),
        wait=wait_fixed(retry_wait),
        reraise=True,
    ):
        with attempt:
            if attempt.retry_state.attempt_number > 1:
                logger.warning(
                    f"Retrying query {key} "
                    f"(attempt {attempt.retry_state.attempt_number}/{retry + 1})"
                )
            value = fetch()

    if stale_time > 0:
        cache_response(key, value, ttl=stale_time)
    return value


def cached_query(
    name: str,
    stale_time: float = DEFAULT_STALE_TIME,
    retry: int = DEFAULT_RETRY,
    retry_wait: Optional[float] = None,
) -> Callable:
    """Decorator turning `fn(backend, *args)` into a cached query.

    The query key is the name plus the remaining arguments; the backend client
    is not part of the key.

    Example:
        @cached_query("topics", stale_time=60)
        def fetch_topics(backend):
            return backend.select("topics", order=["name"])
    """

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(backend, *args, **kwargs):
            key = make_query_key(name, *args, **kwargs)
            return run_query(
                key,
                lambda: fn(backend, *args, **kwargs),
                stale_time=stale_time,
                retry=retry,
                retry_wait=retry_wait,
            )

        wrapper.query_name = name
        return wrapper

    return decorator
