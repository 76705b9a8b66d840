"""
Cache em memória para leituras públicas frequentes
"""
import asyncio
import logging
from functools import wraps
from typing import Callable

from cachetools import TTLCache
from sqlalchemy.orm import Session

from propfind.core.config import settings

logger = logging.getLogger(__name__)

# Cache em memória com TTL
cache = TTLCache(maxsize=1000, ttl=settings.CACHE_TTL_SECONDS) if settings.CACHE_ENABLED else None


def _make_key(key_prefix: str, func: Callable, args, kwargs) -> str:
    # A sessão do banco muda a cada requisição e não faz parte da chave
    args = [a for a in args if not isinstance(a, Session)]
    kwargs = {k: v for k, v in kwargs.items() if not isinstance(v, Session)}
    return f"{key_prefix}:{func.__name__}:{args}:{sorted(kwargs.items())}"


def cached(key_prefix: str = ""):
    """
    Decorator para cachear resultados de funções

    Args:
        key_prefix: Prefixo para a chave do cache (usado em clear_cache)
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            if not settings.CACHE_ENABLED or cache is None:
                return await func(*args, **kwargs)

            cache_key = _make_key(key_prefix, func, args, kwargs)
            if cache_key in cache:
                logger.debug(f"Cache hit: {cache_key}")
                return cache[cache_key]

            logger.debug(f"Cache miss: {cache_key}")
            result = await func(*args, **kwargs)
            cache[cache_key] = result
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            if not settings.CACHE_ENABLED or cache is None:
                return func(*args, **kwargs)

            cache_key = _make_key(key_prefix, func, args, kwargs)
            if cache_key in cache:
                logger.debug(f"Cache hit: {cache_key}")
                return cache[cache_key]

            logger.debug(f"Cache miss: {cache_key}")
            result = func(*args, **kwargs)
            cache[cache_key] = result
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def clear_cache(pattern: str = None):
    """
    Limpa o cache

    Args:
        pattern: Padrão para limpar apenas chaves que começam com o padrão
    """
    if cache is None:
        return

    if pattern:
        keys_to_remove = [key for key in list(cache.keys()) if key.startswith(pattern)]
        for key in keys_to_remove:
            cache.pop(key, None)
        logger.info(f"Cache limpo: {len(keys_to_remove)} chaves removidas (padrão: {pattern})")
    else:
        cache.clear()
        logger.info("Cache completamente limpo")
