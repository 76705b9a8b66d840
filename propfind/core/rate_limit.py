"""
Rate limiting para a API
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

from propfind.core.config import settings


def get_rate_limit_key(request: Request) -> str:
    """Gera chave para rate limiting baseada no usuário da sessão ou no IP"""
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return f"user:{user_id}"
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_rate_limit_key,
    enabled=settings.RATE_LIMIT_ENABLED,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"] if settings.RATE_LIMIT_ENABLED else [],
)

_original_limit = limiter.limit


def limit(*args, **kwargs):
    """Wrapper para limiter.limit que não decora nada com rate limiting desabilitado"""
    if not settings.RATE_LIMIT_ENABLED:
        def noop_decorator(func):
            return func
        return noop_decorator
    return _original_limit(*args, **kwargs)


limiter.limit = limit

# Limite padrão das rotas de escrita pesada (upload, criação de anúncio)
WRITE_LIMIT = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
