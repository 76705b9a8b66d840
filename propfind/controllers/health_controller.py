"""
Health check da API
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from propfind.core.cache import cache
from propfind.core.config import settings
from propfind.core.dependencies import get_db

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health Check"],
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get(
    "/",
    status_code=status.HTTP_200_OK,
    summary="Health Check",
    description="Verifica o status da API e conectividade com o banco de dados"
)
def health_check(db: Session = Depends(get_db)):
    """
    Health check básico da API

    Retorna:
    - Status da API e do banco
    - Armazenamento de imagens e provedores OAuth configurados
    - Cache e rate limiting
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        logger.error(f"Erro ao conectar com banco de dados: {e}")
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "timestamp": _now(),
        "environment": settings.ENVIRONMENT,
        "database": {
            "status": db_status
        },
        "storage": {
            "backend": "cloudinary" if settings.cloudinary_enabled else "local",
        },
        "auth": {
            "google": settings.google_enabled,
            "facebook": settings.facebook_enabled,
        },
        "cache": {
            "status": "enabled" if settings.CACHE_ENABLED and cache is not None else "disabled",
            "size": len(cache) if cache is not None else 0,
            "ttl_seconds": settings.CACHE_TTL_SECONDS
        },
        "rate_limiting": {
            "enabled": settings.RATE_LIMIT_ENABLED,
            "limit_per_minute": settings.RATE_LIMIT_PER_MINUTE
        }
    }


@router.get(
    "/ready",
    summary="Readiness Check",
    description="Verifica se a API está pronta para receber requisições"
)
def readiness_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ready", "timestamp": _now()}
    except Exception as e:
        logger.error(f"API não está pronta: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "timestamp": _now()},
        )


@router.get(
    "/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness Check",
    description="Verifica se a API está viva (usado por orquestradores como Kubernetes)"
)
def liveness_check():
    return {"status": "alive", "timestamp": _now()}
