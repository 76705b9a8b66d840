# Dependências compartilhadas: sessão do banco, usuário autenticado, admin
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from propfind.core import database
from propfind.core.config import settings
from propfind.core.security import decode_session_token
from propfind.models import user_model
from propfind.schemas import user_schema
from propfind.services import user_service

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

DEV_USER = user_schema.UserUpsert(
    id="local-dev-user",
    email="dev@localhost",
    first_name="Local",
    last_name="Developer",
)


# Lifespan handler para startup (tabelas, pasta de uploads) e shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        database.init_db()
        os.makedirs(settings.UPLOADS_DIR, exist_ok=True)
    except Exception as e:
        logger.error(f"Erro no startup: {e}", exc_info=True)
        raise

    if not settings.google_enabled and not settings.facebook_enabled:
        logger.warning("Nenhum provedor OAuth configurado (Google/Facebook)")
        if settings.DEV_AUTH_BYPASS:
            logger.warning("DEV_AUTH_BYPASS ativo: rotas protegidas usam o usuário local de desenvolvimento")
    yield


def get_db():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def dev_bypass_active() -> bool:
    return settings.DEV_AUTH_BYPASS and not (settings.google_enabled or settings.facebook_enabled)


def get_client_ip(request: Request) -> Optional[str]:
    """
    IP do visitante. Com TRUST_PROXY, lê o X-Forwarded-For a partir da
    direita: as entradas à esquerda vêm do próprio cliente e não são confiáveis.
    """
    if settings.TRUST_PROXY:
        forwarded = request.headers.get("x-forwarded-for")
        hops = [h.strip() for h in forwarded.split(",") if h.strip()] if forwarded else []
        if hops:
            return hops[-min(max(settings.TRUSTED_PROXY_HOPS, 1), len(hops))]
    return request.client.host if request.client else None


def get_session_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Id do usuário da sessão (cookie ou Bearer), sem exigir login"""
    token = credentials.credentials if credentials else request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    user_id = decode_session_token(token)
    if user_id:
        request.state.user_id = user_id
    return user_id


async def get_current_user(
    request: Request,
    user_id: Optional[str] = Depends(get_session_user_id),
    db: Session = Depends(get_db),
) -> user_model.User:
    if user_id is None and dev_bypass_active():
        user = user_service.upsert_user(db, DEV_USER)
        request.state.user_id = user.id
        return user

    credentials_exception = HTTPException(
        status_code=401,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if user_id is None:
        raise credentials_exception
    user = user_service.get_user(db, user_id)
    if user is None:
        raise credentials_exception
    return user


async def get_current_admin(
    current_user: user_model.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> user_model.User:
    if not user_service.is_user_admin(db, current_user.id):
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user
