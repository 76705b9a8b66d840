"""
Login via OAuth (Google/Facebook) e sessão em cookie
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from propfind.core.config import settings
from propfind.core.dependencies import DEV_USER, dev_bypass_active, get_current_user, get_db
from propfind.core.security import STATE_EXPIRE_MINUTES, create_session_token, create_state_token, verify_state_token
from propfind.models import user_model
from propfind.schemas import user_schema
from propfind.services import oauth_service, user_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Autenticação"],
)

STATE_COOKIE_NAME = "oauth_state"
AUTH_FAILED_REDIRECT = "/?error=auth_failed"


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=302)


def set_session_cookie(response, user_id: str):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(user_id),
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


@router.get("/login")
def login(db: Session = Depends(get_db)):
    """Redireciona para o provedor disponível (ou para a tela de escolha)"""
    providers = oauth_service.enabled_providers()
    if len(providers) == 1:
        return _redirect(f"/api/auth/{providers[0]}")
    if len(providers) > 1:
        return _redirect("/login")

    if dev_bypass_active():
        user = user_service.upsert_user(db, DEV_USER)
        response = _redirect("/")
        set_session_cookie(response, user.id)
        return response
    raise HTTPException(status_code=400, detail="No OAuth providers configured")


@router.get("/auth/user", response_model=user_schema.UserOut)
def read_current_user(current_user: user_model.User = Depends(get_current_user)):
    return current_user


@router.get("/auth/{provider}")
def start_oauth(provider: str):
    oauth_provider = oauth_service.get_provider(provider)
    if not oauth_provider:
        raise HTTPException(status_code=404, detail="Provider not available")

    state = create_state_token(provider)
    response = _redirect(oauth_service.build_authorize_url(oauth_provider, state))
    response.set_cookie(
        key=STATE_COOKIE_NAME,
        value=state,
        max_age=STATE_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/api/auth",
    )
    return response


@router.get("/auth/{provider}/callback")
async def oauth_callback(
    provider: str,
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    db: Session = Depends(get_db),
):
    oauth_provider = oauth_service.get_provider(provider)
    if not oauth_provider:
        raise HTTPException(status_code=404, detail="Provider not available")

    if not code or not verify_state_token(request.cookies.get(STATE_COOKIE_NAME), state, provider):
        logger.warning(f"Callback OAuth {provider} inválido (code/state)")
        return _redirect(AUTH_FAILED_REDIRECT)

    try:
        profile = await oauth_service.fetch_user_profile(oauth_provider, code)
    except oauth_service.OAuthError as e:
        logger.warning(f"Falha no login via {provider}: {e}")
        return _redirect(AUTH_FAILED_REDIRECT)

    is_new_user = user_service.get_user_by_id_or_email(db, profile.id, profile.email) is None
    user = user_service.upsert_user(db, profile)

    response = _redirect("/?registered=true" if is_new_user else "/?logged_in=true")
    set_session_cookie(response, user.id)
    response.delete_cookie(STATE_COOKIE_NAME, path="/api/auth")
    return response


@router.get("/logout")
def logout():
    response = _redirect("/")
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return response
