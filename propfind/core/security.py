"""
Tokens de sessão (JWT) emitidos após o login OAuth
"""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from propfind.core.config import settings

STATE_EXPIRE_MINUTES = 10


def create_session_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    expires = timedelta(minutes=expires_minutes or settings.SESSION_EXPIRE_MINUTES)
    payload = {
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + expires,
        "typ": "session",
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str) -> Optional[str]:
    """Retorna o id do usuário, ou None se o token for inválido/expirado"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("typ") != "session":
        return None
    return payload.get("sub")


def create_state_token(provider: str) -> str:
    """State do OAuth assinado, guardado em cookie até o callback"""
    payload = {
        "provider": provider,
        "nonce": secrets.token_urlsafe(16),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=STATE_EXPIRE_MINUTES),
        "typ": "oauth_state",
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_state_token(token: Optional[str], received_state: Optional[str], provider: str) -> bool:
    if not token or not received_state or token != received_state:
        return False
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return False
    return payload.get("typ") == "oauth_state" and payload.get("provider") == provider
