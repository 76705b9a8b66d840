"""
Cliente OAuth 2.0 mínimo para Google e Facebook (authorization code)
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlencode

import httpx

from propfind.core.config import settings
from propfind.schemas.user_schema import UserUpsert

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 10.0


class OAuthError(Exception):
    """Falha na troca do código ou na leitura do perfil no provedor"""


@dataclass(frozen=True)
class OAuthProvider:
    name: str
    authorize_url: str
    token_url: str
    userinfo_url: str
    scope: str
    extra_params: tuple = ()


PROVIDERS: Dict[str, OAuthProvider] = {
    "google": OAuthProvider(
        name="google",
        authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
        token_url="https://oauth2.googleapis.com/token",
        userinfo_url="https://openidconnect.googleapis.com/v1/userinfo",
        scope="openid profile email",
        extra_params=(("prompt", "select_account"),),
    ),
    "facebook": OAuthProvider(
        name="facebook",
        authorize_url="https://www.facebook.com/v19.0/dialog/oauth",
        token_url="https://graph.facebook.com/v19.0/oauth/access_token",
        userinfo_url="https://graph.facebook.com/me?fields=id,name,email,picture.type(large)",
        scope="email",
    ),
}


def client_credentials(provider: str):
    if provider == "google":
        return settings.GOOGLE_CLIENT_ID, settings.GOOGLE_CLIENT_SECRET
    if provider == "facebook":
        return settings.FACEBOOK_APP_ID, settings.FACEBOOK_APP_SECRET
    return None, None


def enabled_providers() -> list:
    return [name for name in PROVIDERS if all(client_credentials(name))]


def get_provider(provider: str) -> Optional[OAuthProvider]:
    if provider not in enabled_providers():
        return None
    return PROVIDERS[provider]


def callback_url(provider: str) -> str:
    base = settings.BASE_URL or "http://localhost:5000"
    return f"{base.rstrip('/')}/api/auth/{provider}/callback"


def build_authorize_url(provider: OAuthProvider, state: str) -> str:
    client_id, _ = client_credentials(provider.name)
    params = {
        "client_id": client_id,
        "redirect_uri": callback_url(provider.name),
        "response_type": "code",
        "scope": provider.scope,
        "state": state,
    }
    params.update(dict(provider.extra_params))
    return f"{provider.authorize_url}?{urlencode(params)}"


def _split_name(display_name: Optional[str]):
    parts = (display_name or "").split()
    return (parts[0] if parts else ""), " ".join(parts[1:])


def normalize_profile(provider: str, info: dict) -> UserUpsert:
    """Converte a resposta do provedor no formato da conta local"""
    if provider == "google":
        sub = info.get("sub")
        first_name = info.get("given_name")
        last_name = info.get("family_name")
        if first_name is None and last_name is None:
            first_name, last_name = _split_name(info.get("name"))
        picture = info.get("picture")
    else:
        sub = info.get("id")
        first_name, last_name = _split_name(info.get("name"))
        picture = (info.get("picture") or {}).get("data", {}).get("url")

    if not sub:
        raise OAuthError(f"Perfil {provider} sem identificador")

    return UserUpsert(
        id=f"{provider}_{sub}",
        email=info.get("email") or "",
        first_name=first_name or "",
        last_name=last_name or "",
        profile_image_url=picture,
    )


async def fetch_user_profile(provider: OAuthProvider, code: str) -> UserUpsert:
    """Troca o código de autorização pelo token e lê o perfil do usuário"""
    client_id, client_secret = client_credentials(provider.name)
    try:
        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
            token_resp = await client.post(
                provider.token_url,
                data={
                    "client_id": client_id,
                    "client_secret": client_secret,
                    "code": code,
                    "grant_type": "authorization_code",
                    "redirect_uri": callback_url(provider.name),
                },
                headers={"Accept": "application/json"},
            )
            token_resp.raise_for_status()
            access_token = token_resp.json().get("access_token")
            if not access_token:
                raise OAuthError(f"{provider.name} não retornou access_token")

            info_resp = await client.get(
                provider.userinfo_url,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            info_resp.raise_for_status()
            info = info_resp.json()
    except httpx.HTTPError as e:
        raise OAuthError(f"Erro HTTP com {provider.name}: {e}") from e

    return normalize_profile(provider.name, info)
