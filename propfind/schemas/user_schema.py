from datetime import datetime
from typing import Optional

from pydantic import Field

from propfind.models.user_model import Language
from propfind.schemas.base_schema import CamelModel


class UserUpsert(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None


class UserOut(UserUpsert):
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(CamelModel):
    display_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    whatsapp: Optional[str] = Field(None, max_length=50)
    preferred_language: Optional[Language] = None
    # Atualizam a conta (users), não o perfil
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ProfileOut(CamelModel):
    user_id: str
    display_name: Optional[str] = None
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    preferred_language: Optional[Language] = None
    is_admin: bool


class AdminCheck(CamelModel):
    is_admin: bool


class AdminUpdate(CamelModel):
    is_admin: bool
