from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import EmailStr

from propfind.schemas.base_schema import CamelModel


class AppSettingsUpdate(CamelModel):
    logo_url: Optional[str] = None
    support_phone: Optional[str] = None
    support_whatsapp: Optional[str] = None
    # Aceita string vazia para limpar o campo
    support_email: Optional[Union[EmailStr, Literal[""]]] = None


class AppSettingsOut(CamelModel):
    id: str
    logo_url: Optional[str] = None
    support_phone: Optional[str] = None
    support_whatsapp: Optional[str] = None
    support_email: Optional[str] = None
    updated_at: datetime
