from sqlalchemy import Column, DateTime, String

from propfind.core.database import Base, utcnow

DEFAULT_SETTINGS_ID = "default"


class AppSettings(Base):
    __tablename__ = "app_settings"

    id               = Column(String, primary_key=True, default=DEFAULT_SETTINGS_ID)
    logo_url         = Column(String, nullable=True)
    support_phone    = Column(String, nullable=True)
    support_whatsapp = Column(String, nullable=True)
    support_email    = Column(String, nullable=True)
    updated_at       = Column(DateTime, nullable=False, default=utcnow)
