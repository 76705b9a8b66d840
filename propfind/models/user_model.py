import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, String

from propfind.core.database import Base, utcnow


class Language(str, enum.Enum):
    EN = "en"
    AR = "ar"
    FR = "fr"


class User(Base):
    """Conta autenticada via provedor OAuth (id no formato ``<provider>_<sub>``)"""
    __tablename__ = "users"

    id                = Column(String, primary_key=True)
    email             = Column(String, nullable=True, index=True)
    first_name        = Column(String, nullable=True)
    last_name         = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    created_at        = Column(DateTime, nullable=False, default=utcnow)
    updated_at        = Column(DateTime, nullable=False, default=utcnow)


class UserProfile(Base):
    __tablename__ = "user_profiles"

    user_id            = Column(String, primary_key=True)
    display_name       = Column(String, nullable=True)
    phone              = Column(String, nullable=True)
    whatsapp           = Column(String, nullable=True)
    preferred_language = Column(Enum(Language, name="language", values_callable=lambda e: [m.value for m in e]),
                                nullable=True, default=Language.EN)
    is_admin           = Column(Boolean, nullable=False, default=False, index=True)
