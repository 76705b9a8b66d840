import enum
import uuid

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, Enum, Float, ForeignKey, Index, Integer,
    String, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from propfind.core.database import Base, utcnow


class PropertyType(str, enum.Enum):
    SALE = "sale"
    RENT = "rent"


class PropertyCategory(str, enum.Enum):
    HOUSE = "house"
    APARTMENT = "apartment"
    LAND = "land"
    COMMERCIAL = "commercial"


class Currency(str, enum.Enum):
    MRU = "MRU"
    USD = "USD"
    EUR = "EUR"


def _new_id() -> str:
    return str(uuid.uuid4())


def _enum_values(e):
    return [m.value for m in e]


class Property(Base):
    __tablename__ = "properties"

    id               = Column(String(36), primary_key=True, default=_new_id)
    user_id          = Column(String, nullable=False, index=True)
    title            = Column(String(255), nullable=False)
    description      = Column(Text, nullable=False)
    price            = Column(Float, nullable=False, index=True)
    currency         = Column(Enum(Currency, name="currency", values_callable=_enum_values),
                              nullable=False, default=Currency.MRU)
    location         = Column(String(500), nullable=False)
    latitude         = Column(Float, nullable=False)
    longitude        = Column(Float, nullable=False)
    type             = Column(Enum(PropertyType, name="property_type", values_callable=_enum_values),
                              nullable=False, index=True)
    category         = Column(Enum(PropertyCategory, name="property_category", values_callable=_enum_values),
                              nullable=False, index=True)
    images           = Column(JSON, nullable=False, default=list)
    video_url        = Column(String, nullable=True)
    tiktok_url       = Column(String, nullable=True)
    facebook_url     = Column(String, nullable=True)
    contact_name     = Column(String(255), nullable=False)
    contact_phone    = Column(String(50), nullable=False)
    contact_whatsapp = Column(String(50), nullable=True)
    bedrooms         = Column(Integer, nullable=True)
    bathrooms        = Column(Integer, nullable=True)
    size             = Column(Integer, nullable=True)
    is_sold          = Column(Boolean, nullable=False, default=False)
    views            = Column(Integer, nullable=False, default=0)
    created_at       = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at       = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_properties_type_category", "type", "category"),
        Index("idx_properties_user_sold", "user_id", "is_sold"),
    )

    favorites = relationship("Favorite", back_populates="property", passive_deletes=True)


class Favorite(Base):
    __tablename__ = "favorites"

    id          = Column(String(36), primary_key=True, default=_new_id)
    user_id     = Column(String, nullable=False, index=True)
    property_id = Column(String(36), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
    created_at  = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "property_id", name="uq_favorites_user_property"),
    )

    property = relationship("Property", back_populates="favorites")


class PropertyView(Base):
    __tablename__ = "property_views"

    id          = Column(String(36), primary_key=True, default=_new_id)
    property_id = Column(String(36), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
    viewer_ip   = Column(String, nullable=True)
    user_id     = Column(String, nullable=True)
    viewed_at   = Column(DateTime, nullable=False, default=utcnow)

    # Consulta de deduplicação: (imóvel, identidade, janela de tempo)
    __table_args__ = (
        Index("idx_views_property_user", "property_id", "user_id", "viewed_at"),
        Index("idx_views_property_ip", "property_id", "viewer_ip", "viewed_at"),
    )
