from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from propfind.models.property_model import Currency, PropertyCategory, PropertyType
from propfind.schemas.base_schema import CamelModel
from propfind.schemas.pagination_schema import PaginationParams, calculate_total_pages

MAX_IMAGES = 10

SortKey = Literal["date", "price_asc", "price_desc"]


class PropertyBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    currency: Currency = Currency.MRU
    location: str = Field(..., min_length=1, max_length=500)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    type: PropertyType
    category: PropertyCategory
    images: List[str] = Field(..., min_length=1, max_length=MAX_IMAGES)
    video_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    facebook_url: Optional[str] = None
    contact_name: str = Field(..., min_length=1, max_length=255)
    contact_phone: str = Field(..., min_length=1, max_length=50)
    contact_whatsapp: Optional[str] = Field(None, max_length=50)
    bedrooms: Optional[int] = Field(None, gt=0)
    bathrooms: Optional[int] = Field(None, gt=0)
    size: Optional[int] = Field(None, gt=0)


class PropertyCreate(PropertyBase):
    is_sold: bool = False


# Campos que não podem ser anulados numa atualização parcial
NON_NULLABLE_FIELDS = (
    "title", "description", "price", "currency", "location", "latitude",
    "longitude", "type", "category", "images", "contact_name",
    "contact_phone", "is_sold",
)


class PropertyUpdate(CamelModel):
    title:            Optional[str]              = Field(None, min_length=1, max_length=255)
    description:      Optional[str]              = Field(None, min_length=1)
    price:            Optional[float]            = Field(None, gt=0)
    currency:         Optional[Currency]         = None
    location:         Optional[str]              = Field(None, min_length=1, max_length=500)
    latitude:         Optional[float]            = Field(None, ge=-90, le=90)
    longitude:        Optional[float]            = Field(None, ge=-180, le=180)
    type:             Optional[PropertyType]     = None
    category:         Optional[PropertyCategory] = None
    images:           Optional[List[str]]        = Field(None, min_length=1, max_length=MAX_IMAGES)
    video_url:        Optional[str]              = None
    tiktok_url:       Optional[str]              = None
    facebook_url:     Optional[str]              = None
    contact_name:     Optional[str]              = Field(None, min_length=1, max_length=255)
    contact_phone:    Optional[str]              = Field(None, min_length=1, max_length=50)
    contact_whatsapp: Optional[str]              = Field(None, max_length=50)
    bedrooms:         Optional[int]              = Field(None, gt=0)
    bathrooms:        Optional[int]              = Field(None, gt=0)
    size:             Optional[int]              = Field(None, gt=0)
    is_sold:          Optional[bool]             = None

    class Config:
        extra = "forbid"

    @field_validator(*NON_NULLABLE_FIELDS, mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class PropertyOut(PropertyBase):
    id: str
    user_id: str
    is_sold: bool
    views: int
    created_at: datetime
    updated_at: datetime


class PropertyFilters(PaginationParams):
    search: Optional[str] = None
    type: Optional[PropertyType] = None
    category: Optional[PropertyCategory] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    min_size: Optional[int] = Field(None, ge=0)
    max_size: Optional[int] = Field(None, ge=0)
    sort_by: SortKey = "date"

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class PropertyPage(CamelModel):
    properties: List[PropertyOut]
    total: int
    page: int
    total_pages: int

    @classmethod
    def create(cls, items, total: int, page: int, limit: int):
        """Monta a resposta paginada da busca"""
        return cls(
            properties=[PropertyOut.model_validate(p) for p in items],
            total=total,
            page=page,
            total_pages=calculate_total_pages(total, limit),
        )
