# Imóveis - busca, detalhe, criação, edição e remoção
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from propfind.core.config import settings
from propfind.core.dependencies import get_client_ip, get_current_user, get_db, get_session_user_id
from propfind.core.rate_limit import WRITE_LIMIT, limiter
from propfind.models import user_model
from propfind.models.property_model import PropertyCategory, PropertyType
from propfind.schemas import property_schema
from propfind.services import property_service, view_service

router = APIRouter(
    prefix="/api",
    tags=["Imóveis"],
)

NOT_FOUND_OR_UNAUTHORIZED = "Property not found or unauthorized"


def get_property_filters(
    search: Optional[str] = None,
    type: Optional[PropertyType] = None,
    category: Optional[PropertyCategory] = None,
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    bedrooms: Optional[int] = Query(None, ge=0),
    bathrooms: Optional[int] = Query(None, ge=0),
    min_size: Optional[int] = Query(None, alias="minSize", ge=0),
    max_size: Optional[int] = Query(None, alias="maxSize", ge=0),
    sort_by: property_schema.SortKey = Query("date", alias="sortBy"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> property_schema.PropertyFilters:
    return property_schema.PropertyFilters(
        search=search,
        type=type,
        category=category,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        min_size=min_size,
        max_size=max_size,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )


@router.get("/properties", response_model=property_schema.PropertyPage)
def list_properties(
    filters: property_schema.PropertyFilters = Depends(get_property_filters),
    db: Session = Depends(get_db),
):
    items, total = property_service.list_properties(db, filters)
    return property_schema.PropertyPage.create(items, total, filters.page, filters.limit)


@router.get("/properties/{property_id}", response_model=property_schema.PropertyOut)
def get_property(
    property_id: str,
    request: Request,
    user_id: Optional[str] = Depends(get_session_user_id),
    db: Session = Depends(get_db),
):
    """
    Detalhe do imóvel. Visualizações de não-donos são contadas uma vez por
    visitante (usuário ou IP) por janela.
    """
    db_property = property_service.get_property(db, property_id)
    if not db_property:
        raise HTTPException(status_code=404, detail="Property not found")

    if view_service.track_view(db, db_property, get_client_ip(request), user_id):
        db.refresh(db_property)
    return db_property


@router.post(
    "/properties",
    response_model=property_schema.PropertyOut,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(WRITE_LIMIT)
def create_property(
    request: Request,
    property_in: property_schema.PropertyCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    return property_service.create_property(db, property_in, current_user.id)


@router.patch("/properties/{property_id}", response_model=property_schema.PropertyOut)
def update_property(
    property_id: str,
    property_in: property_schema.PropertyUpdate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    db_property = property_service.update_property(db, property_id, current_user.id, property_in)
    if not db_property:
        raise HTTPException(status_code=404, detail=NOT_FOUND_OR_UNAUTHORIZED)
    return db_property


@router.delete("/properties/{property_id}")
def delete_property(
    property_id: str,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    # Mesmo 404 para "não existe" e "não é seu": não vaza existência
    if not property_service.delete_property(db, property_id, current_user.id):
        raise HTTPException(status_code=404, detail=NOT_FOUND_OR_UNAUTHORIZED)
    return {"success": True}


@router.get("/my-properties", response_model=List[property_schema.PropertyOut])
def list_my_properties(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    return property_service.list_user_properties(db, current_user.id, include_sold=True)


@router.get("/users/{user_id}/properties", response_model=List[property_schema.PropertyOut])
def list_user_properties(user_id: str, db: Session = Depends(get_db)):
    """Anúncios públicos de um usuário (vendidos ficam de fora)"""
    return property_service.list_user_properties(db, user_id, include_sold=False)
