from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from propfind.core.dependencies import get_current_user, get_db
from propfind.models import user_model
from propfind.schemas import favorite_schema, property_schema
from propfind.services import favorite_service, property_service

router = APIRouter(
    prefix="/api/favorites",
    tags=["Favoritos"],
)


@router.get("", response_model=List[property_schema.PropertyOut])
def list_favorites(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    return favorite_service.get_favorite_properties(db, current_user.id)


@router.get("/ids", response_model=List[str])
def list_favorite_ids(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    """Só os ids, para marcar os cards sem buscar os imóveis"""
    return favorite_service.get_favorite_property_ids(db, current_user.id)


@router.post("", response_model=favorite_schema.FavoriteOut, status_code=status.HTTP_201_CREATED)
def add_favorite(
    favorite_in: favorite_schema.FavoriteCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    if not favorite_in.property_id:
        raise HTTPException(status_code=400, detail="Property ID is required")
    if not property_service.get_property(db, favorite_in.property_id):
        raise HTTPException(status_code=404, detail="Property not found")
    return favorite_service.add_favorite(db, current_user.id, favorite_in.property_id)


@router.delete("/{property_id}", response_model=favorite_schema.FavoriteRemoved)
def remove_favorite(
    property_id: str,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    removed = favorite_service.remove_favorite(db, current_user.id, property_id)
    return favorite_schema.FavoriteRemoved(removed=removed)
