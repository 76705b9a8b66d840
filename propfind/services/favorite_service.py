from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from propfind.models.property_model import Favorite, Property


def get_favorite(db: Session, user_id: str, property_id: str):
    return (
        db.query(Favorite)
        .filter(Favorite.user_id == user_id, Favorite.property_id == property_id)
        .first()
    )


def add_favorite(db: Session, user_id: str, property_id: str) -> Favorite:
    """Idempotente: favoritar de novo devolve o registro existente"""
    existing = get_favorite(db, user_id, property_id)
    if existing:
        return existing

    favorite = Favorite(user_id=user_id, property_id=property_id)
    db.add(favorite)
    try:
        db.commit()
    except IntegrityError:
        # Corrida com outra requisição do mesmo usuário: a linha já existe
        db.rollback()
        return get_favorite(db, user_id, property_id)
    db.refresh(favorite)
    return favorite


def remove_favorite(db: Session, user_id: str, property_id: str) -> bool:
    """Idempotente: retorna se alguma linha foi de fato removida"""
    deleted = (
        db.query(Favorite)
        .filter(Favorite.user_id == user_id, Favorite.property_id == property_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0


def get_favorite_properties(db: Session, user_id: str) -> List[Property]:
    return (
        db.query(Property)
        .join(Favorite, Favorite.property_id == Property.id)
        .filter(Favorite.user_id == user_id)
        .order_by(Favorite.created_at.desc(), Property.id.asc())
        .all()
    )


def get_favorite_property_ids(db: Session, user_id: str) -> List[str]:
    rows = db.query(Favorite.property_id).filter(Favorite.user_id == user_id).all()
    return [row.property_id for row in rows]
