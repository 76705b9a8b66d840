import logging
from typing import List, Optional, Tuple

from sqlalchemy import exists, func, or_
from sqlalchemy.orm import Session

from propfind.core.database import utcnow
from propfind.models.property_model import Favorite, Property, PropertyView
from propfind.models.user_model import UserProfile
from propfind.schemas import property_schema
from propfind.services.property_filters import build_order_by, build_property_conditions

logger = logging.getLogger(__name__)


def list_properties(
    db: Session,
    filters: property_schema.PropertyFilters,
) -> Tuple[List[Property], int]:
    """Retorna a página pedida e o total de imóveis que satisfazem os filtros"""
    conditions = build_property_conditions(filters)

    total = db.query(func.count(Property.id)).filter(*conditions).scalar() or 0
    items = (
        db.query(Property)
        .filter(*conditions)
        .order_by(*build_order_by(filters.sort_by))
        .offset(filters.offset)
        .limit(filters.limit)
        .all()
    )
    return items, total


def get_property(db: Session, property_id: str) -> Optional[Property]:
    return db.query(Property).filter(Property.id == property_id).first()


def list_user_properties(db: Session, user_id: str, include_sold: bool = True) -> List[Property]:
    query = db.query(Property).filter(Property.user_id == user_id)
    if not include_sold:
        query = query.filter(Property.is_sold.is_(False))
    return query.order_by(Property.created_at.desc(), Property.id.asc()).all()


def create_property(
    db: Session,
    property_in: property_schema.PropertyCreate,
    user_id: str,
) -> Property:
    db_property = Property(**property_in.model_dump(), user_id=user_id)
    db.add(db_property)
    db.commit()
    db.refresh(db_property)
    logger.info(f"Imóvel {db_property.id} criado por {user_id}")
    return db_property


def update_property(
    db: Session,
    property_id: str,
    user_id: str,
    property_in: property_schema.PropertyUpdate,
) -> Optional[Property]:
    """Atualiza apenas se o usuário for o dono; None quando nada casou"""
    db_property = (
        db.query(Property)
        .filter(Property.id == property_id, Property.user_id == user_id)
        .first()
    )
    if not db_property:
        return None

    for field, value in property_in.model_dump(exclude_unset=True).items():
        setattr(db_property, field, value)
    db_property.updated_at = utcnow()

    db.commit()
    db.refresh(db_property)
    return db_property


def _owner_or_admin(user_id: str):
    caller_is_admin = exists().where(
        UserProfile.user_id == user_id,
        UserProfile.is_admin.is_(True),
    )
    return or_(Property.user_id == user_id, caller_is_admin)


def delete_property(db: Session, property_id: str, user_id: str) -> bool:
    """
    Remove o imóvel, seus favoritos e visualizações numa única transação.

    O dono ou um admin podem remover. Para qualquer outro usuário o
    resultado é o mesmo de um imóvel inexistente (False) e nada é apagado.
    """
    try:
        db.query(Favorite).filter(Favorite.property_id == property_id).delete(
            synchronize_session=False
        )
        db.query(PropertyView).filter(PropertyView.property_id == property_id).delete(
            synchronize_session=False
        )
        deleted = (
            db.query(Property)
            .filter(Property.id == property_id, _owner_or_admin(user_id))
            .delete(synchronize_session=False)
        )
        if not deleted:
            db.rollback()
            return False
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Imóvel {property_id} removido por {user_id}")
    return True
