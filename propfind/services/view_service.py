"""
Contagem de visualizações com deduplicação por visitante
"""
import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from propfind.core.config import settings
from propfind.core.database import utcnow
from propfind.models.property_model import Property, PropertyView

logger = logging.getLogger(__name__)


def has_viewed_recently(
    db: Session,
    property_id: str,
    viewer_ip: Optional[str],
    user_id: Optional[str],
) -> bool:
    """
    Verifica se a identidade já visualizou o imóvel dentro da janela.

    A identidade é o usuário quando autenticado, senão o IP. Sem nenhum
    dos dois retorna False.
    """
    since = utcnow() - timedelta(minutes=settings.VIEW_DEDUP_WINDOW_MINUTES)
    query = db.query(PropertyView.id).filter(
        PropertyView.property_id == property_id,
        PropertyView.viewed_at >= since,
    )

    if user_id:
        query = query.filter(PropertyView.user_id == user_id)
    elif viewer_ip:
        query = query.filter(PropertyView.viewer_ip == viewer_ip)
    else:
        return False

    return query.first() is not None


def record_view(
    db: Session,
    property_id: str,
    viewer_ip: Optional[str],
    user_id: Optional[str],
) -> PropertyView:
    view = PropertyView(property_id=property_id, viewer_ip=viewer_ip, user_id=user_id)
    db.add(view)
    db.commit()
    return view


def increment_views(db: Session, property_id: str) -> None:
    db.query(Property).filter(Property.id == property_id).update(
        {Property.views: Property.views + 1},
        synchronize_session=False,
    )
    db.commit()


def track_view(
    db: Session,
    db_property: Property,
    viewer_ip: Optional[str],
    user_id: Optional[str],
) -> bool:
    """
    Conta a visualização de um não-dono, no máximo uma vez por janela.

    Evento e contador são duas escritas separadas (sem transação comum):
    uma falha entre elas deixa o evento sem incremento.
    """
    if user_id is not None and user_id == db_property.user_id:
        return False
    if not user_id and not viewer_ip:
        return False
    if has_viewed_recently(db, db_property.id, viewer_ip, user_id):
        return False

    record_view(db, db_property.id, viewer_ip, user_id)
    increment_views(db, db_property.id)
    logger.debug(f"Visualização contada para imóvel {db_property.id}")
    return True
