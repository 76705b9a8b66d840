import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from propfind.core.cache import cached, clear_cache
from propfind.core.config import settings
from propfind.core.database import utcnow
from propfind.models.app_settings_model import DEFAULT_SETTINGS_ID, AppSettings
from propfind.schemas import app_settings_schema

logger = logging.getLogger(__name__)

CACHE_PREFIX = "app_settings"


def _get_row(db: Session):
    return db.query(AppSettings).filter(AppSettings.id == DEFAULT_SETTINGS_ID).first()


def get_app_settings(db: Session) -> AppSettings:
    """Lê a linha única de configurações, criando com valores padrão se faltar"""
    row = _get_row(db)
    if row:
        return row

    row = AppSettings(
        id=DEFAULT_SETTINGS_ID,
        support_phone=settings.DEFAULT_SUPPORT_PHONE,
        support_whatsapp=settings.DEFAULT_SUPPORT_WHATSAPP,
        support_email=settings.DEFAULT_SUPPORT_EMAIL,
        updated_at=utcnow(),
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return _get_row(db)
    db.refresh(row)
    logger.info("Configurações padrão do app criadas")
    return row


@cached(key_prefix=CACHE_PREFIX)
def get_public_settings(db: Session) -> app_settings_schema.AppSettingsOut:
    return app_settings_schema.AppSettingsOut.model_validate(get_app_settings(db))


def update_app_settings(
    db: Session,
    settings_in: app_settings_schema.AppSettingsUpdate,
) -> AppSettings:
    """Atualiza só os campos enviados (upsert da linha 'default')"""
    row = get_app_settings(db)
    for field, value in settings_in.model_dump(exclude_unset=True).items():
        setattr(row, field, value)
    row.updated_at = utcnow()
    db.commit()
    db.refresh(row)

    clear_cache(CACHE_PREFIX)
    logger.info("Configurações do app atualizadas")
    return row
