from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from propfind.core.dependencies import get_current_admin, get_db
from propfind.models import user_model
from propfind.schemas import app_settings_schema
from propfind.services import app_settings_service

router = APIRouter(
    prefix="/api/app-settings",
    tags=["Configurações"],
)


@router.get("", response_model=app_settings_schema.AppSettingsOut)
def read_app_settings(db: Session = Depends(get_db)):
    """Logo e contatos de suporte (público)"""
    return app_settings_service.get_public_settings(db)


@router.patch("", response_model=app_settings_schema.AppSettingsOut)
def update_app_settings(
    settings_in: app_settings_schema.AppSettingsUpdate,
    db: Session = Depends(get_db),
    _: user_model.User = Depends(get_current_admin),
):
    return app_settings_service.update_app_settings(db, settings_in)
