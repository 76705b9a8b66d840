from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from propfind.core.dependencies import get_current_admin, get_current_user, get_db
from propfind.models import user_model
from propfind.schemas import user_schema
from propfind.services import user_service

router = APIRouter(
    prefix="/api",
    tags=["Usuários"],
)


# Perfil
@router.get("/profile", response_model=user_schema.ProfileOut)
def read_profile(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    """Perfil do usuário atual; criado na primeira leitura"""
    profile = user_service.get_profile(db, current_user.id)
    if not profile:
        profile = user_service.upsert_profile(db, current_user.id)
    return profile


@router.put("/profile", response_model=user_schema.ProfileOut)
def update_profile(
    profile_in: user_schema.ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    user_service.sync_account_names(
        db,
        current_user.id,
        display_name=profile_in.display_name,
        first_name=profile_in.first_name,
        last_name=profile_in.last_name,
    )
    return user_service.upsert_profile(db, current_user.id, profile_in)


# Administração
@router.get("/admin/check", response_model=user_schema.AdminCheck)
def check_admin(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    return user_schema.AdminCheck(is_admin=user_service.is_user_admin(db, current_user.id))


@router.patch("/admin/users/{user_id}", response_model=user_schema.ProfileOut)
def set_user_admin(
    user_id: str,
    admin_in: user_schema.AdminUpdate,
    db: Session = Depends(get_db),
    _: user_model.User = Depends(get_current_admin),
):
    profile = user_service.set_user_admin(db, user_id, admin_in.is_admin)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile
