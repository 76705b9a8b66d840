import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from propfind.core.database import utcnow
from propfind.models.user_model import Language, User, UserProfile
from propfind.schemas import user_schema

logger = logging.getLogger(__name__)


# Contas (users)

def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_id_or_email(db: Session, user_id: str, email: Optional[str] = None) -> Optional[User]:
    if email:
        return db.query(User).filter(or_(User.id == user_id, User.email == email)).first()
    return get_user(db, user_id)


def upsert_user(db: Session, user_in: user_schema.UserUpsert) -> User:
    data = user_in.model_dump(exclude_unset=True, exclude={"id"})
    db_user = get_user(db, user_in.id)
    if db_user:
        for field, value in data.items():
            setattr(db_user, field, value)
        db_user.updated_at = utcnow()
    else:
        db_user = User(id=user_in.id, **data)
        db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def sync_account_names(
    db: Session,
    user_id: str,
    display_name: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> Optional[User]:
    """
    Atualiza nome/sobrenome da conta a partir do perfil.

    Se só o display name vier, a primeira palavra vira o nome e o resto o
    sobrenome ("John Ronald Doe" -> "John" / "Ronald Doe").
    """
    if first_name is None and last_name is None and not display_name:
        return None

    current = get_user(db, user_id)
    if display_name and not first_name and not last_name:
        parts = display_name.split()
        if parts:
            first_name = parts[0]
            last_name = " ".join(parts[1:]) or (current.last_name if current else None) or ""

    user_in = user_schema.UserUpsert(
        id=user_id,
        email=current.email if current else "",
        first_name=first_name if first_name is not None else (current.first_name if current else None),
        last_name=last_name if last_name is not None else (current.last_name if current else None),
        profile_image_url=current.profile_image_url if current else None,
    )
    return upsert_user(db, user_in)


# Perfis e administração

def get_profile(db: Session, user_id: str) -> Optional[UserProfile]:
    return db.query(UserProfile).filter(UserProfile.user_id == user_id).first()


def admin_exists(db: Session) -> bool:
    return db.query(UserProfile.user_id).filter(UserProfile.is_admin.is_(True)).first() is not None


def upsert_profile(
    db: Session,
    user_id: str,
    profile_in: Optional[user_schema.ProfileUpdate] = None,
) -> UserProfile:
    """
    Cria ou atualiza o perfil do usuário.

    Um perfil novo nasce admin somente se ainda não existe nenhum admin.
    A regra vale apenas na criação; is_admin nunca é alterado por aqui.
    Dois primeiros cadastros simultâneos de usuários diferentes ainda podem
    ambos virar admin (sem trava global).
    """
    data = {}
    if profile_in is not None:
        data = profile_in.model_dump(exclude_unset=True, exclude={"first_name", "last_name"})

    db_profile = get_profile(db, user_id)
    if db_profile:
        return _apply_profile(db, db_profile, data)

    make_admin = not admin_exists(db)
    db_profile = UserProfile(user_id=user_id, is_admin=make_admin, **data)
    if db_profile.preferred_language is None and "preferred_language" not in data:
        db_profile.preferred_language = Language.EN
    db.add(db_profile)
    try:
        db.commit()
    except IntegrityError:
        # Outra requisição criou o mesmo perfil: vira atualização
        db.rollback()
        return _apply_profile(db, get_profile(db, user_id), data)

    db.refresh(db_profile)
    if make_admin:
        logger.info(f"Primeiro perfil criado: usuário {user_id} definido como admin")
    return db_profile


def _apply_profile(db: Session, db_profile: UserProfile, data: dict) -> UserProfile:
    for field, value in data.items():
        setattr(db_profile, field, value)
    db.commit()
    db.refresh(db_profile)
    return db_profile


def is_user_admin(db: Session, user_id: str) -> bool:
    profile = get_profile(db, user_id)
    return bool(profile and profile.is_admin)


def set_user_admin(db: Session, user_id: str, is_admin: bool) -> Optional[UserProfile]:
    db_profile = get_profile(db, user_id)
    if not db_profile:
        return None
    db_profile.is_admin = is_admin
    db.commit()
    db.refresh(db_profile)
    logger.info(f"Usuário {user_id} admin={is_admin}")
    return db_profile
