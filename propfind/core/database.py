import logging
from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from propfind.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # Banco em memória precisa de uma única conexão compartilhada
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}


engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def utcnow() -> datetime:
    # Timestamps são gravados em UTC sem tzinfo (compatível com Postgres e SQLite)
    return datetime.now(timezone.utc).replace(tzinfo=None)


def init_db():
    """Cria as tabelas que ainda não existem"""
    # Registra os modelos no metadata antes do create_all
    from propfind.models import app_settings_model, property_model, user_model  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Tabelas verificadas/criadas")
