"""
Configuração global para testes

Este arquivo é carregado automaticamente pelo pytest antes de qualquer teste.
Ele configura as variáveis de ambiente necessárias para os testes.
"""
import os
import tempfile

import pytest

# Configurações padrão para testes - definidas ANTES de qualquer import
TEST_ENV_VARS = {
    "SECRET_KEY": "test_secret_key_for_testing_only",
    "DATABASE_URL": "sqlite:///:memory:",
    "ALGORITHM": "HS256",
    "ENVIRONMENT": "testing",
    "LOG_LEVEL": "WARNING",
    "CORS_ORIGINS": "*",
    "UPLOADS_DIR": os.path.join(tempfile.gettempdir(), "propfind_test_uploads"),
    "MAX_FILE_SIZE_MB": "10",
    "MAX_FILES_PER_UPLOAD": "10",
    "DEFAULT_PAGE_SIZE": "12",
    "MAX_PAGE_SIZE": "100",
    "RATE_LIMIT_ENABLED": "false",
    "RATE_LIMIT_PER_MINUTE": "60",
    "CACHE_ENABLED": "false",
    "CACHE_TTL_SECONDS": "300",
    "DEV_AUTH_BYPASS": "false",
    "GOOGLE_CLIENT_ID": "",
    "GOOGLE_CLIENT_SECRET": "",
    "FACEBOOK_APP_ID": "",
    "FACEBOOK_APP_SECRET": "",
    "CLOUDINARY_CLOUD_NAME": "",
    "CLOUDINARY_API_KEY": "",
    "CLOUDINARY_API_SECRET": "",
}

# Configura variáveis de ambiente imediatamente quando o módulo é importado
# Isso garante que estejam disponíveis antes de qualquer import que use Settings
for key, value in TEST_ENV_VARS.items():
    os.environ[key] = value

from fastapi.testclient import TestClient  # noqa: E402

from propfind.core import database  # noqa: E402
from propfind.core.security import create_session_token  # noqa: E402
from propfind.main import app  # noqa: E402
from propfind.schemas import property_schema, user_schema  # noqa: E402
from propfind.services import property_service, user_service  # noqa: E402


@pytest.fixture(scope="function", autouse=True)
def reset_database():
    """Recria as tabelas a cada teste para garantir isolamento"""
    database.init_db()
    yield
    database.Base.metadata.drop_all(bind=database.engine)


@pytest.fixture(scope="function")
def db_session():
    """Cria uma sessão de banco de dados para cada teste"""
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def client():
    """Cria um cliente de teste"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def make_user(db_session):
    """Cria (ou atualiza) uma conta como faria o callback OAuth"""
    def _make_user(user_id: str = "google_1", email: str = None, **fields):
        user_in = user_schema.UserUpsert(
            id=user_id,
            email=email or f"{user_id}@example.com",
            first_name=fields.get("first_name", "Test"),
            last_name=fields.get("last_name", "User"),
        )
        return user_service.upsert_user(db_session, user_in)
    return _make_user


@pytest.fixture(scope="function")
def auth_headers():
    """Headers com token de sessão válido para o usuário informado"""
    def _auth_headers(user_id: str):
        return {"Authorization": f"Bearer {create_session_token(user_id)}"}
    return _auth_headers


def property_payload(**overrides) -> dict:
    """Corpo JSON (camelCase) de um anúncio válido"""
    payload = {
        "title": "Casa em Tevragh Zeina",
        "description": "Casa ampla com quintal",
        "price": 100000,
        "currency": "USD",
        "location": "Nouakchott",
        "latitude": 18.0,
        "longitude": -15.0,
        "type": "sale",
        "category": "house",
        "images": ["a.jpg"],
        "contactName": "Ahmed",
        "contactPhone": "+222 22 00 00 00",
    }
    payload.update(overrides)
    return payload


@pytest.fixture(scope="function")
def payload():
    """Fábrica do corpo JSON de um anúncio"""
    return property_payload


@pytest.fixture(scope="function")
def make_property(db_session):
    """Cria um imóvel diretamente pelo service"""
    def _make_property(user_id: str = "google_owner", **overrides):
        property_in = property_schema.PropertyCreate(**property_payload(**overrides))
        return property_service.create_property(db_session, property_in, user_id)
    return _make_property
