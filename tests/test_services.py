"""
Testes da camada de serviços (regras de negócio sem HTTP)
"""
from datetime import timedelta
from unittest.mock import patch

import pytest
from cachetools import TTLCache

from propfind.core import cache as cache_module
from propfind.core.config import settings
from propfind.core.database import utcnow
from propfind.models.property_model import Favorite, Property, PropertyView
from propfind.models.user_model import Language
from propfind.schemas.app_settings_schema import AppSettingsUpdate
from propfind.schemas.property_schema import PropertyUpdate
from propfind.schemas.user_schema import ProfileUpdate
from propfind.services import (
    app_settings_service, favorite_service, property_service, user_service, view_service,
)


class TestPropertyService:
    def test_create_sets_owner_and_defaults(self, make_property):
        """Testa que o dono e os valores iniciais são atribuídos no servidor"""
        prop = make_property(user_id="google_a")
        assert prop.user_id == "google_a"
        assert prop.views == 0
        assert prop.is_sold is False
        assert prop.id

    def test_update_by_owner(self, db_session, make_property):
        """Testa atualização parcial pelo dono"""
        prop = make_property(user_id="google_a")
        before = prop.updated_at
        updated = property_service.update_property(
            db_session, prop.id, "google_a", PropertyUpdate(price=123, isSold=True)
        )
        assert updated.price == 123
        assert updated.is_sold is True
        assert updated.title == "Casa em Tevragh Zeina"
        assert updated.updated_at >= before

    def test_update_by_other_user(self, db_session, make_property):
        """Testa que outro usuário não altera o imóvel"""
        prop = make_property(user_id="google_a")
        assert property_service.update_property(
            db_session, prop.id, "google_b", PropertyUpdate(price=1)
        ) is None
        db_session.expire_all()
        assert property_service.get_property(db_session, prop.id).price == 100000

    def test_list_user_properties(self, db_session, make_property):
        """Testa listagem do dono com e sem vendidos"""
        make_property(user_id="google_a")
        make_property(user_id="google_a", isSold=True)
        make_property(user_id="google_b")
        assert len(property_service.list_user_properties(db_session, "google_a")) == 2
        public = property_service.list_user_properties(db_session, "google_a", include_sold=False)
        assert len(public) == 1
        assert public[0].is_sold is False


class TestDeleteProperty:
    def _seed_dependents(self, db_session, prop):
        favorite_service.add_favorite(db_session, "google_fan", prop.id)
        view_service.record_view(db_session, prop.id, "10.0.0.1", None)

    def _count(self, db_session, model, property_id):
        return db_session.query(model).filter(model.property_id == property_id).count()

    def test_owner_deletes_with_dependents(self, db_session, make_property):
        """Testa remoção em cascata pelo dono"""
        prop = make_property(user_id="google_a")
        prop_id = prop.id
        self._seed_dependents(db_session, prop)

        assert property_service.delete_property(db_session, prop_id, "google_a") is True
        assert property_service.get_property(db_session, prop_id) is None
        assert self._count(db_session, Favorite, prop_id) == 0
        assert self._count(db_session, PropertyView, prop_id) == 0

    def test_stranger_deletes_nothing(self, db_session, make_property):
        """Testa que um não-dono não apaga nem o imóvel nem os dependentes"""
        prop = make_property(user_id="google_a")
        prop_id = prop.id
        self._seed_dependents(db_session, prop)

        assert property_service.delete_property(db_session, prop_id, "google_b") is False
        db_session.expire_all()
        assert property_service.get_property(db_session, prop_id) is not None
        assert self._count(db_session, Favorite, prop_id) == 1
        assert self._count(db_session, PropertyView, prop_id) == 1

    def test_admin_deletes_any(self, db_session, make_property):
        """Testa que admin remove imóvel de outro usuário"""
        user_service.upsert_profile(db_session, "google_admin")
        prop = make_property(user_id="google_a")
        prop_id = prop.id
        assert property_service.delete_property(db_session, prop_id, "google_admin") is True
        assert property_service.get_property(db_session, prop_id) is None

    def test_missing_property(self, db_session):
        """Testa remoção de imóvel inexistente"""
        assert property_service.delete_property(db_session, "nope", "google_a") is False

    def test_failure_rolls_back(self, db_session, make_property):
        """Testa que erro no meio da remoção desfaz tudo"""
        prop = make_property(user_id="google_a")
        prop_id = prop.id
        self._seed_dependents(db_session, prop)

        with patch.object(property_service, "_owner_or_admin", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                property_service.delete_property(db_session, prop_id, "google_a")

        db_session.expire_all()
        assert property_service.get_property(db_session, prop_id) is not None
        assert self._count(db_session, Favorite, prop_id) == 1
        assert self._count(db_session, PropertyView, prop_id) == 1


class TestViewService:
    def _views(self, db_session, prop_id):
        db_session.expire_all()
        return db_session.query(Property).filter(Property.id == prop_id).first().views

    def test_counts_once_per_ip(self, db_session, make_property):
        """Testa deduplicação por IP dentro da janela"""
        prop = make_property(user_id="google_a")
        assert view_service.track_view(db_session, prop, "1.1.1.1", None) is True
        assert view_service.track_view(db_session, prop, "1.1.1.1", None) is False
        assert view_service.track_view(db_session, prop, "2.2.2.2", None) is True
        assert self._views(db_session, prop.id) == 2

    def test_counts_once_per_user_across_ips(self, db_session, make_property):
        """Testa que o usuário autenticado é a identidade, não o IP"""
        prop = make_property(user_id="google_a")
        assert view_service.track_view(db_session, prop, "1.1.1.1", "google_b") is True
        assert view_service.track_view(db_session, prop, "3.3.3.3", "google_b") is False
        assert self._views(db_session, prop.id) == 1

    def test_owner_never_counts(self, db_session, make_property):
        """Testa que o dono não gera visualização"""
        prop = make_property(user_id="google_a")
        assert view_service.track_view(db_session, prop, "1.1.1.1", "google_a") is False
        assert self._views(db_session, prop.id) == 0

    def test_no_identity_never_counts(self, db_session, make_property):
        """Testa visitante sem usuário e sem IP"""
        prop = make_property(user_id="google_a")
        assert view_service.track_view(db_session, prop, None, None) is False
        assert self._views(db_session, prop.id) == 0

    def test_counts_again_after_window(self, db_session, make_property):
        """Testa nova contagem após a janela expirar"""
        prop = make_property(user_id="google_a")
        view_service.track_view(db_session, prop, "1.1.1.1", None)

        old = db_session.query(PropertyView).first()
        old.viewed_at = utcnow() - timedelta(minutes=settings.VIEW_DEDUP_WINDOW_MINUTES + 1)
        db_session.commit()

        assert view_service.track_view(db_session, prop, "1.1.1.1", None) is True
        assert self._views(db_session, prop.id) == 2


class TestFavoriteService:
    def test_add_is_idempotent(self, db_session, make_property):
        """Testa que favoritar duas vezes mantém um registro"""
        prop = make_property()
        first = favorite_service.add_favorite(db_session, "google_a", prop.id)
        second = favorite_service.add_favorite(db_session, "google_a", prop.id)
        assert first.id == second.id
        assert db_session.query(Favorite).count() == 1

    def test_remove_reports_effect(self, db_session, make_property):
        """Testa remoção idempotente"""
        prop = make_property()
        favorite_service.add_favorite(db_session, "google_a", prop.id)
        assert favorite_service.remove_favorite(db_session, "google_a", prop.id) is True
        assert favorite_service.remove_favorite(db_session, "google_a", prop.id) is False

    def test_favorite_properties_and_ids(self, db_session, make_property):
        """Testa listagem de favoritos do usuário"""
        p1 = make_property(title="Um")
        p2 = make_property(title="Dois")
        make_property(title="Tres")
        favorite_service.add_favorite(db_session, "google_a", p1.id)
        favorite_service.add_favorite(db_session, "google_a", p2.id)
        favorite_service.add_favorite(db_session, "google_b", p1.id)

        props = favorite_service.get_favorite_properties(db_session, "google_a")
        assert {p.title for p in props} == {"Um", "Dois"}
        assert set(favorite_service.get_favorite_property_ids(db_session, "google_a")) == {p1.id, p2.id}
        assert favorite_service.get_favorite_property_ids(db_session, "google_c") == []


class TestUserService:
    def test_first_profile_is_admin(self, db_session):
        """Testa que o primeiro perfil vira admin e o segundo não"""
        first = user_service.upsert_profile(db_session, "google_a")
        second = user_service.upsert_profile(db_session, "google_b")
        assert first.is_admin is True
        assert second.is_admin is False
        assert first.preferred_language == Language.EN

    def test_update_keeps_admin_flag(self, db_session):
        """Testa que atualizar o perfil não mexe em is_admin"""
        user_service.upsert_profile(db_session, "google_a")
        user_service.upsert_profile(db_session, "google_b")
        updated = user_service.upsert_profile(
            db_session, "google_b", ProfileUpdate(phone="123", preferredLanguage="fr")
        )
        assert updated.phone == "123"
        assert updated.preferred_language == Language.FR
        assert updated.is_admin is False

    def test_set_user_admin(self, db_session):
        """Testa promoção e perfil inexistente"""
        user_service.upsert_profile(db_session, "google_a")
        user_service.upsert_profile(db_session, "google_b")
        assert user_service.set_user_admin(db_session, "google_b", True).is_admin is True
        assert user_service.is_user_admin(db_session, "google_b") is True
        assert user_service.set_user_admin(db_session, "google_x", True) is None

    def test_upsert_user(self, db_session, make_user):
        """Testa criação e atualização da conta"""
        make_user("google_1", first_name="Ana")
        user = make_user("google_1", first_name="Ana Maria")
        assert user.first_name == "Ana Maria"
        assert user_service.get_user_by_id_or_email(db_session, "other", "google_1@example.com").id == "google_1"

    def test_sync_names_from_display_name(self, db_session, make_user):
        """Testa que o display name é dividido em nome e sobrenome"""
        make_user("google_1")
        user = user_service.sync_account_names(db_session, "google_1", display_name="John Ronald Doe")
        assert user.first_name == "John"
        assert user.last_name == "Ronald Doe"

    def test_sync_names_explicit(self, db_session, make_user):
        """Testa que nome/sobrenome explícitos prevalecem"""
        make_user("google_1")
        user = user_service.sync_account_names(
            db_session, "google_1", display_name="Ignored Name", first_name="Mo"
        )
        assert user.first_name == "Mo"
        assert user.last_name == "User"

    def test_sync_names_noop(self, db_session, make_user):
        """Testa que nada muda sem nomes"""
        make_user("google_1")
        assert user_service.sync_account_names(db_session, "google_1") is None


class TestAppSettingsService:
    def test_seeded_defaults(self, db_session):
        """Testa criação da linha padrão"""
        row = app_settings_service.get_app_settings(db_session)
        assert row.id == "default"
        assert row.support_phone == settings.DEFAULT_SUPPORT_PHONE
        assert row.support_email == settings.DEFAULT_SUPPORT_EMAIL
        assert row.logo_url is None

    def test_partial_update(self, db_session):
        """Testa atualização só dos campos enviados"""
        row = app_settings_service.update_app_settings(
            db_session, AppSettingsUpdate(logoUrl="/uploads/logo.png")
        )
        assert row.logo_url == "/uploads/logo.png"
        assert row.support_phone == settings.DEFAULT_SUPPORT_PHONE

    def test_cache_invalidated_on_update(self, db_session, monkeypatch):
        """Testa que a leitura pública é cacheada e invalidada na escrita"""
        monkeypatch.setattr(cache_module, "cache", TTLCache(maxsize=10, ttl=60))
        monkeypatch.setattr(settings, "CACHE_ENABLED", True)

        first = app_settings_service.get_public_settings(db_session)
        assert first.logo_url is None
        assert len(cache_module.cache) == 1

        app_settings_service.update_app_settings(db_session, AppSettingsUpdate(logoUrl="x.png"))
        assert len(cache_module.cache) == 0
        assert app_settings_service.get_public_settings(db_session).logo_url == "x.png"
