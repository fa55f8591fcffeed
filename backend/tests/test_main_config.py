"""Tests for the app-level endpoints and the instance-aware title."""

from unittest.mock import patch

from services.config_service import (
    InstanceConfig,
    InstanceEntity,
    LocalizationConfig,
    PlatformConfig,
)


def _config(default_locale: str) -> PlatformConfig:
    return PlatformConfig(
        platform={"name": "IdeaStats", "version": "2.1.0"},
        instance=InstanceConfig(
            name={"en": "Ideas for TestCity", "fr": "Idées pour VilleTest"},
            entity=InstanceEntity(type="city", name={"en": "TestCity"}),
        ),
        localization=LocalizationConfig(
            default_locale=default_locale, supported_locales=["en", "fr"]
        ),
    )


class TestGetApiTitle:
    def test_uses_default_locale(self) -> None:
        from main import _get_api_title

        with patch(
            "services.config_service.load_platform_config", return_value=_config("fr")
        ):
            assert _get_api_title() == "Idées pour VilleTest Stats API"

    def test_english_instance(self) -> None:
        from main import _get_api_title

        with patch(
            "services.config_service.load_platform_config", return_value=_config("en")
        ):
            assert _get_api_title() == "Ideas for TestCity Stats API"


class TestAppEndpoints:
    def test_root(self, client) -> None:
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["platform"] == "IdeaStats"
        assert data["version"] == "1.0.0"
        assert "Idées pour Montréal" in data["message"]

    def test_health(self, client) -> None:
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
        assert "X-Response-Time" in response.headers

    def test_cors_exposes_download_name(self, client) -> None:
        response = client.get(
            "/api/health", headers={"Origin": "http://localhost:3000"}
        )

        exposed = response.headers.get("access-control-expose-headers", "")
        assert "Content-Disposition" in exposed
