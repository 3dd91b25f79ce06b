"""Tests for the configuration models."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from photoscout.config.models import (
    AppSettings,
    CacheSettings,
    InstagramSettings,
    LoggingSettings,
    Settings,
)


@pytest.fixture(autouse=True)
def clean_environment(mocker) -> None:
    mocker.patch.dict("os.environ", {}, clear=True)


class TestDefaults:
    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.app.environment == "development"
        assert settings.api.instagram.recent_media_count == 20
        assert settings.api.search_index.per_page == 32
        assert settings.api.twitter.timeline_count == 200
        assert settings.cache.volatile_params == ["access_token"]
        assert settings.cache_ttl == 3600

    def test_production_ttl(self) -> None:
        settings = Settings(app={"environment": "production"})

        assert settings.app.is_production
        assert settings.cache_ttl == 180

    def test_effective_ttl(self) -> None:
        cache = CacheSettings(ttl_seconds=600, production_ttl_seconds=60)

        assert cache.effective_ttl(production=True) == 60
        assert cache.effective_ttl(production=False) == 600

    def test_database_path(self, tmp_path: Path) -> None:
        cache = CacheSettings(directory=str(tmp_path), database_name="x.db")

        assert cache.database_path == tmp_path / "x.db"


class TestValidation:
    def test_environment_normalized(self) -> None:
        assert AppSettings(environment=" Production ").environment == "production"

    def test_invalid_environment(self) -> None:
        with pytest.raises(ValidationError):
            Settings(app={"environment": "staging"})

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingSettings(level="verbose")

    def test_log_level_upper_cased(self) -> None:
        assert LoggingSettings(level="debug").level == "DEBUG"

    @pytest.mark.parametrize("field", ["ttl_seconds", "production_ttl_seconds"])
    def test_ttl_must_be_positive(self, field: str) -> None:
        with pytest.raises(ValidationError):
            CacheSettings(**{field: 0})


class TestEnvironmentOverrides:
    def test_nested_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        # Given
        monkeypatch.setenv("PHOTOSCOUT_CACHE__TTL_SECONDS", "60")
        monkeypatch.setenv("PHOTOSCOUT_API__INSTAGRAM__ACCESS_TOKEN", "secret")

        # When
        settings = Settings()

        # Then
        assert settings.cache.ttl_seconds == 60
        assert settings.api.instagram.access_token == "secret"

    def test_environment_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PHOTOSCOUT_APP__ENVIRONMENT", "production")

        assert Settings().cache_ttl == 180


class TestCredentialMasking:
    def test_repr_masks_credentials(self) -> None:
        settings = InstagramSettings(client_id="client-123", access_token="token-456")

        text = repr(settings)

        assert "client-123" not in text
        assert "token-456" not in text
        assert "access_token=****" in text

    def test_repr_marks_empty(self) -> None:
        assert "access_token=[empty]" in repr(InstagramSettings())


class TestTomlFiles:
    def test_round_trip(self, tmp_path: Path) -> None:
        # Given
        settings = Settings(
            app={"environment": "production"},
            cache={"directory": str(tmp_path / "cache"), "ttl_seconds": 90},
            api={"search_index": {"index_name": "photos"}},
        )
        path = tmp_path / "config" / "config.toml"

        # When
        settings.to_toml_file(path)
        loaded = Settings.from_toml_file(path)

        # Then
        assert loaded.model_dump() == settings.model_dump()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_toml_file(tmp_path / "absent.toml")
