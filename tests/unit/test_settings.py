# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

import pytest
from pydantic import SecretStr, ValidationError

from opened_catalog.core.config import (
    CatalogDatabaseSettings,
    ExportSettings,
    RedisSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Clear the settings cache around each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


class TestExportSettings:
    """Tests for ratings export settings."""

    def test_defaults(self):
        settings = ExportSettings()

        assert settings.key_pattern == "resource:*"
        assert settings.page_size == 10
        assert settings.report_suffix == "ratings.csv"
        assert settings.report_header == "Resource,Rating"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("EXPORT_PAGE_SIZE", "250")
        monkeypatch.setenv("EXPORT_KEY_PATTERN", "resource:4*")

        settings = Settings()

        assert settings.export.page_size == 250
        assert settings.export.key_pattern == "resource:4*"

    @pytest.mark.parametrize("page_size", [0, -5])
    def test_page_size_must_be_positive(self, page_size):
        with pytest.raises(ValidationError):
            ExportSettings(page_size=page_size)


class TestStorageSettings:
    """Tests for report storage settings."""

    def test_bucket_from_aws_variable(self, monkeypatch):
        monkeypatch.delenv("STORAGE_BUCKET", raising=False)
        monkeypatch.setenv("AWS_S3_BUCKET", "district-reports")

        assert StorageSettings().bucket == "district-reports"

    def test_bucket_from_prefixed_variable(self, monkeypatch):
        monkeypatch.delenv("AWS_S3_BUCKET", raising=False)
        monkeypatch.setenv("STORAGE_BUCKET", "staging-reports")

        assert StorageSettings().bucket == "staging-reports"

    def test_bucket_by_field_name(self):
        assert StorageSettings(bucket="explicit").bucket == "explicit"

    def test_rejects_unknown_backend(self):
        with pytest.raises(ValidationError):
            StorageSettings(backend="ftp")


class TestConnectionUrls:
    """Tests for derived connection URLs."""

    def test_catalog_database_url(self):
        settings = CatalogDatabaseSettings(
            user="reader", password=SecretStr("pw"), host="db", port=6543, database="opened"
        )

        assert settings.url == "postgresql+asyncpg://reader:pw@db:6543/opened"

    def test_redis_url_without_password(self):
        settings = RedisSettings(host="cache", port=6380, database=2)

        assert settings.url == "redis://cache:6380/2"

    def test_redis_url_with_password(self):
        settings = RedisSettings(host="cache", password=SecretStr("s3cret"))

        assert settings.url == "redis://:s3cret@cache:6379/0"


class TestSettings:
    """Tests for the aggregate Settings."""

    def test_production_rejects_local_storage(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(environment="production", storage=StorageSettings(backend="local"))

        assert "STORAGE_BACKEND=s3" in str(exc_info.value)

    def test_production_with_s3(self):
        settings = Settings(environment="production", storage=StorageSettings(backend="s3"))

        assert settings.is_production
        assert not settings.is_development

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_clear_settings_cache_reloads(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("EXPORT_REPORT_SUFFIX", "scores.csv")
        clear_settings_cache()

        second = get_settings()

        assert second is not first
        assert second.export.report_suffix == "scores.csv"
