"""Tests for environment-driven settings."""

from pathlib import Path

from boxoffice.infrastructure import bootstrap
from boxoffice.infrastructure.config import Settings


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    config = Settings()

    assert config.backend_url == "http://localhost:8069"
    assert config.reconciliation_timeout == 5.0
    assert config.event_type_ids == []
    assert config.data_dir == Path("data")


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BOXOFFICE_COMPANY_ID", "4")
    monkeypatch.setenv("BOXOFFICE_EVENT_TYPE_IDS", "3, 7")
    monkeypatch.setenv("BOXOFFICE_RECONCILIATION_TIMEOUT", "2.5")
    monkeypatch.setenv("BOXOFFICE_SESSION_ID", "s3cret")

    config = Settings()

    assert config.company_id == 4
    assert config.event_type_ids == [3, 7]
    assert config.reconciliation_timeout == 2.5
    assert config.session_id.get_secret_value() == "s3cret"
    assert "s3cret" not in repr(config)


def test_catalog_options_from_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BOXOFFICE_EVENT_SALE_ENABLED", "false")
    monkeypatch.setenv("BOXOFFICE_EVENT_TYPE_IDS", "3")

    options = bootstrap.catalog_options(Settings())

    assert options.event_sale_enabled is False
    assert options.event_type_ids == [3]
