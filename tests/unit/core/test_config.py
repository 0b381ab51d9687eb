"""Unit tests for application configuration.

Tests cover:
- List parsing and deep merging helpers
- YAML base + environment layering
- Environment variable overrides
- Computed properties
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import yaml

from recibook.core.config import Settings, StoreBackend, get_settings
from recibook.core.config.settings import parse_list
from recibook.core.config.yaml_source import deep_merge


if TYPE_CHECKING:
    from pathlib import Path

pytestmark = pytest.mark.unit


# =============================================================================
# Helper Tests
# =============================================================================


class TestParseList:
    """Tests for parse_list helper function."""

    def test_parses_comma_separated_string(self) -> None:
        """Should split and strip comma-separated values."""
        assert parse_list("http://a , http://b,,") == ["http://a", "http://b"]

    def test_passes_through_list(self) -> None:
        """Should return lists unchanged."""
        assert parse_list(["http://a"]) == ["http://a"]


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_merges_nested_sections(self) -> None:
        """Should keep base keys the override does not touch."""
        base = {"database": {"host": "localhost", "port": 5432}}
        override = {"database": {"host": "db"}}

        assert deep_merge(base, override) == {"database": {"host": "db", "port": 5432}}

    def test_does_not_mutate_inputs(self) -> None:
        """Should return a new dict."""
        base = {"a": {"b": 1}}

        deep_merge(base, {"a": {"b": 2}})

        assert base == {"a": {"b": 1}}


# =============================================================================
# Settings Tests
# =============================================================================


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A throwaway config tree selected through RECIBOOK_CONFIG_DIR."""
    (tmp_path / "base").mkdir()
    (tmp_path / "environments" / "staging").mkdir(parents=True)
    (tmp_path / "base" / "app.yaml").write_text(
        yaml.safe_dump(
            {
                "app": {"name": "Base Name"},
                "store": {"backend": "firestore"},
                "feed": {"batch_size": 7},
            }
        )
    )
    (tmp_path / "environments" / "staging" / "app.yaml").write_text(
        yaml.safe_dump({"store": {"backend": "postgres"}})
    )
    monkeypatch.setenv("RECIBOOK_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("APP_ENV", "staging")
    return tmp_path


class TestSettingsLayering:
    """Tests for YAML and environment layering."""

    @pytest.mark.usefixtures("config_dir")
    def test_environment_yaml_overrides_base(self) -> None:
        """Should apply environment files over base files."""
        settings = Settings()

        assert settings.app.name == "Base Name"
        assert settings.store.backend == StoreBackend.POSTGRES
        assert settings.feed.batch_size == 7

    @pytest.mark.usefixtures("config_dir")
    def test_env_vars_override_yaml(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should let nested environment variables win over YAML."""
        monkeypatch.setenv("STORE__BACKEND", "firestore")
        monkeypatch.setenv("STORAGE__BUCKET", "recipes-bucket")

        settings = Settings()

        assert settings.store.backend == StoreBackend.FIRESTORE
        assert settings.storage.bucket == "recipes-bucket"

    def test_missing_config_dir_uses_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Should fall back to declared defaults."""
        monkeypatch.setenv("RECIBOOK_CONFIG_DIR", str(tmp_path / "absent"))
        monkeypatch.setenv("APP_ENV", "production")

        settings = Settings()

        assert settings.app.name == "Recibook Data Service"
        assert settings.store.backend == StoreBackend.FIRESTORE
        assert settings.storage.prefix == "recipes"
        assert settings.is_production is True

    def test_rejects_non_positive_feed_batch(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Should validate the feed batch size."""
        monkeypatch.setenv("RECIBOOK_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("FEED__BATCH_SIZE", "0")

        with pytest.raises(ValueError, match="batch_size"):
            Settings()


class TestSettingsProperties:
    """Tests for computed properties."""

    def test_database_url_omits_password(self) -> None:
        """Should never include the password in the DSN."""
        settings = Settings(
            database={"host": "db", "port": 5433, "name": "recibook", "user": "app"},
            DATABASE_PASSWORD="secret",
        )

        assert settings.database_url == "postgresql://app@db:5433/recibook"

    def test_environment_flags(self) -> None:
        """Should derive environment flags from APP_ENV."""
        settings = Settings(APP_ENV="test")

        assert settings.is_testing is True
        assert settings.is_development is False

    def test_get_settings_is_cached(self) -> None:
        """Should return the same instance until the cache is cleared."""
        assert get_settings() is get_settings()
