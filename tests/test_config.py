"""
Configuration Module Tests

Tests the hierarchical configuration system without hardcoding the API token.
Uses pytest monkeypatch to set temporary configuration values.
"""
import pytest

import post_translator.config as config
from post_translator.config import (
    get_config,
    get_target_locales,
    build_callback_url,
    BASE_DIR,
    CONFIG_PATH,
    PTC_API_TOKEN,
)


class TestConfigYAML:
    """Test YAML configuration loading."""

    def test_config_file_exists(self):
        """Test that config.yaml file exists."""
        assert CONFIG_PATH.exists(), f"Config file not found: {CONFIG_PATH}"

    def test_base_dir_contains_package(self):
        """Test that BASE_DIR is the project root."""
        assert (BASE_DIR / "post_translator").exists()

    def test_get_config_nested_key(self):
        """Test dot-notation lookup of nested values."""
        assert get_config("polling.max_attempts") == 3
        assert get_config("i18n.default_locale") == "en"

    def test_get_config_missing_key_returns_default(self):
        """Test default value for unknown keys."""
        assert get_config("polling.does_not_exist", 42) == 42
        assert get_config("app.name.too.deep", "fallback") == "fallback"

    def test_provider_base_url(self):
        """Test provider root URL from config."""
        assert get_config("provider.base_url") == "https://app.ptc.wpml.org"


class TestEnvironmentKeys:
    """Test secrets read from environment variables."""

    def test_token_loaded_from_environment(self):
        """Test that the provider token was read at import time."""
        assert PTC_API_TOKEN

    def test_missing_required_key_raises(self, monkeypatch):
        """Test that a missing required variable is a fatal configuration error."""
        monkeypatch.delenv("SOME_MISSING_TOKEN", raising=False)
        with pytest.raises(ValueError, match="SOME_MISSING_TOKEN"):
            config._get_env_key("SOME_MISSING_TOKEN", required=True)

    def test_missing_optional_key_returns_none(self, monkeypatch):
        monkeypatch.delenv("SOME_MISSING_TOKEN", raising=False)
        assert config._get_env_key("SOME_MISSING_TOKEN", required=False) is None


class TestLocales:
    """Test target locale derivation."""

    def test_target_locales_exclude_source(self):
        """Given en/fr/de with en as source, targets are fr and de in order."""
        assert get_target_locales() == ["fr", "de"]

    def test_target_locales_follow_available_locales(self, monkeypatch):
        monkeypatch.setattr(config, "AVAILABLE_LOCALES", ["en", "es", "fr", "ja"])
        assert get_target_locales() == ["es", "fr", "ja"]


class TestCallbackUrl:
    """Test webhook URL construction."""

    def test_no_public_url_means_polling_only(self, monkeypatch):
        monkeypatch.setattr(config, "CALLBACK_PUBLIC_BASE_URL", "")
        assert build_callback_url(7) is None

    def test_callback_url_for_post(self, monkeypatch):
        monkeypatch.setattr(config, "CALLBACK_PUBLIC_BASE_URL", "https://blog.example.com")
        assert build_callback_url(7) == "https://blog.example.com/api/posts/7/callback"
