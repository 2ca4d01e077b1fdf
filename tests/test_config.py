"""Tests for configuration loading."""

import json
import os
import tempfile
from pathlib import Path

import pytest
import yaml

from authcache.config import CacheConfig, Settings, substitute_env_vars
from authcache.exceptions import ConfigError
from authcache.observability import LogLevel


class TestEnvSubstitution:
    """Tests for environment variable substitution."""

    def test_substitute_string(self):
        """Test substituting a string value."""
        os.environ["TEST_VAR"] = "hello"
        result = substitute_env_vars("${TEST_VAR}")
        assert result == "hello"

    def test_substitute_in_dict(self):
        """Test substituting values in a dictionary."""
        os.environ["TEST_REDIS_HOST"] = "cache.internal"
        data = {"url": "redis://${TEST_REDIS_HOST}:6379/0", "other": "value"}
        result = substitute_env_vars(data)
        assert result == {"url": "redis://cache.internal:6379/0", "other": "value"}

    def test_substitute_in_list(self):
        """Test substituting values in a list."""
        os.environ["TEST_ITEM"] = "item1"
        result = substitute_env_vars(["${TEST_ITEM}", "item2"])
        assert result == ["item1", "item2"]

    def test_missing_env_var_raises(self):
        """Test that missing env vars raise ValueError."""
        os.environ.pop("NONEXISTENT_VAR", None)
        with pytest.raises(ValueError, match="NONEXISTENT_VAR"):
            substitute_env_vars("${NONEXISTENT_VAR}")

    def test_non_strings_untouched(self):
        """Numbers and booleans pass through."""
        assert substitute_env_vars({"ttl": 1000, "ssl": True}) == {"ttl": 1000, "ssl": True}


class TestCacheConfig:
    """Tests for per-call cache options."""

    def test_defaults(self):
        """Namespace defaults to "cache" and ttl is unset."""
        config = CacheConfig.coerce({})
        assert config.namespace == "cache"
        assert config.ttl is None

    def test_coerce_mapping(self):
        config = CacheConfig.coerce({"ttl": 1800000, "namespace": "credentials"})
        assert config.ttl == 1800000
        assert config.namespace == "credentials"

    def test_coerce_none(self):
        assert CacheConfig.coerce(None) == CacheConfig()

    def test_coerce_model_is_identity(self):
        config = CacheConfig(ttl=10)
        assert CacheConfig.coerce(config) is config

    @pytest.mark.parametrize("ttl", [0, -5, "soon"])
    def test_invalid_ttl_raises_config_error(self, ttl):
        """TTL must be a positive integer."""
        with pytest.raises(ConfigError, match="Invalid cache configuration"):
            CacheConfig.coerce({"ttl": ttl})

    def test_require_ttl(self):
        assert CacheConfig(ttl=500).require_ttl("Store") == 500

    def test_require_ttl_missing(self):
        """Missing ttl names the store in the error."""
        with pytest.raises(ConfigError, match="`ttl` configuration option is required for Store"):
            CacheConfig().require_ttl("Store")


class TestSettingsLoading:
    """Tests for settings loading."""

    def test_from_dict(self, sample_settings_dict):
        """Test loading settings from dictionary."""
        settings = Settings.from_dict(sample_settings_dict)
        assert settings.namespace == "test-app"
        assert settings.redis.url == "redis://cache.internal:6380/2"
        assert settings.redis.connection_name == "auth"
        assert settings.redis.scan_count == 500
        assert settings.logging.level == LogLevel.DEBUG
        assert settings.cache("credentials").ttl == 1_800_000

    def test_from_yaml_file(self, sample_settings_dict):
        """Test loading settings from YAML file."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "authcache.yaml"
            path.write_text(yaml.dump(sample_settings_dict))

            settings = Settings.from_file(path)
            assert settings.namespace == "test-app"

    def test_from_json_file(self, sample_settings_dict):
        """Test loading settings from JSON file."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "authcache.json"
            path.write_text(json.dumps(sample_settings_dict))

            settings = Settings.from_file(path)
            assert settings.redis.socket_timeout == 1.5

    def test_empty_yaml_file_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty.yaml"
            path.write_text("")

            settings = Settings.from_file(path)
            assert settings.namespace == "authcache"

    def test_defaults(self):
        """Test that defaults are applied."""
        settings = Settings.from_dict({})
        assert settings.namespace == "authcache"
        assert settings.redis.url == "redis://localhost:6379/0"
        assert settings.redis.connection_name == "default"
        assert settings.redis.scan_count is None
        assert settings.logging.format == "json"
        assert settings.caches == {}

    def test_unknown_cache_raises(self, sample_settings_dict):
        settings = Settings.from_dict(sample_settings_dict)
        with pytest.raises(ConfigError, match="Available: credentials"):
            settings.cache("persistent_session")
