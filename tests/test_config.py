"""Tests for retry configuration and tier costs."""

from __future__ import annotations

import pytest

from adaptive_retry.config import (
    DEFAULT_ATTEMPT_COST,
    QualityTier,
    RetryConfig,
    cost_for_tier,
)
from adaptive_retry.errors import ConfigurationError


class TestRetryConfig:
    """Tests for RetryConfig defaults and validation."""

    def test_defaults(self):
        """Test default configuration values."""
        config = RetryConfig()

        assert config.max_retries == 5
        assert config.cost_limit == 1.0
        assert config.enable_learning is True
        assert config.partial_success_threshold == 0.5
        assert config.default_attempt_cost == DEFAULT_ATTEMPT_COST

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_retries": 0},
            {"max_retries": 2.5},
            {"max_retries": True},
            {"cost_limit": -0.01},
            {"cost_limit": "1.0"},
            {"partial_success_threshold": 1.5},
            {"default_attempt_cost": -1},
            {"enable_learning": "yes"},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Test invalid values are rejected."""
        with pytest.raises(ConfigurationError):
            RetryConfig(**kwargs)

    def test_to_dict(self):
        """Test dictionary export covers every field."""
        assert set(RetryConfig().to_dict()) == set(RetryConfig.field_names())


class TestUpdated:
    """Tests for typed configuration updates."""

    def test_snake_case_update(self):
        """Test updating by field name."""
        config = RetryConfig().updated({"max_retries": 3, "cost_limit": 0.5})
        assert config.max_retries == 3
        assert config.cost_limit == 0.5

    def test_camel_case_aliases(self):
        """Test camelCase names map to fields."""
        config = RetryConfig().updated({"maxRetries": 2, "enableLearning": False})
        assert config.max_retries == 2
        assert config.enable_learning is False

    def test_original_unchanged(self):
        """Test updates return a new instance."""
        config = RetryConfig()
        config.updated({"max_retries": 2})
        assert config.max_retries == 5

    def test_unknown_keys_rejected(self):
        """Test unknown keys raise with the offending and accepted names."""
        with pytest.raises(ConfigurationError) as exc_info:
            RetryConfig().updated({"maxRetries": 2, "qualitySettings": {"face": 0.9}})

        details = exc_info.value.details
        assert details["unknown_keys"] == ["qualitySettings"]
        assert "max_retries" in details["accepted_keys"]

    def test_invalid_value_rejected(self):
        """Test updates are validated."""
        with pytest.raises(ConfigurationError):
            RetryConfig().updated({"costLimit": -1})


class TestFromEnv:
    """Tests for environment configuration."""

    def test_empty_environment_uses_defaults(self):
        """Test no variables keeps defaults."""
        assert RetryConfig.from_env({}) == RetryConfig()

    def test_reads_variables(self):
        """Test variables are parsed."""
        config = RetryConfig.from_env(
            {
                "ADAPTIVE_RETRY_MAX_RETRIES": "3",
                "ADAPTIVE_RETRY_COST_LIMIT": "0.25",
                "ADAPTIVE_RETRY_ENABLE_LEARNING": "off",
                "ADAPTIVE_RETRY_PARTIAL_SUCCESS_THRESHOLD": "0.6",
            }
        )
        assert config.max_retries == 3
        assert config.cost_limit == 0.25
        assert config.enable_learning is False
        assert config.partial_success_threshold == 0.6

    def test_unparseable_variable(self):
        """Test unparseable values raise ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            RetryConfig.from_env({"ADAPTIVE_RETRY_MAX_RETRIES": "many"})
        assert exc_info.value.details["variable"] == "ADAPTIVE_RETRY_MAX_RETRIES"

    def test_reads_process_environment(self, monkeypatch):
        """Test os.environ is used by default."""
        monkeypatch.setenv("ADAPTIVE_RETRY_COST_LIMIT", "0.5")
        assert RetryConfig.from_env().cost_limit == 0.5


class TestTierCosts:
    """Tests for quality tier costs."""

    @pytest.mark.parametrize(
        ("tier", "cost"),
        [
            (QualityTier.BASIC, 0.02),
            (QualityTier.STANDARD, 0.04),
            ("premium", 0.08),
            ("ULTRA", 0.16),
        ],
    )
    def test_known_tiers(self, tier, cost):
        """Test tier costs by enum or name."""
        assert cost_for_tier(tier) == cost

    @pytest.mark.parametrize("tier", [None, "platinum", ""])
    def test_unknown_tier_default(self, tier):
        """Test unknown tiers cost the default."""
        assert cost_for_tier(tier) == DEFAULT_ATTEMPT_COST

    def test_parse(self):
        """Test tier parsing."""
        assert QualityTier.parse("Premium") is QualityTier.PREMIUM
        assert QualityTier.parse("gold") is None
