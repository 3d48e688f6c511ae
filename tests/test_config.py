"""Tests for configuration loading."""

import pytest

from payback.config import (
    LedgerSettings,
    LoggingSettings,
    get_settings,
    validate_all_settings,
)


class TestLedgerSettings:
    """Tests for LedgerSettings."""

    def test_defaults(self, monkeypatch):
        """Test the documented defaults."""
        for name in ("PAYBACK_SPLIT_TOLERANCE", "PAYBACK_SETTLEMENT_EPSILON", "PAYBACK_CURRENCY_SYMBOL"):
            monkeypatch.delenv(name, raising=False)
        settings = LedgerSettings()
        assert settings.split_tolerance == 0.01
        assert settings.settlement_epsilon == 1e-9
        assert settings.min_participants_for_expense == 2
        assert settings.currency_symbol == "$"

    def test_environment_override(self, monkeypatch):
        """Test PAYBACK_-prefixed variables override defaults."""
        monkeypatch.setenv("PAYBACK_SPLIT_TOLERANCE", "0.5")
        monkeypatch.setenv("PAYBACK_CURRENCY_SYMBOL", "€")
        settings = LedgerSettings()
        assert settings.split_tolerance == 0.5
        assert settings.currency_symbol == "€"

    def test_out_of_range_rejected(self):
        """Test bounds on thresholds."""
        with pytest.raises(ValueError):
            LedgerSettings(split_tolerance=0)
        with pytest.raises(ValueError):
            LedgerSettings(settlement_epsilon=0.1)


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_level_is_normalized(self):
        assert LoggingSettings(level=" debug ").level == "DEBUG"

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            LoggingSettings(level="chatty")

    def test_render_json_from_environment(self, monkeypatch):
        monkeypatch.setenv("PAYBACK_LOG_RENDER_JSON", "false")
        assert LoggingSettings().render_json is False


class TestSettingsAggregation:
    """Tests for the root settings container."""

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_validate_all_settings(self, monkeypatch):
        """Test each group is reported, with the error for broken ones."""
        monkeypatch.delenv("PAYBACK_LOG_LEVEL", raising=False)
        assert validate_all_settings() == {"ledger": True, "logging": True}

        monkeypatch.setenv("PAYBACK_LOG_LEVEL", "chatty")
        results = validate_all_settings()
        assert results["ledger"] is True
        assert results["logging"] is False
        assert "Unknown log level" in results["logging_error"]
