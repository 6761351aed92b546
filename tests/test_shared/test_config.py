"""Tests for configuration management."""
from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from src.shared.config import IntakeConfig, SharedConfig


class TestSharedConfig:
    def test_default_values(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        config = SharedConfig()
        assert config.log_level == "info"

    def test_env_override_log_level(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        config = SharedConfig()
        assert config.log_level == "debug"


class TestIntakeConfig:
    def test_default_values(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("INTAKE_MAX_TEXT_LENGTH", raising=False)
        monkeypatch.delenv("INTAKE_REFERENCE_DATE", raising=False)
        config = IntakeConfig()
        assert config.max_text_length == 1_048_576
        assert config.reference_date is None

    def test_inherits_shared_defaults(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        config = IntakeConfig()
        assert config.log_level == "info"

    def test_env_override_max_text_length(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("INTAKE_MAX_TEXT_LENGTH", "500")
        config = IntakeConfig()
        assert config.max_text_length == 500

    def test_env_override_reference_date(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("INTAKE_REFERENCE_DATE", "2025-01-15")
        config = IntakeConfig()
        assert config.reference_date == date(2025, 1, 15)

    def test_invalid_reference_date_rejected(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("INTAKE_REFERENCE_DATE", "next tuesday")
        with pytest.raises(ValidationError):
            IntakeConfig()

    def test_max_text_length_must_be_positive(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("INTAKE_MAX_TEXT_LENGTH", "0")
        with pytest.raises(ValidationError):
            IntakeConfig()

    def test_init_by_field_name(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("INTAKE_MAX_TEXT_LENGTH", raising=False)
        config = IntakeConfig(max_text_length=10)
        assert config.max_text_length == 10
