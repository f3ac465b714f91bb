"""
Unit Tests for Configuration
============================

Tests address parsing and environment-based configuration.
"""

import pytest

from asm6502.config import DEFAULT_ORIGIN, AssemblerConfig, parse_address


class TestParseAddress:
    """Tests for parse_address()."""

    @pytest.mark.parametrize("text,expected", [
        ("8000", 0x8000),
        ("$8000", 0x8000),
        ("0x8000", 0x8000),
        ("0XC000", 0xC000),
        ("ff", 0xFF),
        (" 0600 ", 0x0600),
        ("FFFF", 0xFFFF),
    ])
    def test_valid(self, text, expected):
        assert parse_address(text) == expected

    @pytest.mark.parametrize("text", ["", "$", "0x", "G000", "10000", "-1", "80 00"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_address(text)


class TestAssemblerConfig:
    """Tests for AssemblerConfig."""

    def test_defaults(self):
        config = AssemblerConfig()
        assert config.origin == DEFAULT_ORIGIN == 0x8000
        assert config.filename == "<input>"
        assert config.max_suggestions == 3

    def test_invalid_origin(self):
        with pytest.raises(ValueError):
            AssemblerConfig(origin=0x10000)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ASM6502_ORIGIN", "$C000")
        monkeypatch.setenv("ASM6502_MAX_SUGGESTIONS", "5")
        config = AssemblerConfig.from_env()
        assert config.origin == 0xC000
        assert config.max_suggestions == 5

    def test_from_env_unset(self, monkeypatch):
        monkeypatch.delenv("ASM6502_ORIGIN", raising=False)
        monkeypatch.delenv("ASM6502_MAX_SUGGESTIONS", raising=False)
        assert AssemblerConfig.from_env() == AssemblerConfig()

    def test_from_env_ignores_invalid(self, monkeypatch):
        monkeypatch.setenv("ASM6502_ORIGIN", "nowhere")
        monkeypatch.setenv("ASM6502_MAX_SUGGESTIONS", "many")
        assert AssemblerConfig.from_env() == AssemblerConfig()
