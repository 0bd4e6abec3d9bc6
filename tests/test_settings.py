import pytest

from catan_rules import settings as settings_module


def test_int_env_reads_value(monkeypatch):
    monkeypatch.setenv("CATAN_TEST_TURNS", "42")
    assert settings_module._int_env("CATAN_TEST_TURNS", 7) == 42


def test_int_env_falls_back_when_blank(monkeypatch):
    monkeypatch.setenv("CATAN_TEST_TURNS", "  ")
    assert settings_module._int_env("CATAN_TEST_TURNS", 7) == 7
    monkeypatch.delenv("CATAN_TEST_TURNS")
    assert settings_module._int_env("CATAN_TEST_TURNS", 7) == 7


def test_int_env_rejects_garbage(monkeypatch):
    monkeypatch.setenv("CATAN_TEST_TURNS", "many")
    with pytest.raises(ValueError, match="CATAN_TEST_TURNS"):
        settings_module._int_env("CATAN_TEST_TURNS", 7)


def test_defaults_are_sane():
    assert settings_module.settings.VICTORY_POINTS >= 3
    assert settings_module.settings.MAX_TURNS > 0
