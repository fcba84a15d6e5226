import sys

import pytest
from pydantic import ValidationError

import tunebridge.core.config as config_mod
from tunebridge.core.config import (
    BridgeSettings,
    create_default_settings,
    get_settings,
    reset_settings,
    save_settings,
)


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TB_SETTINGS_PATH", str(tmp_path / "settings.json"))
    monkeypatch.setenv("TB_IGNORE_LOCAL_SETTINGS", "1")
    monkeypatch.setattr(config_mod, "USER_CONFIG_DIR", tmp_path / "user")
    monkeypatch.setattr(config_mod, "USER_SETTINGS_FILE", tmp_path / "user" / "settings.toml")
    monkeypatch.setattr(config_mod, "USER_SECRETS_FILE", tmp_path / "user" / ".secrets.toml")
    reset_settings()
    yield
    reset_settings()


def test_env_override_for_backend_path(tmp_path, monkeypatch):
    bridge = tmp_path / "bridge"
    monkeypatch.setenv("TB_BACKEND_PATH", str(bridge))

    s = get_settings()
    assert s.backend_path == bridge
    assert s.resolved_log_file() == bridge / "plugin.log"


def test_save_and_reload_settings(tmp_path, monkeypatch):
    monkeypatch.delenv("TB_BACKEND_PATH", raising=False)
    s = create_default_settings()
    s.startup_retries = 2
    s.settle_delay = 2.5
    save_settings(s)

    # New process simulation: clear singleton, reload from file
    reset_settings()
    s2 = get_settings()
    assert s2.startup_retries == 2
    assert s2.settle_delay == 2.5


def test_defaults_match_backend_origin():
    s = BridgeSettings()
    assert s.base_url == "http://127.0.0.1:8000"
    assert s.request_timeout == 30.0
    assert s.settle_delay == 4.0
    assert s.resolved_log_file() is None
    expected = "pythonw" if sys.platform == "win32" else "python3"
    assert s.launch_command() == [expected, "main.py"]


def test_explicit_log_file_wins(tmp_path):
    s = BridgeSettings(backend_path=tmp_path, log_file=tmp_path / "other.log")
    assert s.resolved_log_file() == tmp_path / "other.log"


def test_invalid_port_rejected():
    with pytest.raises(ValidationError):
        BridgeSettings(port=0)


def test_saved_backend_path_survives_a_different_working_directory(tmp_path, monkeypatch):
    monkeypatch.delenv("TB_SETTINGS_PATH", raising=False)
    monkeypatch.delenv("TB_BACKEND_PATH", raising=False)
    first, second = tmp_path / "cwd1", tmp_path / "cwd2"
    first.mkdir()
    second.mkdir()
    bridge = tmp_path / "bridge"

    monkeypatch.chdir(first)
    s = create_default_settings()
    s.backend_path = bridge
    save_settings(s)
    assert (tmp_path / "user" / "settings.toml").is_file()

    reset_settings()
    monkeypatch.chdir(second)
    assert get_settings().backend_path == bridge
