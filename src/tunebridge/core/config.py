"""
Configuration management using Dynaconf and Pydantic.

Dynaconf loads settings from files (`settings.toml`, `.secrets.toml`) and
`TB_`-prefixed environment variables; Pydantic validates the result into a
typed `BridgeSettings` object.

The only setting an embedding environment has to supply is `backend_path`,
the working directory of the backend service. Everything else has a default
matching the backend's fixed loopback origin.

The `get_settings` function provides a singleton instance of the settings.
"""

import json
import os
import sys
from pathlib import Path
from typing import Optional

import toml
from dynaconf import Dynaconf
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.console import Console

console = Console()

# Determine a user-scoped config directory (XDG-style)
USER_CONFIG_DIR = Path.home() / ".config" / "tunebridge"
USER_SETTINGS_FILE = USER_CONFIG_DIR / "settings.toml"
USER_SECRETS_FILE = USER_CONFIG_DIR / ".secrets.toml"

# Project-local settings (CWD) to support isolated runs and tests
LOCAL_SETTINGS_FILE = Path("settings.toml")


def _build_loader() -> Dynaconf:
    """Dynaconf loader over the current settings paths.

    Settings files are flat TOML, the same shape `save_settings` writes.
    Later files override earlier ones: project-local first, then user-scoped.
    """
    return Dynaconf(
        envvar_prefix="TB",
        settings_files=[
            "settings.toml",
            ".secrets.toml",
            str(USER_SETTINGS_FILE),
            str(USER_SECRETS_FILE),
        ],
        load_dotenv=True,
    )


DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_LAUNCH_SCRIPT = "main.py"
LOG_FILE_NAME = "plugin.log"


class BridgeSettings(BaseModel):
    """A Pydantic model that defines and validates all adapter settings."""

    backend_path: Optional[Path] = None

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    request_timeout: float = Field(default=30.0, gt=0)

    # Backend startup
    settle_delay: float = Field(default=4.0, ge=0)
    startup_retries: int = Field(default=0, ge=0)
    launch_script: str = DEFAULT_LAUNCH_SCRIPT
    python_command: Optional[str] = None

    log_file: Optional[Path] = None

    # Pydantic v2 configuration
    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def launch_command(self) -> list[str]:
        """Command that starts the backend from inside `backend_path`."""
        python = self.python_command or ("pythonw" if sys.platform == "win32" else "python3")
        return [python, self.launch_script]

    def resolved_log_file(self) -> Optional[Path]:
        if self.log_file:
            return self.log_file
        if self.backend_path:
            return self.backend_path / LOG_FILE_NAME
        return None


_settings_instance: Optional[BridgeSettings] = None


def get_settings() -> BridgeSettings:
    """Get the adapter settings as a singleton Pydantic model.

    Honors TB_SETTINGS_PATH when set: a JSON file path used for persistence in tests.
    """
    global _settings_instance
    if _settings_instance is None:
        try:
            config_dict = {}

            # 1) Special env path for tests or explicit override (JSON file)
            env_settings_path = os.getenv("TB_SETTINGS_PATH")
            if env_settings_path:
                p = Path(env_settings_path)
                if p.exists():
                    try:
                        config_dict.update(json.loads(p.read_text(encoding="utf-8")) or {})
                    except ValueError:
                        # If malformed, ignore and continue with other layers
                        pass

            # 2) Dynaconf loader (project + user scope); keys arrive upper-cased
            dc_dict = _build_loader().as_dict() or {}
            config_dict.update({str(k).lower(): v for k, v in dc_dict.items()})

            # 3) Optional project-local settings.toml overlay
            ignore_local = os.getenv("TB_IGNORE_LOCAL_SETTINGS") == "1"
            if (not ignore_local) and LOCAL_SETTINGS_FILE.exists():
                try:
                    local_data = toml.loads(LOCAL_SETTINGS_FILE.read_text(encoding="utf-8")) or {}
                    if isinstance(local_data, dict):
                        config_dict.update(local_data)
                except (OSError, toml.TomlDecodeError):
                    pass

            # 4) Explicit environment override for the one external setting
            env_backend = os.getenv("TB_BACKEND_PATH")
            if env_backend:
                config_dict["backend_path"] = env_backend

            _settings_instance = BridgeSettings(**config_dict)
        except ValidationError as e:
            console.print(f"[red]Configuration error:[/red]\n{e}")
            raise

    return _settings_instance


def save_settings(new_settings: BridgeSettings):
    """Save updated settings.

    If TB_SETTINGS_PATH is set, persist as JSON to that file (used by tests).
    Also update local/user TOML as a best-effort for normal operation.
    """
    global _settings_instance
    data = new_settings.model_dump(mode="json", exclude_none=True)

    # 1) Special env path for tests (JSON)
    env_settings_path = os.getenv("TB_SETTINGS_PATH")
    if env_settings_path:
        try:
            p = Path(env_settings_path)
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(json.dumps(data), encoding="utf-8")
        except OSError:
            pass

    # 2) Project-local settings (used in dev/tests unless ignored)
    try:
        LOCAL_SETTINGS_FILE.write_text(toml.dumps(data), encoding="utf-8")
    except OSError:
        pass

    # 3) User-level settings
    try:
        USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        USER_SETTINGS_FILE.write_text(toml.dumps(data), encoding="utf-8")
    except OSError:
        pass

    _settings_instance = new_settings


def create_default_settings() -> BridgeSettings:
    """Create a default settings instance, useful for resets."""
    return BridgeSettings()


def reset_settings():
    """Reset in-memory settings (do not delete on-disk settings)."""
    global _settings_instance
    _settings_instance = None
