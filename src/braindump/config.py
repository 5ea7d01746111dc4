"""Configuration management for braindump."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

BRAINDUMP_HOME = Path(os.environ.get("BRAINDUMP_HOME", Path.home() / "braindump"))
CONFIG_FILE = BRAINDUMP_HOME / "config" / "braindump.conf"
TOKEN_FILE = BRAINDUMP_HOME / "config" / ".tokens.json"
SCHEDULE_FILE = BRAINDUMP_HOME / "config" / "schedule.json"


@dataclass
class Config:
    """braindump configuration."""

    api_base_url: str = "http://localhost:54321/functions/v1"
    auth_url: str = "http://localhost:54321/auth/v1"
    rest_url: str = "http://localhost:54321/rest/v1"
    api_key: str = ""
    timezone: str = "UTC"
    voice_provider: str = "remote"
    transcription_language: str = "auto"
    speech_locale: str = "en-US"
    autosave_delay: float = 2.0
    clear_delay: float = 3.0
    rate_limit_per_minute: int = 3
    # Telegram bot settings
    telegram_bot_token: str = ""
    telegram_allowed_users: list[int] = field(default_factory=list)


@dataclass
class Tokens:
    """Session tokens for the brain-dump API."""

    access_token: str = ""
    refresh_token: str = ""
    expires_at: int = 0
    user_id: str = ""

    def save(self, path: Path | None = None) -> None:
        """Save tokens to file."""
        path = path or TOKEN_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(
                {
                    "access_token": self.access_token,
                    "refresh_token": self.refresh_token,
                    "expires_at": self.expires_at,
                    "user_id": self.user_id,
                }
            )
        )
        path.chmod(0o600)

    @classmethod
    def load(cls, path: Path | None = None) -> "Tokens":
        """Load tokens from file."""
        path = path or TOKEN_FILE
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
            return cls(
                access_token=data.get("access_token", ""),
                refresh_token=data.get("refresh_token", ""),
                expires_at=data.get("expires_at", 0),
                user_id=data.get("user_id", ""),
            )
        except (json.JSONDecodeError, KeyError):
            return cls()


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _parse_float(key: str, value: str, default: float) -> float:
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid number for {key.upper()}: {value!r}, using {default}")
        return default


def load_config(path: Path | None = None) -> Config:
    """Load configuration from braindump.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "api_base_url":
                config.api_base_url = value.rstrip("/")
            case "auth_url":
                config.auth_url = value.rstrip("/")
            case "rest_url":
                config.rest_url = value.rstrip("/")
            case "api_key":
                config.api_key = value
            case "timezone":
                config.timezone = value
            case "voice_provider":
                if value.lower() in ("remote", "local"):
                    config.voice_provider = value.lower()
                else:
                    logger.warning(f"Unknown VOICE_PROVIDER {value!r}, using remote")
            case "transcription_language":
                config.transcription_language = value
            case "speech_locale":
                config.speech_locale = value
            case "autosave_delay":
                config.autosave_delay = _parse_float(key, value, config.autosave_delay)
            case "clear_delay":
                config.clear_delay = _parse_float(key, value, config.clear_delay)
            case "rate_limit_per_minute":
                config.rate_limit_per_minute = int(
                    _parse_float(key, value, config.rate_limit_per_minute)
                )
            case "telegram_bot_token":
                config.telegram_bot_token = value
            case "telegram_allowed_users":
                config.telegram_allowed_users = [int(u.strip()) for u in value.split(",") if u.strip()]

    return config
