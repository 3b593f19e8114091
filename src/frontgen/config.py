"""Environment-driven configuration and platform-aware data paths."""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError

DEFAULT_MODEL = "deepseek/deepseek-r1-0528-qwen3-8b:free"
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_TITLE = "AI Frontend Generator"
DEFAULT_REFERER = "http://127.0.0.1:8080/"
DEFAULT_TIMEOUT = 120.0

API_KEY_VARS = ("FRONTGEN_API_KEY", "OPENROUTER_API_KEY", "VITE_OPENROUTER_API_KEY")


def get_api_key() -> Optional[str]:
    """Return the first non-empty API key found in the environment."""
    for name in API_KEY_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def get_data_path() -> Path:
    """Return the path of the JSON file backing local storage."""
    env = os.environ.get("FRONTGEN_DATA_PATH")
    if env:
        return Path(env)

    if sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    elif sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", ""))
    else:  # Linux
        xdg = os.environ.get("XDG_DATA_HOME")
        base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / "frontgen" / "storage.json"


@dataclass(frozen=True)
class Config:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    title: str = DEFAULT_TITLE
    referer: str = DEFAULT_REFERER
    timeout: float = DEFAULT_TIMEOUT
    data_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Config":
        raw_timeout = os.environ.get("FRONTGEN_TIMEOUT")
        timeout = DEFAULT_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigurationError(f"FRONTGEN_TIMEOUT must be a number, got {raw_timeout!r}")

        return cls(
            api_key=get_api_key(),
            model=os.environ.get("FRONTGEN_MODEL", DEFAULT_MODEL),
            base_url=os.environ.get("FRONTGEN_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            title=os.environ.get("FRONTGEN_TITLE", DEFAULT_TITLE),
            referer=os.environ.get("FRONTGEN_REFERER", DEFAULT_REFERER),
            timeout=timeout,
            data_path=get_data_path(),
        )
