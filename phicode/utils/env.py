"""Environment variable and .env file support for runtime defaults."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values


class EnvLoader:
    """Load environment variables from .env files with priority support."""

    _instance: Optional["EnvLoader"] = None
    _loaded: bool = False

    def __new__(cls) -> "EnvLoader":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._loaded:
            return
        self._loaded = True
        self._env_vars: Dict[str, str] = {}
        self._env_file_path: Optional[Path] = None
        self._load_env_file()

    def _load_env_file(self):
        """Load .env files; later locations override earlier ones."""
        possible_paths = [
            Path.home() / ".phicode" / ".env",
            Path(".env"),
            Path(".env.local"),
        ]

        for env_path in possible_paths:
            if env_path.is_file():
                values = dotenv_values(env_path)
                self._env_vars.update({k: v for k, v in values.items() if v is not None})
                self._env_file_path = env_path

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a variable; the process environment wins over .env files."""
        if key in os.environ:
            return os.environ[key]
        return self._env_vars.get(key, default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None:
            return default
        return value.strip().lower() in ("true", "1", "yes", "on")

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(float(value))
        except ValueError:
            return default

    def set(self, key: str, value: str):
        os.environ[key] = value
        self._env_vars[key] = value

    @property
    def env_file_path(self) -> Optional[Path]:
        """Get the path to the last loaded .env file."""
        return self._env_file_path


# Global instance
env = EnvLoader()


# --- Runtime defaults ---
PHICODE_ENV_VARS = {
    "bypass": "PHICODE_BYPASS_SECURITY",
    "matcher": "PHICODE_MATCHER",
    "log_level": "PHICODE_LOG_LEVEL",
    "log_dir": "PHICODE_LOG_DIR",
    "symbols_file": "PHICODE_SYMBOLS_FILE",
}


def get_bypass_security() -> bool:
    return env.get_bool(PHICODE_ENV_VARS["bypass"], False)


def get_matcher_strategy() -> str:
    return env.get(PHICODE_ENV_VARS["matcher"]) or "regex"


def get_log_level() -> str:
    return env.get(PHICODE_ENV_VARS["log_level"]) or "WARNING"


def get_log_dir() -> Optional[str]:
    return env.get(PHICODE_ENV_VARS["log_dir"]) or None


def get_symbols_file() -> Optional[str]:
    return env.get(PHICODE_ENV_VARS["symbols_file"]) or None
