"""
Configuration management for the GoOnline app.
Reads the hosted data service endpoint and client settings from the
environment and an optional .env file in the config directory.
"""
import os
from pathlib import Path
from typing import Dict, Optional
from dataclasses import dataclass

from dotenv import dotenv_values

from goonline.utils.logging import logger


@dataclass
class AppConfig:
    """Complete client configuration."""
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    request_timeout: float = 15.0
    log_dir: str = "~/.config/goonline/logs"
    log_level: str = "INFO"
    min_password_length: int = 6

    @property
    def is_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


def _config_dir() -> Path:
    env = os.environ.get("GOONLINE_CONFIG_DIR")
    return Path(env).expanduser() if env else Path.home() / ".config" / "goonline"


class ConfigurationManager:
    """Loads AppConfig from defaults, the .env file and the process environment."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else _config_dir()
        self.env_path = self.config_dir / ".env"

    def load_config(self) -> AppConfig:
        """Environment variables win over the .env file."""
        values: Dict[str, Optional[str]] = {}
        values.update(self._read_env_file())
        values.update({k: v for k, v in os.environ.items() if k.startswith(("SUPABASE_", "GOONLINE_"))})

        config = AppConfig()
        config.supabase_url = (values.get("SUPABASE_URL") or "").rstrip("/") or None
        config.supabase_anon_key = values.get("SUPABASE_ANON_KEY") or None
        config.log_dir = values.get("GOONLINE_LOG_DIR") or str(self.config_dir / "logs")
        config.log_level = values.get("GOONLINE_LOG_LEVEL") or config.log_level

        timeout = values.get("GOONLINE_REQUEST_TIMEOUT")
        if timeout:
            try:
                config.request_timeout = float(timeout)
            except ValueError:
                logger.warning("Ignoring invalid GOONLINE_REQUEST_TIMEOUT=%r", timeout)

        min_len = values.get("GOONLINE_MIN_PASSWORD_LENGTH")
        if min_len:
            try:
                config.min_password_length = max(1, int(min_len))
            except ValueError:
                logger.warning("Ignoring invalid GOONLINE_MIN_PASSWORD_LENGTH=%r", min_len)

        if not config.is_configured:
            logger.warning("SUPABASE_URL / SUPABASE_ANON_KEY are not set")
        return config

    def _read_env_file(self) -> Dict[str, Optional[str]]:
        if not self.env_path.exists():
            return {}
        try:
            return dict(dotenv_values(self.env_path))
        except Exception as e:
            logger.warning(f"Error reading .env file: {e}")
            return {}


# Singleton instance
_config_manager = None

def get_config_manager() -> ConfigurationManager:
    """Get singleton ConfigurationManager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigurationManager()
    return _config_manager
