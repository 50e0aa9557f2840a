# signaldesk/config.py
"""
Configuration management for the signaldesk library.

Settings are loaded from environment variables or a .env file.

Optional environment variables:
    LOG_LEVEL                    - Logging level (default: INFO)
    SIGNALDESK_HISTORY_LENGTH    - Candles kept per chart history (default: 200)
    SIGNALDESK_INDICATOR_CONFIG  - Path to a YAML indicator configuration

Example .env file:
    LOG_LEVEL=DEBUG
    SIGNALDESK_HISTORY_LENGTH=500
    SIGNALDESK_INDICATOR_CONFIG=indicators.yaml

Example indicator configuration:
    indicators:
      - type: rsi
        period: 14
      - type: bollinger
        period: 20
        k: 2.0
"""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml
from dotenv import load_dotenv

cwd_env = Path.cwd() / ".env"
if cwd_env.exists():
    load_dotenv(dotenv_path=cwd_env)
else:
    # Fallback to standard behavior (searches parents)
    load_dotenv()

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    """
    Global settings for the signaldesk library.

    Values are loaded from environment variables on initialization.
    Users can override these programmatically if needed:

        from signaldesk.config import settings
        settings.history_length = 500
    """

    log_level: str = "INFO"
    history_length: int = 200
    indicator_config: str | None = None

    def __post_init__(self):
        """
        Refresh values from environment after load_dotenv has run.
        This allows the global 'settings' instance to be populated correctly.
        """
        self.log_level = os.getenv("LOG_LEVEL", self.log_level)

        raw_length = os.getenv("SIGNALDESK_HISTORY_LENGTH")
        if raw_length:
            try:
                self.history_length = int(raw_length)
            except ValueError:
                # Reported by validate()
                self.history_length = -1

        self.indicator_config = os.getenv("SIGNALDESK_INDICATOR_CONFIG") or self.indicator_config

    def validate(self) -> None:
        """
        Validate settings.

        Raises:
            ValueError: If a setting is invalid
        """
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got '{self.log_level}'"
            )

        if self.history_length <= 0:
            raise ValueError(
                "SIGNALDESK_HISTORY_LENGTH must be a positive integer, "
                f"got '{os.getenv('SIGNALDESK_HISTORY_LENGTH', self.history_length)}'"
            )

        if self.indicator_config and not Path(self.indicator_config).exists():
            raise ValueError(
                f"SIGNALDESK_INDICATOR_CONFIG points to a missing file: {self.indicator_config}"
            )


def load_indicator_config(config_path: str | Path) -> dict:
    """
    Load indicator configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Dictionary containing configuration

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is empty, malformed or not a mapping
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_file) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")

    if config is None:
        raise ValueError(f"Empty config file: {config_path}")
    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    return config


# Global settings instance - loaded when module is imported
settings = Settings()
