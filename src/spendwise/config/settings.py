"""Application settings loader from YAML configuration."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from spendwise.utils.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


@dataclass
class AppSettings:
    """Application-wide settings loaded from config.yaml."""

    # App info
    app_name: str
    app_version: str

    # Logging
    log_level: str
    log_dir: Optional[str]
    log_max_file_size_mb: int
    log_backup_count: int

    # LLM
    llm_model_name: str
    insight_temperature: float
    insight_max_tokens: int
    answer_temperature: float
    answer_max_tokens: int
    answer_max_lines: int
    categorize_temperature: float
    categorize_max_tokens: int

    # Records window
    lookback_days: int
    max_records: int

    # Storage
    database_file: str

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            env_path = os.getenv("SPENDWISE_CONFIG")
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        try:
            return cls(
                app_name=config["app"]["name"],
                app_version=str(config["app"]["version"]),
                log_level=config["logging"]["level"],
                log_dir=config["logging"].get("log_dir"),
                log_max_file_size_mb=config["logging"]["max_file_size_mb"],
                log_backup_count=config["logging"]["backup_count"],
                llm_model_name=config["llm"]["model_name"],
                insight_temperature=float(config["llm"]["insight_temperature"]),
                insight_max_tokens=int(config["llm"]["insight_max_tokens"]),
                answer_temperature=float(config["llm"]["answer_temperature"]),
                answer_max_tokens=int(config["llm"]["answer_max_tokens"]),
                answer_max_lines=int(config["llm"]["answer_max_lines"]),
                categorize_temperature=float(config["llm"]["categorize_temperature"]),
                categorize_max_tokens=int(config["llm"]["categorize_max_tokens"]),
                lookback_days=int(config["records"]["lookback_days"]),
                max_records=int(config["records"]["max_records"]),
                database_file=config["storage"]["database_file"]
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e

    @property
    def database_path(self) -> Path:
        return Path(self.database_file).expanduser()


def get_api_key() -> str:
    """Read the Gemini API key from the environment (or a .env file)."""
    load_dotenv()
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        raise ConfigError("GEMINI_API_KEY not found in environment")
    return api_key


# Global settings instance
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings
