import logging
import os
import sys
from pathlib import Path
from typing import Any

import logfire
import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from solarex.infrastructure.whitelist.program_address import DEFAULT_SEED_PREFIX

# Program that owns every solarex account
DEFAULT_PROGRAM_ID = "p1exdMJcjVao65QdewkaZRUnU6VPSXhus9n2GzWfh98"


# =============================================================================
# Program Configuration
# =============================================================================


class ProgramConfig(BaseModel):
    """On-chain identifiers (nested in Config, uses env_nested_delimiter)."""

    program_id: str = DEFAULT_PROGRAM_ID  # Expected owner of every account
    store_id: str | None = None  # Store served by this deployment; None disables store scoping
    whitelist_seed_prefix: str = DEFAULT_SEED_PREFIX  # First seed of whitelisted creator addresses


class RoutingConfig(BaseModel):
    """Routing behaviour (nested in Config, uses env_nested_delimiter)."""

    include_all_stores: bool = False  # Index auction managers of every store
    name_overrides_file: str | None = None  # JSON table of creator display fields


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by SOLAREX_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load config from YAML file if specified."""
        config_file = os.environ.get("SOLAREX_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from SOLAREX_LOG_FILE env var."""
        return os.environ.get("SOLAREX_LOG_FILE")


class Config(BaseSettings):
    program: ProgramConfig = ProgramConfig()
    routing: RoutingConfig = RoutingConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = {
        "env_prefix": "SOLAREX_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows SOLAREX_PROGRAM__STORE_ID override
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - SOLAREX_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup so all module loggers
    pick up the configuration. Logfire spans are only exported when a
    Logfire token is present in the environment.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(config.level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logfire.configure(send_to_logfire="if-token-present", console=False)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
