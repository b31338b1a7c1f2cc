"""Application configuration."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field

from cally_accounts.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"

# Environment variable -> config key
ENV_OVERRIDES = {
    "CALLY_API_URL": "api_url",
    "CALLY_REQUEST_TIMEOUT": "request_timeout",
    "CALLY_SESSION_PATH": "session_path",
    "CALLY_ACCESS_TOKEN": "access_token",
    "CALLY_LOG_LEVEL": "log_level",
    "CALLY_LOG_FILE": "log_file",
}


class AppConfig(BaseModel):
    """Settings for talking to the Cally API."""

    api_url: str = "http://localhost:3001"
    request_timeout: float = Field(default=10, gt=0)
    session_path: str = "~/.cally/session.json"
    access_token: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_rotation: str = "10 MB"
    log_retention: str = "14 days"
    return_location: str = "/accounts"
    # Per-provider descriptor overrides, e.g. {"jira": {"linkable": True}}
    providers: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


def load_config(config_path: str = DEFAULT_CONFIG_PATH, environ: Optional[Dict[str, str]] = None) -> AppConfig:
    """Load the application configuration.

    Values come from the YAML file, then from ``CALLY_*`` environment
    variables. A missing file is not an error.

    Args:
        config_path: Path to the configuration file.
        environ: Environment to read overrides from; defaults to os.environ.

    Returns:
        The validated configuration.

    Raises:
        ValueError: If the file does not contain a mapping.
    """
    data: Dict[str, Any] = {}
    config_file = Path(config_path)

    if config_file.exists():
        with open(config_file, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration file {config_path} must contain a mapping")
        data.update(loaded)
        logger.debug(f"Loaded configuration from {config_path}")
    else:
        logger.debug(f"Config file {config_path} not found, using defaults")

    env = os.environ if environ is None else environ
    for var, key in ENV_OVERRIDES.items():
        if env.get(var):
            data[key] = env[var]

    return AppConfig.model_validate(data)
