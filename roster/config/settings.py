"""
Application settings.

Settings are resolved in three layers, later layers winning:

1. defaults declared on Settings
2. an optional YAML file (a flat mapping of field names to values)
3. environment variables, optionally pre-loaded from a .env file

Environment variables use the ROSTER_ prefix (ROSTER_DATA_DIR,
ROSTER_AT_RISK_THRESHOLD, ...). Database fields also accept the plain DB_HOST,
DB_PORT, DB_NAME, DB_USER and DB_PASSWORD names.

Example:
    settings = load_settings(config_file="config/roster.yaml")
    at_risk = service.get_at_risk_students(settings.at_risk_threshold)
"""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from roster.utils.validation import validate_threshold

# field name -> environment variables checked in order
ENV_VARS: dict[str, tuple[str, ...]] = {
    "db_host": ("ROSTER_DB_HOST", "DB_HOST"),
    "db_port": ("ROSTER_DB_PORT", "DB_PORT"),
    "db_name": ("ROSTER_DB_NAME", "DB_NAME"),
    "db_user": ("ROSTER_DB_USER", "DB_USER"),
    "db_password": ("ROSTER_DB_PASSWORD", "DB_PASSWORD"),
    "data_dir": ("ROSTER_DATA_DIR",),
    "at_risk_threshold": ("ROSTER_AT_RISK_THRESHOLD",),
    "top_performers_limit": ("ROSTER_TOP_PERFORMERS_LIMIT",),
    "log_level": ("ROSTER_LOG_LEVEL", "LOG_LEVEL"),
    "log_format": ("ROSTER_LOG_FORMAT",),
    "log_to_file": ("ROSTER_LOG_TO_FILE",),
    "log_file": ("ROSTER_LOG_FILE",),
}


class Settings(BaseModel):
    """Roster-wide settings."""

    # Database
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "roster"
    db_user: str = "roster"
    db_password: str | None = None

    # Files: exports, import error reports and the log file default here
    data_dir: Path = Path("data")

    # Reporting
    at_risk_threshold: float = Field(2.0, ge=0.0, le=4.0)
    top_performers_limit: int = Field(10, gt=0)

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_to_file: bool = True
    log_file: Path | None = None

    @property
    def log_path(self) -> Path | None:
        """File the logger writes to, or None when file logging is off."""
        if not self.log_to_file:
            return None
        return self.log_file or self.data_dir / "app.log"

    def with_threshold(self, threshold: float) -> "Settings":
        """Return a copy with a different at-risk threshold."""
        return self.model_copy(update={"at_risk_threshold": validate_threshold(threshold)})


def _read_config_file(config_file: str | Path) -> dict[str, Any]:
    path = Path(config_file)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    with open(path, encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Configuration file must contain a mapping: {config_file}")

    unknown = set(config) - set(Settings.model_fields)
    if unknown:
        raise ValueError(f"Unknown settings in {config_file}: {', '.join(sorted(unknown))}")

    return config


def _read_environment() -> dict[str, str]:
    values = {}
    for field_name, env_names in ENV_VARS.items():
        for env_name in env_names:
            value = os.getenv(env_name)
            if value is not None and value != "":
                values[field_name] = value
                break
    return values


def load_settings(
    config_file: str | Path | None = None,
    env_file: str | Path | None = None,
) -> Settings:
    """
    Build Settings from defaults, an optional YAML file and the environment.

    Args:
        config_file: Optional YAML file with setting overrides
        env_file: Optional .env file; when omitted a .env in the working
                  directory is used if present. Variables already set in the
                  environment are not overridden.

    Returns:
        Validated Settings

    Raises:
        FileNotFoundError: If config_file or env_file does not exist
        ValueError: If the YAML file is malformed
        pydantic.ValidationError: If a value has the wrong type or range
    """
    if env_file is not None:
        if not Path(env_file).exists():
            raise FileNotFoundError(f"Environment file not found: {env_file}")
        load_dotenv(env_file, override=False)
    else:
        found = find_dotenv(usecwd=True)
        if found:
            load_dotenv(found, override=False)

    values: dict[str, Any] = {}
    if config_file is not None:
        values.update(_read_config_file(config_file))
    values.update(_read_environment())

    return Settings(**values)
