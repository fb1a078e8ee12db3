"""Load bot configuration from YAML files."""

import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from boostsec.workflow_reconciler.models.provider_config import BotConfig

DRY_RUN_ENV = "WORKFLOW_RECONCILER_DRY_RUN"


def load_bot_config(config_file: Path | None = None) -> BotConfig:
    """Load the bot configuration.

    Args:
        config_file: YAML configuration file, defaults are used when omitted

    Returns:
        Parsed configuration, with dry run forced on by the environment

    Raises:
        FileNotFoundError: If the configuration file doesn't exist
        ValueError: If YAML is invalid or doesn't match schema

    """
    data: object = None

    if config_file is not None:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")

        try:
            with config_file.open() as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_file}: {e}") from e

    try:
        config = BotConfig.model_validate(data or {})
    except ValidationError as e:
        raise ValueError(f"Invalid bot configuration in {config_file}: {e}") from e

    if _env_flag(DRY_RUN_ENV):
        config.dry_run = True

    return config


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes"}
