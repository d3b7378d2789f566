"""
Configuration module for hand teleoperation.

Handles loading and saving the teleoperation config (robot address, send
settings and the per-servo formula registry).
"""

import logging
import os
from pathlib import Path

from hand_teleop.formula import get_error_message
from hand_teleop.shared.constants import (
    CONFIG_PATH_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    SERVO_NAMES,
)
from hand_teleop.shared.types import ServoDefinition, TeleopConfig

logger = logging.getLogger(__name__)


def _resolve_path(filepath: str | None) -> Path:
    # If no filepath provided, use filepath from environment variable or default path
    if filepath is None:
        filepath = os.environ.get(CONFIG_PATH_ENV_VAR, DEFAULT_CONFIG_PATH)
    return Path(filepath)


def get_default_config() -> TeleopConfig:
    """
    Create default if no config file exists.
    """
    return TeleopConfig()


def get_servo_definitions(config: TeleopConfig) -> list[ServoDefinition]:
    """
    Describe every known servo, with max values taken from the config.
    """
    return [
        ServoDefinition(id=servo_id, name=name, max_value=config.max_value_for(servo_id))
        for servo_id, name in SERVO_NAMES.items()
    ]


def log_invalid_formulas(config: TeleopConfig) -> dict[str, str]:
    """
    Log a warning for every non-blank formula that does not parse.

    Returns:
        dict[str, str]: Error message keyed by servo id.
    """
    errors = {}
    for servo_id, formula in config.formulas.items():
        if not formula.strip():
            continue
        message = get_error_message(formula)
        if message is not None:
            logger.warning(f"Invalid formula for servo {servo_id}: {message}")
            errors[servo_id] = message
    return errors


def load_config(filepath: str | None = None) -> TeleopConfig:
    """
    Load config from JSON file.

    Args:
        filepath (str | None): Path to config file. If None, uses the
                               HAND_TELEOP_CONFIG_PATH environment variable or
                               the default path (data/config/robot-hand-config.json).

    Returns:
        TeleopConfig: Loaded config.

    Raises:
        ValueError: If the file content is invalid.
    """
    path = _resolve_path(filepath)

    # If file does not exist or is empty, return default config
    if not path.exists() or path.stat().st_size == 0:
        logger.warning(f"Config file not found or empty: {path}")
        logger.info("Using default config.")
        return get_default_config()

    with open(path) as f:
        data = f.read()
    # Pydantic validation
    config = TeleopConfig.model_validate_json(data)

    # Invalid formulas are kept so the registry mirrors the file
    log_invalid_formulas(config)
    logger.info(f"Loaded {len(config.formulas)} formula(s) from {path}")
    return config


def save_config(config: TeleopConfig, filepath: str | None = None) -> str:
    """
    Save config to JSON file.

    Args:
        config (TeleopConfig): Config to save.
        filepath (str | None): Path to save config file. If None, uses the
                               HAND_TELEOP_CONFIG_PATH environment variable or
                               the default path.

    Returns:
        str: Path to saved config file.
    """
    path = _resolve_path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    model_json = config.model_dump_json(by_alias=True, indent=2)

    # write to temp file first then move
    tmp_path = path.with_suffix(".tmp")
    try:
        with open(tmp_path, "w") as f:
            f.write(model_json)
            f.flush()
            os.fsync(f.fileno())  # force write to disk

        tmp_path.replace(path)
    except OSError as e:
        if tmp_path.exists():
            tmp_path.unlink()
        logger.error(f"Error saving config file: {e}")
        raise e

    logger.info(f"Config saved to: {path}")
    return str(path)
