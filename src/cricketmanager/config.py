"""
cricketmanager/config.py - Local configuration management

Reads an optional TOML file. Settings live under a [cricketmanager] table;
anything missing falls back to the defaults below.

Example:
    [cricketmanager]
    default_squad_slots = 11
    enforce_slot_conflicts = true
    strict_status_transitions = false
    team_placeholder = "Team"
    missing_team_placeholder = "TBD"
    log_level = "INFO"
"""

import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from cricketmanager.constants import (
    CONFIG_FILE_NAME,
    CONFIG_SECTION,
    DEFAULT_SQUAD_SLOTS,
    LOG_LEVEL_ENV,
    MISSING_TEAM_PLACEHOLDER,
    TEAM_PLACEHOLDER,
)
from cricketmanager.utils import log_level_name, setup_logger
from cricketmanager.utils.numbers import coerce_int

logger = setup_logger(__name__)

# ============================================================================
# Config dataclass
# ============================================================================


@dataclass
class CricketConfig:
    """Settings shared by the validation engine, scheduler and sync client."""

    default_squad_slots: int = DEFAULT_SQUAD_SLOTS
    enforce_slot_conflicts: bool = True
    strict_status_transitions: bool = False
    team_placeholder: str = TEAM_PLACEHOLDER
    missing_team_placeholder: str = MISSING_TEAM_PLACEHOLDER
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CricketConfig":
        """Build a config from a TOML table, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")
        config = cls(**{k: v for k, v in data.items() if k in known})
        config.default_squad_slots = coerce_int(
            config.default_squad_slots, DEFAULT_SQUAD_SLOTS, "default_squad_slots"
        )
        if config.default_squad_slots < 0:
            logger.warning("default_squad_slots must not be negative, using 0")
            config.default_squad_slots = 0
        level = log_level_name(config.log_level)
        if level is None:
            logger.warning(f"Unknown log_level {config.log_level!r}, using INFO")
            level = "INFO"
        config.log_level = level
        return config


# ============================================================================
# Loading
# ============================================================================


def default_config_path() -> Path:
    """``cricketmanager.toml`` in the working directory."""
    return Path.cwd() / CONFIG_FILE_NAME


def load_config(path: Optional[Union[str, Path]] = None) -> CricketConfig:
    """Load config from TOML. Returns defaults if the file doesn't exist.

    The ``CRICKETMANAGER_LOG_LEVEL`` environment variable overrides
    ``log_level``.
    """
    config_path = Path(path) if path is not None else default_config_path()

    data: Dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                raw = tomllib.load(f)
            data = raw.get(CONFIG_SECTION, {})
        except (tomllib.TOMLDecodeError, OSError) as e:
            logger.warning(f"Failed to read config {config_path}: {e}")
    else:
        logger.debug(f"No config at {config_path}, using defaults")

    config = CricketConfig.from_dict(data)

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        level = log_level_name(env_level)
        if level is None:
            logger.warning(f"Ignoring unknown {LOG_LEVEL_ENV}={env_level!r}")
        else:
            config.log_level = level

    return config
